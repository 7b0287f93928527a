import json
import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, ConfigDict, Field

from config import ApplicationConfig
from context_service.api.error import ClientError, ServerError
from context_service.api.utils.board_ref import BoardId, board_ref
from context_service.api.utils.rate_limit import viewer_mutation_rate_limit
from context_service.api.utils.webhook_signature import verify_webhook_authorization
from context_service.app.services.identity_provider import IIdentityProvider, SessionIdentity
from context_service.app.services.object_storage import IObjectStorage
from context_service.app.services.token_cipher import TokenCipher
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.app.use_cases.billing import (
    CheckoutResponse,
    HandleMarketplaceEventUseCase,
    StartCheckoutUseCase,
    WebhookResponse,
)
from context_service.depends import (
    get_identity_provider,
    get_object_storage,
    get_session_identity,
    get_sku_mapping,
    get_token_cipher,
    get_unit_of_work,
)
from context_service.libs.result import Error

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Billing"])


class CheckoutRequest(BaseModel):
    """
    Checkout HTTP request payload
    """

    model_config = ConfigDict(populate_by_name=True)

    board_id: Optional[BoardId] = Field(None, alias="boardId", description="monday.com board id")
    plan_sku: str = Field(..., alias="planSku", description="SKU key, e.g. pro_monthly")


@router.post("/billing/webhook", status_code=status.HTTP_200_OK, response_model=WebhookResponse)
@router.post("/monday/webhook", status_code=status.HTTP_200_OK, response_model=WebhookResponse)
async def marketplace_webhook(
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    storage: IObjectStorage = Depends(get_object_storage),
    sku_mapping: Dict[str, str] = Depends(get_sku_mapping),
):
    """
    monday.com Marketplace Webhook

    Authenticated by a signed JWT or a body HMAC in the Authorization header.

    Raises:
        - 400 Bad Request: Body is not a JSON object or lacks the account id
        - 401 Unauthorized: Signature missing or invalid
    """
    raw_body = await request.body()
    if not verify_webhook_authorization(
        request.headers.get("authorization"), raw_body, ApplicationConfig.MONDAY_SIGNING_SECRET
    ):
        raise ClientError(
            Error("INVALID_SIGNATURE", "Webhook signature is missing or invalid"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    try:
        payload = json.loads(raw_body or b"{}")
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        raise ClientError(Error("INVALID_PAYLOAD", "Webhook body must be a JSON object"))

    use_case = HandleMarketplaceEventUseCase(uow, storage, sku_mapping)
    result = await use_case.execute(payload)

    if result.is_err():
        error = result.error
        if error.code in ("MISSING_ACCOUNT_ID", "MISSING_BOARD_REFERENCE"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.post(
    "/billing/checkout",
    status_code=status.HTTP_200_OK,
    response_model=CheckoutResponse,
    dependencies=[Depends(viewer_mutation_rate_limit)],
)
async def start_checkout(
    request: CheckoutRequest,
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    cipher: TokenCipher = Depends(get_token_cipher),
    sku_mapping: Dict[str, str] = Depends(get_sku_mapping),
):
    """
    Start Plan Checkout

    Raises:
        - 400 Bad Request: Unknown or unconfigured plan SKU
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Admin required
        - 409 Conflict: Account has not authorized the app
        - 502 Bad Gateway: monday.com checkout failed
    """
    use_case = StartCheckoutUseCase(uow, identity_provider, sku_mapping, cipher)
    result = await use_case.execute(session, board_ref(request.board_id, session), request.plan_sku)

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_SKU", "SKU_NOT_CONFIGURED"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "TENANT_NOT_CONNECTED":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value
