from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field

from context_service.api.error import ServerError
from context_service.api.utils.board_ref import BoardId, board_ref
from context_service.api.utils.rate_limit import read_rate_limit
from context_service.app.services.identity_provider import IIdentityProvider, SessionIdentity
from context_service.app.services.token_cipher import TokenCipher
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.app.use_cases.context import (
    ContextResponse,
    GetUsageUseCase,
    ResolveContextUseCase,
    UsageResponse,
)
from context_service.depends import (
    get_identity_provider,
    get_session_identity,
    get_token_cipher,
    get_unit_of_work,
)

router = APIRouter(tags=["Context"])


class ResolveContextRequest(BaseModel):
    """
    Resolve context HTTP request payload

    The board id falls back to the one in the session token.
    """

    model_config = ConfigDict(populate_by_name=True)

    board_id: Optional[BoardId] = Field(None, alias="boardId", description="monday.com board id")


@router.post(
    "/context/resolve",
    status_code=status.HTTP_200_OK,
    response_model=ContextResponse,
    dependencies=[Depends(read_rate_limit)],
)
async def resolve_context(
    request: ResolveContextRequest,
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Resolve Tenant and Board

    Maps the session's account and board to internal ids, provisioning the
    tenant and board on first touch.

    Raises:
        - 400 Bad Request: Missing or malformed board id
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Board limit reached or viewer restricted
        - 502 Bad Gateway: monday.com unavailable
    """
    use_case = ResolveContextUseCase(uow, identity_provider, cipher)
    result = await use_case.execute(session, board_ref(request.board_id, session))

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get(
    "/usage",
    status_code=status.HTTP_200_OK,
    response_model=UsageResponse,
    dependencies=[Depends(read_rate_limit)],
)
async def get_usage(
    board_id: Optional[str] = Query(None, alias="boardId"),
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Plan Usage

    Returns the tenant's plan, caps and current usage counters.

    Raises:
        - 400 Bad Request: Missing board id
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Board limit reached or viewer restricted
    """
    use_case = GetUsageUseCase(uow, identity_provider, cipher)
    result = await use_case.execute(session, board_ref(board_id, session))

    if result.is_err():
        raise ServerError(result.error)

    return result.value
