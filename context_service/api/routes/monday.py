from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from config import ApplicationConfig
from context_service.api.error import ClientError, ServerError
from context_service.api.utils.oauth_state import create_state, verify_state
from context_service.app.services.identity_provider import IIdentityProvider, IOAuthClient
from context_service.app.services.token_cipher import TokenCipher
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.app.use_cases.billing import ConnectTenantResponse, ConnectTenantUseCase
from context_service.depends import (
    get_identity_provider,
    get_oauth_client,
    get_token_cipher,
    get_unit_of_work,
)
from context_service.libs.result import Error

router = APIRouter(prefix="/monday", tags=["monday.com"])


class OAuthStartResponse(BaseModel):
    """Authorize URL the browser is sent to"""

    url: str
    state: str


@router.get("/oauth/start", status_code=status.HTTP_200_OK, response_model=OAuthStartResponse)
async def oauth_start():
    """
    Start OAuth Install

    Returns the monday.com authorize URL with a signed, time-boxed state.
    """
    state = create_state(ApplicationConfig.OAUTH_STATE_SECRET)
    params = {"client_id": ApplicationConfig.MONDAY_CLIENT_ID, "state": state}
    if ApplicationConfig.MONDAY_OAUTH_REDIRECT_URI:
        params["redirect_uri"] = ApplicationConfig.MONDAY_OAUTH_REDIRECT_URI
    return OAuthStartResponse(
        url=f"{ApplicationConfig.MONDAY_OAUTH_AUTHORIZE_URL}?{urlencode(params)}",
        state=state,
    )


@router.get("/oauth/callback", status_code=status.HTTP_200_OK, response_model=ConnectTenantResponse)
async def oauth_callback(
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    uow: UnitOfWork = Depends(get_unit_of_work),
    oauth_client: IOAuthClient = Depends(get_oauth_client),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    OAuth Callback

    Exchanges the code and stores the account's tokens encrypted.

    Raises:
        - 400 Bad Request: Missing code, or state invalid or expired
        - 502 Bad Gateway: Token exchange failed or account unresolved
    """
    if not verify_state(
        state, ApplicationConfig.OAUTH_STATE_SECRET, ApplicationConfig.OAUTH_STATE_TTL_SECONDS
    ):
        raise ClientError(Error("INVALID_STATE", "OAuth state is invalid or expired"))

    use_case = ConnectTenantUseCase(uow, oauth_client, identity_provider, cipher)
    result = await use_case.execute(code)

    if result.is_err():
        error = result.error
        if error.code == "MISSING_CODE":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "ACCOUNT_UNRESOLVED":
            raise ClientError(error, status_code=status.HTTP_502_BAD_GATEWAY)
        raise ServerError(error)

    return result.value
