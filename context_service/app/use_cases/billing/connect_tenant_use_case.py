"""
Connect Tenant Use Case

OAuth callback: exchanges the authorization code and stores the account's
tokens encrypted on its tenant.
"""

import logging

from context_service.app.services.identity_provider import IIdentityProvider, IOAuthClient
from context_service.app.services.token_cipher import TokenCipher
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.domain.base import account_key
from context_service.libs.result import Error, Result, Return

from .dtos import ConnectTenantResponse

logger = logging.getLogger(__name__)


class ConnectTenantUseCase:
    """
    Business Rules:
    - The account id comes from the token response, else from an account query
    - The tenant is upserted by canonical account id
    - Tokens are never stored in clear text
    """

    def __init__(
        self,
        uow: UnitOfWork,
        oauth_client: IOAuthClient,
        identity_provider: IIdentityProvider,
        cipher: TokenCipher,
    ):
        self.uow = uow
        self.oauth_client = oauth_client
        self.identity_provider = identity_provider
        self.cipher = cipher

    async def execute(self, code: str) -> Result[ConnectTenantResponse]:
        if not code:
            return Return.err(Error("MISSING_CODE", "Authorization code is required"))

        tokens = await self.oauth_client.exchange_code(code)
        account = tokens.account_id
        if account is None:
            account = await self.identity_provider.fetch_account_id(tokens.access_token)
        key = account_key(account)
        if key is None:
            logger.error("OAuth callback could not determine the account id")
            return Return.err(Error("ACCOUNT_UNRESOLVED", "Could not determine the monday.com account"))

        async with self.uow:
            tenant = await self.uow.tenants.upsert_credentials(
                key,
                self.cipher.encrypt(tokens.access_token),
                self.cipher.encrypt(tokens.refresh_token),
            )
            tenant_id = tenant.id
            await self.uow.commit()

        logger.info("Connected account %s", key)
        return Return.ok(ConnectTenantResponse(tenant_id=str(tenant_id), account_id=key))
