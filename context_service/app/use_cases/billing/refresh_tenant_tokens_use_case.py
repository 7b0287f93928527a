"""
Refresh Tenant Tokens Use Case

Scheduled job trading each tenant's stored refresh token for a fresh
monday.com access token.
"""

import logging

from context_service.app.services.identity_provider import IOAuthClient
from context_service.app.services.token_cipher import TokenCipher
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.domain.errors import DependencyError
from context_service.libs.result import Result, Return

from .dtos import TokenRefreshResponse

logger = logging.getLogger(__name__)


class RefreshTenantTokensUseCase:
    """
    Business Rules:
    - Only tenants with a stored refresh token are refreshed
    - The old refresh token is kept when monday.com does not rotate it
    - Both tokens are stored encrypted
    - A failing tenant is logged and skipped; the others still refresh
    """

    def __init__(self, uow: UnitOfWork, oauth_client: IOAuthClient, cipher: TokenCipher):
        self.uow = uow
        self.oauth_client = oauth_client
        self.cipher = cipher

    async def execute(self) -> Result[TokenRefreshResponse]:
        refreshed = failed = skipped = 0

        async with self.uow:
            tenants = await self.uow.tenants.list_with_refresh_token()
            for tenant in tenants:
                current = self.cipher.decrypt(tenant.refresh_token)
                if not current:
                    logger.warning("Stored refresh token for account %s is unreadable", tenant.account_id)
                    skipped += 1
                    continue

                try:
                    tokens = await self.oauth_client.refresh_token(current)
                except DependencyError as exc:
                    logger.warning("Token refresh failed for account %s: %s", tenant.account_id, exc)
                    failed += 1
                    continue

                tenant.access_token = self.cipher.encrypt(tokens.access_token)
                tenant.refresh_token = self.cipher.encrypt(tokens.refresh_token or current)
                await self.uow.tenants.update(tenant)
                await self.uow.commit()
                refreshed += 1

        logger.info(
            "monday token refresh: %s tenants, %s refreshed, %s failed, %s skipped",
            len(tenants),
            refreshed,
            failed,
            skipped,
        )
        return Return.ok(
            TokenRefreshResponse(tenants=len(tenants), refreshed=refreshed, failed=failed, skipped=skipped)
        )
