"""
Start Checkout Use Case

Creates a marketplace checkout for a plan upgrade.
"""

import logging
from typing import Mapping, Optional

from context_service.app.services.identity_provider import IIdentityProvider, SessionIdentity
from context_service.app.services.token_cipher import TokenCipher
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.app.use_cases.base import BoardScopedUseCase
from context_service.domain.entities import BillingStatus, PlanId
from context_service.domain.plans import PLAN_SKU_KEYS
from context_service.libs.result import Error, Result, Return

from .dtos import CheckoutResponse

logger = logging.getLogger(__name__)


class StartCheckoutUseCase(BoardScopedUseCase):
    """
    Business Rules:
    - Only live account admins
    - planSku is a SKU key (e.g. pro_monthly) configured in MONDAY_PLAN_SKUS
    - The tenant records the pending plan until the marketplace webhook lands
    """

    def __init__(
        self,
        uow: UnitOfWork,
        identity_provider: IIdentityProvider,
        sku_mapping: Optional[Mapping[str, str]] = None,
        cipher: Optional[TokenCipher] = None,
    ):
        super().__init__(uow, identity_provider, cipher)
        self.sku_mapping = sku_mapping or {}

    async def execute(
        self, session: SessionIdentity, monday_board_id: str, plan_sku: str
    ) -> Result[CheckoutResponse]:
        key = str(plan_sku or "").strip().lower()
        plan = PLAN_SKU_KEYS.get(key)
        if plan is None or plan == PlanId.free:
            return Return.err(Error("INVALID_SKU", "Unknown plan SKU"))
        sku = self.sku_mapping.get(key)
        if not sku:
            return Return.err(Error("SKU_NOT_CONFIGURED", "Plan SKU is not configured"))

        async with self.uow:
            resolved = await self._enter_board(session, monday_board_id)
            await self.authority.ensure_admin(resolved.board, session.user_id, resolved.credential)
            if not resolved.credential:
                return Return.err(Error("TENANT_NOT_CONNECTED", "Account has not authorized the app"))

            url = await self.identity_provider.create_checkout_url(resolved.credential, sku)

            tenant = resolved.tenant
            tenant.pending_plan = plan
            tenant.billing_status = BillingStatus.pending
            await self.uow.tenants.update(tenant)
            await self.uow.commit()

            logger.info("Checkout started for account %s towards plan %s", tenant.account_id, plan.value)
            return Return.ok(CheckoutResponse(url=url, plan=plan.value))
