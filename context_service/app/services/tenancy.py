"""
Tenant/Board Resolver and Usage Accountant.

Every board-scoped request passes through ``TenantBoardResolver.resolve``,
which lazily provisions the tenant and board and enforces the board cap.
``UsageAccountant`` owns the tenant storage counter; every File lifecycle
change is paired with exactly one ``increment_storage`` call.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from context_service.app.services.token_cipher import TokenCipher
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.domain.base import account_key
from context_service.domain.entities import Board, LimitKind, PlanId, Tenant
from context_service.domain.errors import LimitError, ValidationError
from context_service.domain.plans import PlanCaps, caps_for_plan, normalise_plan_id

logger = logging.getLogger(__name__)

MAX_BOARD_ID_LENGTH = 64


@dataclass
class ResolvedContext:
    tenant: Tenant
    board: Board
    plan: PlanId
    caps: PlanCaps
    board_was_created: bool
    credential: Optional[str] = None


@dataclass(frozen=True)
class UsageReport:
    plan: PlanId
    caps: PlanCaps
    boards_used: int
    storage_bytes_used: int
    viewers_used: int

    def as_dict(self) -> dict:
        return {
            "plan": self.plan.value,
            "caps": self.caps.as_dict(),
            "usage": {
                "boards_used": self.boards_used,
                "storage_bytes_used": self.storage_bytes_used,
                "viewers_used": self.viewers_used,
            },
        }


def normalise_board_id(value) -> str:
    board_id = str(value).strip() if value is not None else ""
    if not board_id:
        raise ValidationError("Missing boardId")
    if len(board_id) > MAX_BOARD_ID_LENGTH:
        raise ValidationError("boardId is too long")
    return board_id


class UsageAccountant:
    """Reports usage against plan caps and applies storage deltas atomically"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def get_usage(self, tenant_id: UUID) -> UsageReport:
        tenant = await self.uow.tenants.get_by_id(tenant_id)
        if tenant is None:
            raise ValidationError("Unknown tenant")
        plan = normalise_plan_id(tenant.plan)
        return UsageReport(
            plan=plan,
            caps=caps_for_plan(plan),
            boards_used=await self.uow.boards.count_by_tenant(tenant_id),
            storage_bytes_used=int(tenant.storage_bytes_used or 0),
            viewers_used=await self.uow.viewers.count_active_by_tenant(tenant_id),
        )

    async def increment_storage(self, tenant_id: UUID, delta_bytes: int) -> None:
        """Add delta_bytes (may be negative) in a single store-side UPDATE"""
        if not delta_bytes:
            return
        await self.uow.tenants.increment_storage(tenant_id, int(delta_bytes))

    async def ensure_storage_available(self, tenant_id: UUID, additional_bytes: int) -> UsageReport:
        """Raise LimitError(storage) when additional_bytes would exceed the cap"""
        usage = await self.get_usage(tenant_id)
        cap = usage.caps.max_storage_bytes
        if cap is not None and usage.storage_bytes_used + additional_bytes > cap:
            raise LimitError(LimitKind.storage, usage.plan, limit=cap, message="Storage cap exceeded")
        return usage

    async def storage_drift(self, tenant_id: UUID) -> int:
        """Counter minus the live sum of File sizes; zero when the books balance"""
        tenant = await self.uow.tenants.get_by_id(tenant_id)
        actual = await self.uow.files.sum_size_by_tenant(tenant_id)
        return int(tenant.storage_bytes_used or 0) - actual


class TenantBoardResolver:
    """
    Resolves (account id, board id) to tenant and board, provisioning both lazily.

    Business Rules:
    - Exactly one tenant per canonical account id (insert-if-absent)
    - A new board counts against max_boards; the check is a soft bound under
      concurrent first touches of different boards
    - Viewer cap trimming is best-effort and never fails the request

    The unit of work must already be entered by the caller.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        cipher: Optional[TokenCipher] = None,
        authority=None,
    ):
        self.uow = uow
        self.cipher = cipher
        self.authority = authority

    async def resolve(
        self, account_id, monday_board_id, user_id: Optional[str] = None
    ) -> ResolvedContext:
        """
        Args:
            account_id: monday.com account id (number or string)
            monday_board_id: monday.com board id
            user_id: calling monday.com user id, if known

        Returns:
            ResolvedContext with tenant, board, caps and board_was_created

        Raises:
            ValidationError: missing account or board id
            LimitError: board cap reached for a new board
        """
        key = account_key(account_id)
        if key is None:
            raise ValidationError("Missing account id")
        board_key = normalise_board_id(monday_board_id)

        provisioned = False
        tenant = await self.uow.tenants.get_by_account_id(key)
        if tenant is None:
            tenant = await self.uow.tenants.get_or_create(key)
            provisioned = True
            logger.info("Provisioned tenant for account %s", key)

        plan = normalise_plan_id(tenant.plan)
        caps = caps_for_plan(plan)

        board_was_created = False
        board = await self.uow.boards.get_by_monday_id(tenant.id, board_key)
        if board is None:
            boards_used = await self.uow.boards.count_by_tenant(tenant.id)
            if caps.max_boards is not None and boards_used >= caps.max_boards:
                if provisioned:
                    await self.uow.commit()
                logger.warning(
                    "Board cap %s reached for account %s (plan %s)", caps.max_boards, key, plan.value
                )
                raise LimitError(LimitKind.boards, plan, limit=caps.max_boards, message="Board limit reached")
            board, board_was_created = await self.uow.boards.create_if_absent(tenant.id, board_key)
            provisioned = True
            if board_was_created:
                logger.info("Provisioned board %s for account %s (user %s)", board_key, key, user_id)

        if provisioned:
            await self.uow.commit()

        credential = self.cipher.decrypt(tenant.access_token) if self.cipher else tenant.access_token

        if caps.max_viewers is not None and self.authority is not None and credential:
            try:
                await self.authority.enforce_viewer_cap(board, credential, caps.max_viewers)
            except Exception as exc:
                logger.warning(
                    "Viewer cap enforcement failed for board %s: %s", board.monday_board_id, exc
                )

        return ResolvedContext(
            tenant=tenant,
            board=board,
            plan=plan,
            caps=caps,
            board_was_created=board_was_created,
            credential=credential,
        )
