import logging

from context_service.app.services.identity_provider import SessionIdentity
from context_service.app.use_cases.base import BoardScopedUseCase
from context_service.libs.result import Result, Return

from .dtos import BoardAdminDeleteResponse

logger = logging.getLogger(__name__)


class SetBoardAdminDeleteUseCase(BoardScopedUseCase):
    """Account admins toggle whether board owners may delete their boards"""

    async def execute(
        self, session: SessionIdentity, monday_board_id: str, enabled: bool
    ) -> Result[BoardAdminDeleteResponse]:
        async with self.uow:
            resolved = await self._enter_board(session, monday_board_id)
            await self.authority.ensure_admin(resolved.board, session.user_id, resolved.credential)

            tenant = resolved.tenant
            tenant.board_admin_delete_enabled = bool(enabled)
            await self.uow.tenants.update(tenant)
            await self.uow.commit()

            logger.info("User %s set board_admin_delete_enabled=%s", session.user_id, bool(enabled))
            return Return.ok(BoardAdminDeleteResponse(board_admin_delete_enabled=bool(enabled)))
