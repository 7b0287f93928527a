import logging

from context_service.app.services.identity_provider import SessionIdentity
from context_service.app.use_cases.base import BoardScopedUseCase
from context_service.domain.errors import AuthorizationError
from context_service.domain.viewer_roles import NON_PRIVILEGED
from context_service.libs.result import Error, Result, Return

from .dtos import RemoveViewerResponse

logger = logging.getLogger(__name__)


class RemoveViewerUseCase(BoardScopedUseCase):
    """
    Business Rules:
    - Only live account admins
    - Neither the caller nor an admin/owner can be removed
    """

    async def execute(
        self, session: SessionIdentity, monday_board_id: str, target_user_id: str
    ) -> Result[RemoveViewerResponse]:
        target_user_id = str(target_user_id or "").strip()
        if not target_user_id:
            return Return.err(Error("INVALID_USER", "userId is required"))

        async with self.uow:
            resolved = await self._enter_board(session, monday_board_id)
            if not session.user_id:
                raise AuthorizationError(AuthorizationError.ADMIN_REQUIRED)
            acting_user_id = str(session.user_id)

            facts = await self.authority.role_facts(
                resolved.credential, resolved.board.monday_board_id, [acting_user_id, target_user_id]
            )
            if not facts.get(acting_user_id, NON_PRIVILEGED).is_admin:
                raise AuthorizationError(AuthorizationError.ADMIN_REQUIRED)
            if acting_user_id == target_user_id:
                raise AuthorizationError(AuthorizationError.SELF_MODIFICATION)
            if facts.get(target_user_id, NON_PRIVILEGED).is_privileged:
                raise AuthorizationError(AuthorizationError.PRIVILEGED_TARGET)

            row = await self.uow.viewers.get(resolved.board.id, target_user_id)
            if row is None:
                return Return.err(Error("VIEWER_NOT_FOUND", "Viewer not found"))

            await self.uow.viewers.delete(resolved.board.id, target_user_id)
            await self.uow.commit()

            logger.info(
                "User %s removed viewer %s from board %s",
                acting_user_id,
                target_user_id,
                resolved.board.monday_board_id,
            )
            return Return.ok(RemoveViewerResponse(removed=True, monday_user_id=target_user_id))
