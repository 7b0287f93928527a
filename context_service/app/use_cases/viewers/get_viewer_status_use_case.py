from context_service.app.services.identity_provider import SessionIdentity
from context_service.app.use_cases.base import BoardScopedUseCase
from context_service.domain.viewer_roles import NON_PRIVILEGED, AccessLevel, effective_access
from context_service.libs.result import Error, Result, Return

from .dtos import ViewerStatusResponse

ROLE_BY_ACCESS = {
    AccessLevel.none: "restricted",
    AccessLevel.viewer: "viewer",
    AccessLevel.editor: "editor",
}


class GetViewerStatusUseCase(BoardScopedUseCase):
    """Caller's effective role, merging the stored status with live admin/owner facts"""

    async def execute(self, session: SessionIdentity, monday_board_id: str) -> Result[ViewerStatusResponse]:
        if not session.user_id:
            return Return.err(Error("USER_REQUIRED", "Session has no user id"))

        async with self.uow:
            resolved = await self._enter_board(session, monday_board_id)
            row = await self.uow.viewers.get(resolved.board.id, session.user_id)
            facts = await self.authority.role_facts(
                resolved.credential, resolved.board.monday_board_id, [session.user_id]
            )
            actor = facts.get(str(session.user_id), NON_PRIVILEGED)
            access = effective_access(row.status if row else None, actor)

            return Return.ok(
                ViewerStatusResponse(
                    role=ROLE_BY_ACCESS[access],
                    is_admin=actor.is_admin,
                    is_owner=actor.is_owner,
                    can_edit=access == AccessLevel.editor,
                    can_manage=actor.is_admin,
                )
            )
