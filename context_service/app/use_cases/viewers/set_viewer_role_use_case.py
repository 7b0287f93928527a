"""
Set Viewer Role Use Case

Account admins grant or revoke access of a user on a board.
"""

import logging

from context_service.app.services.identity_provider import SessionIdentity
from context_service.app.use_cases.base import BoardScopedUseCase
from context_service.domain.viewer_roles import from_stored_status, normalise_role_input
from context_service.libs.result import Error, Result, Return

from .dtos import ViewerItem

logger = logging.getLogger(__name__)


class SetViewerRoleUseCase(BoardScopedUseCase):
    """
    Business Rules:
    - Only live account admins, never on themselves
    - The role must be offered by the tenant's plan
    - Admins and owners cannot be restricted
    - The plan's viewer cap applies to non-privileged viewers
    - Cap trimming and profile refresh afterwards are best-effort
    """

    async def execute(
        self, session: SessionIdentity, monday_board_id: str, target_user_id: str, role: str
    ) -> Result[ViewerItem]:
        requested = normalise_role_input(role)
        if requested is None:
            return Return.err(Error("INVALID_ROLE", "role must be viewer, restricted or editor"))
        target_user_id = str(target_user_id or "").strip()
        if not target_user_id:
            return Return.err(Error("INVALID_USER", "userId is required"))

        async with self.uow:
            resolved = await self._enter_board(session, monday_board_id)
            board = resolved.board

            await self.authority.set_role(
                board, target_user_id, requested, session.user_id, resolved.plan, resolved.credential
            )

            if resolved.caps.max_viewers is not None and resolved.credential:
                try:
                    await self.authority.enforce_viewer_cap(
                        board, resolved.credential, resolved.caps.max_viewers
                    )
                except Exception as exc:
                    logger.warning("Viewer cap enforcement failed for board %s: %s", board.monday_board_id, exc)

            viewer = await self.uow.viewers.get(board.id, target_user_id)
            if resolved.credential:
                try:
                    profiles = await self.identity_provider.fetch_users(resolved.credential, [target_user_id])
                    profile = profiles.get(target_user_id)
                    if profile and (profile.name, profile.email) != (viewer.name, viewer.email):
                        viewer.name = profile.name
                        viewer.email = profile.email
                        viewer = await self.uow.viewers.update(viewer)
                        await self.uow.commit()
                except Exception as exc:
                    logger.warning("Profile refresh failed for user %s: %s", target_user_id, exc)

            return Return.ok(
                ViewerItem(
                    monday_user_id=viewer.monday_user_id,
                    role=from_stored_status(viewer.status).value,
                    name=viewer.name,
                    email=viewer.email,
                    updated_at=viewer.updated_at,
                )
            )
