import logging
from typing import Dict

from context_service.app.services.identity_provider import SessionIdentity, UserProfile
from context_service.app.use_cases.base import BoardScopedUseCase
from context_service.domain.viewer_roles import from_stored_status
from context_service.libs.result import Result, Return

from .dtos import ViewerItem, ViewerListResponse

logger = logging.getLogger(__name__)


class ListViewersUseCase(BoardScopedUseCase):
    """Stored viewer rows of a board, most recently changed first"""

    async def execute(self, session: SessionIdentity, monday_board_id: str) -> Result[ViewerListResponse]:
        async with self.uow:
            resolved = await self._enter_board(session, monday_board_id)
            rows = await self.uow.viewers.list_by_board(resolved.board.id)

            profiles: Dict[str, UserProfile] = {}
            if resolved.credential and rows:
                try:
                    profiles = await self.identity_provider.fetch_users(
                        resolved.credential, [row.monday_user_id for row in rows]
                    )
                except Exception as exc:
                    logger.warning("Viewer profile lookup failed: %s", exc)

            viewers = []
            for row in rows:
                profile = profiles.get(row.monday_user_id)
                viewers.append(
                    ViewerItem(
                        monday_user_id=row.monday_user_id,
                        role=from_stored_status(row.status).value,
                        name=(profile.name if profile else None) or row.name,
                        email=(profile.email if profile else None) or row.email,
                        updated_at=row.updated_at,
                    )
                )
            return Return.ok(ViewerListResponse(viewers=viewers))
