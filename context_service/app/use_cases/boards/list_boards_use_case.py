import logging
from typing import Dict

from context_service.app.services.identity_provider import SessionIdentity
from context_service.app.use_cases.base import BoardScopedUseCase
from context_service.libs.result import Result, Return

from .dtos import BoardItem, BoardListResponse

logger = logging.getLogger(__name__)


class ListBoardsUseCase(BoardScopedUseCase):
    """
    Boards of the caller's tenant.

    Names come from monday.com; a failed lookup leaves them empty.
    """

    async def execute(self, session: SessionIdentity, monday_board_id: str) -> Result[BoardListResponse]:
        async with self.uow:
            resolved = await self._enter_board(session, monday_board_id)
            boards = await self.uow.boards.list_by_tenant(resolved.tenant.id)

            names: Dict[str, str] = {}
            if resolved.credential and boards:
                try:
                    names = await self.identity_provider.fetch_board_names(
                        resolved.credential, [board.monday_board_id for board in boards]
                    )
                except Exception as exc:
                    logger.warning("Board name lookup failed: %s", exc)

            return Return.ok(
                BoardListResponse(
                    boards=[
                        BoardItem(
                            id=str(board.id),
                            monday_board_id=board.monday_board_id,
                            name=names.get(board.monday_board_id),
                            created_at=board.created_at,
                        )
                        for board in boards
                    ]
                )
            )
