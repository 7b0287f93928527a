from typing import Optional

from context_service.app.services.identity_provider import SessionIdentity
from context_service.libs.result import Result, Return

from .base import FileUseCase
from .dtos import FileListResponse, to_file_item


class ListFilesUseCase(FileUseCase):
    """Files of a board, newest first, optionally filtered by name"""

    async def execute(
        self, session: SessionIdentity, monday_board_id: str, query: Optional[str] = None
    ) -> Result[FileListResponse]:
        async with self.uow:
            resolved = await self._enter_board(session, monday_board_id)
            files = await self.uow.files.list_by_board(resolved.board.id, (query or "").strip() or None)
            return Return.ok(FileListResponse(files=[to_file_item(file) for file in files]))
