from uuid import UUID

from context_service.app.services.identity_provider import SessionIdentity
from context_service.libs.result import Error, Result, Return

from .base import FileUseCase
from .dtos import DownloadUrlResponse

DOWNLOAD_URL_TTL_SECONDS = 60


class GetDownloadUrlUseCase(FileUseCase):
    """Short-lived signed download URL for a file of the board"""

    async def execute(
        self, session: SessionIdentity, monday_board_id: str, file_id: UUID
    ) -> Result[DownloadUrlResponse]:
        async with self.uow:
            resolved = await self._enter_board(session, monday_board_id)
            file = await self.uow.files.get_by_id(file_id, resolved.board.id)
            if file is None:
                return Return.err(Error("FILE_NOT_FOUND", "File not found"))

            url = await self.storage.create_signed_download_url(
                file.storage_path, expires_in=DOWNLOAD_URL_TTL_SECONDS
            )
            return Return.ok(DownloadUrlResponse(url=url, expires_in=DOWNLOAD_URL_TTL_SECONDS))
