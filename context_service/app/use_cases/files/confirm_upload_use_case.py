"""
Confirm Upload Use Case

Registers an uploaded object as a File once its real size is known.
"""

import logging

from context_service.app.services.identity_provider import SessionIdentity
from context_service.domain.entities import File
from context_service.domain.errors import LimitError
from context_service.libs.result import Error, Result, Return

from .base import FileUseCase
from .dtos import FileItem, to_file_item
from .paths import (
    MAX_FILE_SIZE_BYTES,
    board_prefix,
    is_valid_storage_path,
    validate_content_type,
    validate_file_name,
)

logger = logging.getLogger(__name__)


class ConfirmUploadUseCase(FileUseCase):
    """
    Business Rules:
    - Requires editor access
    - The storage path must be well formed and inside the caller's board prefix
    - The size is read from the object store, never taken from the client
    - Oversized or over-cap objects are removed again
    - File insert and storage increment commit together
    """

    async def execute(
        self,
        session: SessionIdentity,
        monday_board_id: str,
        storage_path: str,
        file_name: str,
        content_type: str,
    ) -> Result[FileItem]:
        validate_file_name(file_name)
        validate_content_type(content_type)

        async with self.uow:
            resolved = await self._enter_board_as_editor(session, monday_board_id)
            tenant_id = resolved.tenant.id
            board_id = resolved.board.id
            prefix = board_prefix(tenant_id, board_id)

            if not is_valid_storage_path(storage_path, prefix):
                if isinstance(storage_path, str) and storage_path.startswith(prefix) and ".." not in storage_path:
                    await self._discard([storage_path])
                return Return.err(Error("INVALID_STORAGE_PATH", "Invalid storage path"))

            if await self.uow.files.get_by_storage_path(storage_path) is not None:
                return Return.err(Error("FILE_ALREADY_CONFIRMED", "Upload already confirmed"))

            actual_size = await self.storage.get_object_size(storage_path)
            if actual_size is None:
                return Return.err(Error("UPLOAD_NOT_FOUND", "Uploaded object not found"))

            if actual_size > MAX_FILE_SIZE_BYTES:
                await self._discard([storage_path])
                return Return.err(Error("FILE_TOO_LARGE", "File exceeds the maximum upload size"))

            try:
                await self.accountant.ensure_storage_available(tenant_id, actual_size)
            except LimitError:
                await self._discard([storage_path])
                raise

            file = await self.uow.files.create(
                File(
                    board_id=board_id,
                    name=file_name,
                    size_bytes=actual_size,
                    content_type=content_type,
                    storage_path=storage_path,
                    uploaded_by=session.user_id or "unknown",
                )
            )
            await self.accountant.increment_storage(tenant_id, actual_size)
            await self.uow.commit()

            logger.info(
                "Confirmed upload of %s bytes to board %s", actual_size, resolved.board.monday_board_id
            )
            return Return.ok(to_file_item(file))
