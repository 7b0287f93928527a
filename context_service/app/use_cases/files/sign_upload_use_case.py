"""
Sign Upload Use Case

Issues a signed URL the client uploads a file to.
"""

from context_service.app.services.identity_provider import SessionIdentity
from context_service.libs.result import Result, Return

from .base import FileUseCase
from .dtos import SignUploadResponse
from .paths import new_storage_path, validate_upload


class SignUploadUseCase(FileUseCase):
    """
    Business Rules:
    - Input is validated before anything is resolved or provisioned
    - Requires editor access
    - The declared size is checked against the storage cap; the real size
      is checked again on confirm
    """

    async def execute(
        self,
        session: SessionIdentity,
        monday_board_id: str,
        file_name: str,
        content_type: str,
        size_bytes: int,
    ) -> Result[SignUploadResponse]:
        declared_size = validate_upload(file_name, content_type, size_bytes)

        async with self.uow:
            resolved = await self._enter_board_as_editor(session, monday_board_id)
            await self.accountant.ensure_storage_available(resolved.tenant.id, declared_size)

            storage_path = new_storage_path(resolved.tenant.id, resolved.board.id, file_name)
            signed = await self.storage.create_signed_upload_url(storage_path)

            return Return.ok(
                SignUploadResponse(
                    upload_url=signed.upload_url,
                    storage_path=storage_path,
                    token=signed.token,
                )
            )
