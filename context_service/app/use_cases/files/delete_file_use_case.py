"""
Delete File Use Case

Deletes a file; on plans with the recovery vault the object is parked in
the board's recovery folder for seven days instead of being removed.
"""

import logging
from datetime import timedelta
from uuid import UUID

from context_service.app.services.identity_provider import SessionIdentity
from context_service.domain.base import utcnow
from context_service.domain.entities import FileRecoveryRecord
from context_service.domain.plans import FEATURE_RECOVERY_VAULT, can_use_feature
from context_service.libs.result import Error, Result, Return

from .base import FileUseCase
from .dtos import DeleteFileResponse
from .paths import vault_path

logger = logging.getLogger(__name__)

RECOVERY_RETENTION = timedelta(days=7)


class DeleteFileUseCase(FileUseCase):
    """
    Business Rules:
    - Requires editor access
    - File delete and storage decrement commit together
    - Vault plans: object moved first, moved back if the commit fails
    - Other plans: object removed after the commit, best-effort
    """

    async def execute(
        self, session: SessionIdentity, monday_board_id: str, file_id: UUID
    ) -> Result[DeleteFileResponse]:
        async with self.uow:
            resolved = await self._enter_board_as_editor(session, monday_board_id)
            tenant_id = resolved.tenant.id
            board_id = resolved.board.id

            file = await self.uow.files.get_by_id(file_id, board_id)
            if file is None:
                return Return.err(Error("FILE_NOT_FOUND", "File not found"))

            size_bytes = file.size_bytes
            storage_path = file.storage_path
            actor = session.user_id or "unknown"

            if not can_use_feature(resolved.plan, FEATURE_RECOVERY_VAULT):
                await self.uow.files.delete(file)
                await self.accountant.increment_storage(tenant_id, -size_bytes)
                await self.uow.commit()
                await self._discard([storage_path])
                return Return.ok(DeleteFileResponse(deleted=True))

            target = vault_path(tenant_id, board_id, file.id, file.name)
            await self.storage.move(storage_path, target)

            try:
                now = utcnow()
                record = FileRecoveryRecord(
                    tenant_id=tenant_id,
                    board_id=board_id,
                    file_id=file.id,
                    name=file.name,
                    size_bytes=size_bytes,
                    content_type=file.content_type,
                    original_path=storage_path,
                    vault_path=target,
                    uploaded_by=file.uploaded_by,
                    deleted_by=actor,
                    deleted_at=now,
                    expires_at=now + RECOVERY_RETENTION,
                )
                record_id = record.id
                await self.uow.file_recoveries.create(record)
                await self.uow.files.delete(file)
                await self.accountant.increment_storage(tenant_id, -size_bytes)
                await self.uow.commit()
            except Exception:
                logger.error("Vaulting file %s failed; moving object back", file_id)
                try:
                    await self.storage.move(target, storage_path)
                except Exception as exc:
                    logger.error("Could not move %s back from the vault: %s", storage_path, exc)
                raise

            return Return.ok(
                DeleteFileResponse(
                    deleted=True,
                    recovery_id=str(record_id),
                    expires_at=now + RECOVERY_RETENTION,
                )
            )
