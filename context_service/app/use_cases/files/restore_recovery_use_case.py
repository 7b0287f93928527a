"""
Restore Recovery Use Case

Moves a vaulted object back and re-creates its File.
"""

import logging
from uuid import UUID

from context_service.app.services.identity_provider import SessionIdentity
from context_service.domain.base import utcnow
from context_service.domain.entities import File, LimitKind
from context_service.domain.errors import DependencyError, LimitError
from context_service.domain.plans import FEATURE_RECOVERY_VAULT, can_use_feature
from context_service.libs.result import Error, Result, Return

from .base import FileUseCase
from .delete_file_use_case import RECOVERY_RETENTION
from .dtos import FileItem, to_file_item
from .paths import new_storage_path

logger = logging.getLogger(__name__)


class RestoreRecoveryUseCase(FileUseCase):
    """
    Business Rules:
    - Requires editor access on a vault plan
    - Restored records cannot be restored twice (409)
    - Records past expiry or older than the retention window are gone (410)
    - The storage cap is checked before anything moves
    - The original path is reused unless taken; a fresh path is used otherwise
    - File insert, record update and storage increment commit together;
      the object goes back to the vault if that fails
    """

    async def execute(
        self, session: SessionIdentity, monday_board_id: str, recovery_id: UUID
    ) -> Result[FileItem]:
        async with self.uow:
            resolved = await self._enter_board_as_editor(session, monday_board_id)
            if not can_use_feature(resolved.plan, FEATURE_RECOVERY_VAULT):
                raise LimitError(
                    LimitKind.recovery_vault, resolved.plan, message="Recovery vault is not included in this plan"
                )
            tenant_id = resolved.tenant.id
            board_id = resolved.board.id

            record = await self.uow.file_recoveries.get_by_id(recovery_id, board_id)
            if record is None:
                return Return.err(Error("RECOVERY_NOT_FOUND", "Recovery record not found"))
            if record.is_restored():
                return Return.err(Error("RECOVERY_ALREADY_RESTORED", "File was already restored"))

            now = utcnow()
            if record.is_expired(now) or now - record.deleted_at > RECOVERY_RETENTION:
                return Return.err(Error("RECOVERY_EXPIRED", "Recovery window has passed"))

            await self.accountant.ensure_storage_available(tenant_id, record.size_bytes)

            source = record.vault_path
            size_bytes = record.size_bytes
            target = record.original_path
            if await self.uow.files.get_by_storage_path(target) is not None:
                target = new_storage_path(tenant_id, board_id, record.name)

            try:
                await self.storage.move(source, target)
            except DependencyError:
                if target != record.original_path:
                    raise
                target = new_storage_path(tenant_id, board_id, record.name)
                logger.warning("Restore to original path failed; retrying at %s", target)
                await self.storage.move(source, target)

            try:
                file = File(
                    board_id=board_id,
                    name=record.name,
                    size_bytes=size_bytes,
                    content_type=record.content_type,
                    storage_path=target,
                    uploaded_by=record.uploaded_by,
                )
                item = to_file_item(file)
                await self.uow.files.create(file)
                record.restored_at = now
                record.restored_by = session.user_id or "unknown"
                await self.uow.file_recoveries.update(record)
                await self.accountant.increment_storage(tenant_id, size_bytes)
                await self.uow.commit()
            except Exception:
                logger.error("Restoring recovery record %s failed; returning object to the vault", recovery_id)
                try:
                    await self.storage.move(target, source)
                except Exception as exc:
                    logger.error("Could not return %s to the vault: %s", target, exc)
                raise

            return Return.ok(item)
