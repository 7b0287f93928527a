"""
Purge Recovery Vault Use Case

Periodic job deleting expired vault records and their objects.
"""

import logging

from context_service.app.services.object_storage import IObjectStorage
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.domain.base import utcnow
from context_service.libs.result import Result, Return

from .dtos import PurgeRecoveryResponse

logger = logging.getLogger(__name__)

PURGE_BATCH_SIZE = 500


class PurgeRecoveryVaultUseCase:
    """
    Business Rules:
    - Expired, unrestored records lose their object, then the record
    - Records whose object could not be removed are kept for the next run
    - Expired restored records are deleted without touching storage
    - The storage counter is never touched (vaulted bytes are not counted)
    """

    def __init__(self, uow: UnitOfWork, storage: IObjectStorage):
        self.uow = uow
        self.storage = storage

    async def execute(self) -> Result[PurgeRecoveryResponse]:
        purged = failed = 0

        async with self.uow:
            records = await self.uow.file_recoveries.list_expired(utcnow(), limit=PURGE_BATCH_SIZE)
            for record in records:
                if not record.is_restored():
                    try:
                        await self.storage.remove([record.vault_path])
                    except Exception as exc:
                        failed += 1
                        logger.warning("Failed to purge vault object %s: %s", record.vault_path, exc)
                        continue
                await self.uow.file_recoveries.delete(record)
                purged += 1
            await self.uow.commit()

        logger.info("Recovery vault purge: %s purged, %s failed", purged, failed)
        return Return.ok(PurgeRecoveryResponse(purged=purged, failed=failed))
