from context_service.app.services.identity_provider import SessionIdentity
from context_service.domain.base import utcnow
from context_service.domain.entities import LimitKind
from context_service.domain.errors import LimitError
from context_service.domain.plans import FEATURE_RECOVERY_VAULT, can_use_feature
from context_service.libs.result import Result, Return

from .base import FileUseCase
from .dtos import RecoveryItem, RecoveryListResponse


class ListRecoveryUseCase(FileUseCase):
    """Restorable vault records of a board (editor access, vault plans)"""

    async def execute(self, session: SessionIdentity, monday_board_id: str) -> Result[RecoveryListResponse]:
        async with self.uow:
            resolved = await self._enter_board_as_editor(session, monday_board_id)
            if not can_use_feature(resolved.plan, FEATURE_RECOVERY_VAULT):
                raise LimitError(
                    LimitKind.recovery_vault, resolved.plan, message="Recovery vault is not included in this plan"
                )

            records = await self.uow.file_recoveries.list_restorable(resolved.board.id, utcnow())
            return Return.ok(
                RecoveryListResponse(
                    records=[
                        RecoveryItem(
                            id=str(record.id),
                            file_id=str(record.file_id),
                            name=record.name,
                            size_bytes=record.size_bytes,
                            content_type=record.content_type,
                            deleted_by=record.deleted_by,
                            deleted_at=record.deleted_at,
                            expires_at=record.expires_at,
                        )
                        for record in records
                    ]
                )
            )
