from context_service.app.services.identity_provider import SessionIdentity
from context_service.app.use_cases.base import BoardScopedUseCase
from context_service.domain.entities import LimitKind
from context_service.domain.errors import LimitError
from context_service.domain.plans import FEATURE_SNAPSHOTS, can_use_feature
from context_service.libs.result import Result, Return

from .dtos import SnapshotItem, SnapshotListResponse

SNAPSHOT_RETENTION = 7


class ListSnapshotsUseCase(BoardScopedUseCase):
    """Newest daily snapshots of the board note (pro and enterprise)"""

    async def execute(self, session: SessionIdentity, monday_board_id: str) -> Result[SnapshotListResponse]:
        async with self.uow:
            resolved = await self._enter_board(session, monday_board_id)
            if not can_use_feature(resolved.plan, FEATURE_SNAPSHOTS):
                raise LimitError(LimitKind.snapshots, resolved.plan, message="Snapshots are not included in this plan")

            snapshots = await self.uow.note_snapshots.list_by_board(
                resolved.board.id, limit=SNAPSHOT_RETENTION
            )
            return Return.ok(
                SnapshotListResponse(
                    snapshots=[
                        SnapshotItem(
                            id=str(snapshot.id),
                            snapshot_date=snapshot.snapshot_date,
                            created_at=snapshot.created_at,
                        )
                        for snapshot in snapshots
                    ]
                )
            )
