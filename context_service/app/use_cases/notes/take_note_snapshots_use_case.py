"""
Take Note Snapshots Use Case

Daily job writing one snapshot per board note for plans with snapshots.
"""

import logging
from datetime import datetime, timezone

from context_service.app.services.unit_of_work import UnitOfWork
from context_service.domain.plans import FEATURE_SNAPSHOTS, FEATURES_BY_PLAN
from context_service.libs.result import Result, Return

from .dtos import SnapshotSweepResponse
from .list_snapshots_use_case import SNAPSHOT_RETENTION

logger = logging.getLogger(__name__)


class TakeNoteSnapshotsUseCase:
    """
    Business Rules:
    - Only tenants on plans with snapshots are swept
    - At most one snapshot per board per UTC day (re-runs overwrite)
    - Each board keeps its newest 7 snapshots
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[SnapshotSweepResponse]:
        today = datetime.now(timezone.utc).date()
        plans = [plan.value for plan in FEATURES_BY_PLAN[FEATURE_SNAPSHOTS]]
        boards_seen = written = pruned = 0

        async with self.uow:
            tenants = await self.uow.tenants.list_by_plans(plans)
            for tenant in tenants:
                for board in await self.uow.boards.list_by_tenant(tenant.id):
                    boards_seen += 1
                    note = await self.uow.notes.get_by_board(board.id)
                    if note is None:
                        continue
                    await self.uow.note_snapshots.upsert_for_day(board.id, note.html, today)
                    written += 1
                    pruned += await self.uow.note_snapshots.prune(board.id, keep=SNAPSHOT_RETENTION)
            await self.uow.commit()

        logger.info(
            "Note snapshot sweep: %s tenants, %s boards, %s written, %s pruned",
            len(tenants),
            boards_seen,
            written,
            pruned,
        )
        return Return.ok(
            SnapshotSweepResponse(
                tenants=len(tenants),
                boards=boards_seen,
                snapshots_written=written,
                snapshots_pruned=pruned,
            )
        )
