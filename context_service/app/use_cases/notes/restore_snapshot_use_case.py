from uuid import UUID

from context_service.app.services.identity_provider import SessionIdentity
from context_service.app.use_cases.base import BoardScopedUseCase
from context_service.domain.entities import LimitKind
from context_service.domain.errors import LimitError
from context_service.domain.plans import FEATURE_SNAPSHOTS, can_use_feature
from context_service.libs.result import Error, Result, Return

from .dtos import NoteResponse
from .get_note_use_case import to_note_response
from .html_text import sanitize_note_html


class RestoreSnapshotUseCase(BoardScopedUseCase):
    """
    Business Rules:
    - Requires editor access and a plan with snapshots
    - Copies the sanitized snapshot html over the current note
    """

    async def execute(
        self, session: SessionIdentity, monday_board_id: str, snapshot_id: UUID
    ) -> Result[NoteResponse]:
        async with self.uow:
            resolved = await self._enter_board_as_editor(session, monday_board_id)
            if not can_use_feature(resolved.plan, FEATURE_SNAPSHOTS):
                raise LimitError(LimitKind.snapshots, resolved.plan, message="Snapshots are not included in this plan")

            snapshot = await self.uow.note_snapshots.get_by_id(snapshot_id, resolved.board.id)
            if snapshot is None:
                return Return.err(Error("SNAPSHOT_NOT_FOUND", "Snapshot not found"))

            note = await self.uow.notes.upsert(
                resolved.board.id, resolved.tenant.id, sanitize_note_html(snapshot.html), session.user_id
            )
            await self.uow.commit()
            return Return.ok(to_note_response(note, resolved))
