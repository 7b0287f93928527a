from context_service.app.services.identity_provider import SessionIdentity
from context_service.app.use_cases.base import BoardScopedUseCase
from context_service.libs.result import Result, Return

from .dtos import NoteResponse


def to_note_response(note, resolved) -> NoteResponse:
    return NoteResponse(
        html=note.html if note else "",
        updated_at=note.updated_at if note else None,
        updated_by=note.updated_by if note else None,
        board_uuid=str(resolved.board.id),
        monday_board_id=resolved.board.monday_board_id,
        tenant_id=str(resolved.tenant.id),
    )


class GetNoteUseCase(BoardScopedUseCase):
    """Read the board note; an absent note reads as empty html"""

    async def execute(self, session: SessionIdentity, monday_board_id: str) -> Result[NoteResponse]:
        async with self.uow:
            resolved = await self._enter_board(session, monday_board_id)
            note = await self.uow.notes.get_by_board(resolved.board.id)
            return Return.ok(to_note_response(note, resolved))
