"""
Save Note Use Case

Upserts the rich-text note of a board.
"""

import logging

from context_service.app.services.identity_provider import SessionIdentity
from context_service.app.use_cases.base import BoardScopedUseCase
from context_service.libs.result import Error, Result, Return

from .dtos import NoteResponse
from .get_note_use_case import to_note_response
from .html_text import is_effectively_empty, sanitize_note_html

logger = logging.getLogger(__name__)

MAX_NOTE_LENGTH = 1_000_000


class SaveNoteUseCase(BoardScopedUseCase):
    """
    Business Rules:
    - Requires editor access (stored editor, admin or board owner)
    - One note per board, last writer wins
    - The body is sanitized before it is stored
    - An effectively empty body never overwrites a non-empty note
    """

    async def execute(
        self, session: SessionIdentity, monday_board_id: str, html: str
    ) -> Result[NoteResponse]:
        html = html or ""
        if len(html) > MAX_NOTE_LENGTH:
            return Return.err(Error("NOTE_TOO_LARGE", "Note is too large"))
        html = sanitize_note_html(html)

        async with self.uow:
            resolved = await self._enter_board_as_editor(session, monday_board_id)

            existing = await self.uow.notes.get_by_board(resolved.board.id)
            if existing and not is_effectively_empty(existing.html) and is_effectively_empty(html):
                logger.warning(
                    "Ignored empty note save on board %s by user %s",
                    resolved.board.monday_board_id,
                    session.user_id,
                )
                return Return.ok(to_note_response(existing, resolved))

            note = await self.uow.notes.upsert(
                resolved.board.id, resolved.tenant.id, html, session.user_id
            )
            await self.uow.commit()
            return Return.ok(to_note_response(note, resolved))
