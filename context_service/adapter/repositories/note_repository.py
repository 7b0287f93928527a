from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from context_service.adapter.repositories.upsert import upsert
from context_service.app.repositories.note_repository import INoteRepository
from context_service.domain.base import utcnow
from context_service.domain.entities import Note


class NoteRepository(INoteRepository):
    """Note repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_board(self, board_id: UUID) -> Optional[Note]:
        """Get the note of a board"""
        stmt = (
            select(Note)
            .where(Note.board_id == board_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(
        self, board_id: UUID, tenant_id: UUID, html: str, updated_by: Optional[str]
    ) -> Note:
        """Insert or replace the note of a board (last writer wins)"""
        now = utcnow()
        await upsert(
            self.session,
            Note,
            {
                "id": uuid4(),
                "board_id": board_id,
                "tenant_id": tenant_id,
                "html": html,
                "updated_by": updated_by,
                "created_at": now,
                "updated_at": now,
            },
            ["board_id"],
            update_columns=["html", "updated_by", "updated_at"],
        )
        return await self.get_by_board(board_id)

    async def delete_by_board(self, board_id: UUID) -> None:
        """Delete the note of a board"""
        await self.session.execute(delete(Note).where(Note.board_id == board_id))
