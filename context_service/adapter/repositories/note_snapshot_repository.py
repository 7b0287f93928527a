from datetime import date
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from context_service.adapter.repositories.upsert import upsert
from context_service.app.repositories.note_snapshot_repository import INoteSnapshotRepository
from context_service.domain.base import utcnow
from context_service.domain.entities import NoteSnapshot


class NoteSnapshotRepository(INoteSnapshotRepository):
    """NoteSnapshot repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, snapshot_id: UUID, board_id: UUID) -> Optional[NoteSnapshot]:
        """Get a snapshot of a board"""
        stmt = select(NoteSnapshot).where(
            NoteSnapshot.id == snapshot_id, NoteSnapshot.board_id == board_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_board(self, board_id: UUID, limit: int = 7) -> List[NoteSnapshot]:
        """List snapshots of a board, newest first"""
        stmt = (
            select(NoteSnapshot)
            .where(NoteSnapshot.board_id == board_id)
            .order_by(NoteSnapshot.snapshot_date.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def upsert_for_day(self, board_id: UUID, html: str, snapshot_date: date) -> None:
        """Insert or replace the snapshot of a board for a day"""
        await upsert(
            self.session,
            NoteSnapshot,
            {
                "id": uuid4(),
                "board_id": board_id,
                "html": html,
                "snapshot_date": snapshot_date,
                "created_at": utcnow(),
            },
            ["board_id", "snapshot_date"],
            update_columns=["html", "created_at"],
        )

    async def prune(self, board_id: UUID, keep: int = 7) -> int:
        """Delete all but the newest `keep` snapshots"""
        stmt = (
            select(NoteSnapshot.id)
            .where(NoteSnapshot.board_id == board_id)
            .order_by(NoteSnapshot.snapshot_date.desc())
            .offset(keep)
        )
        result = await self.session.execute(stmt)
        stale_ids = list(result.scalars().all())
        if not stale_ids:
            return 0
        await self.session.execute(delete(NoteSnapshot).where(NoteSnapshot.id.in_(stale_ids)))
        return len(stale_ids)

    async def delete_by_board(self, board_id: UUID) -> None:
        """Delete all snapshots of a board"""
        await self.session.execute(delete(NoteSnapshot).where(NoteSnapshot.board_id == board_id))
