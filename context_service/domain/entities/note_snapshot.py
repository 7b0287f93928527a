"""
NoteSnapshot Entity

Daily copy of a board note.
"""

from datetime import date, datetime
from uuid import UUID, uuid4

from sqlmodel import Column, Date, DateTime, Field, Index, SQLModel, Text

from context_service.domain.base import utcnow


class NoteSnapshot(SQLModel, table=True):
    """
    NoteSnapshot entity - one per (board, calendar day).

    Business Rules:
    - Written by the snapshot cron job for plans with snapshots
    - Pruned to the newest 7 per board
    """

    __tablename__ = "note_snapshots"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    board_id: UUID = Field(foreign_key="boards.id", nullable=False, index=True)

    html: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    snapshot_date: date = Field(sa_column=Column(Date, nullable=False))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_snapshot_board_date", "board_id", "snapshot_date", unique=True),
    )
