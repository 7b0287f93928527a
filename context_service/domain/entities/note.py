"""
Note Entity

The shared rich-text document of a board.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel, Text

from context_service.domain.base import utcnow


class Note(SQLModel, table=True):
    """
    Note entity - at most one per board.

    Business Rules:
    - Upsert keyed by board_id
    - An effectively empty body never replaces non-empty content
    """

    __tablename__ = "notes"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    board_id: UUID = Field(foreign_key="boards.id", nullable=False)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)

    html: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    updated_by: Optional[str] = Field(default=None, max_length=64)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_note_board_id", "board_id", unique=True),)
