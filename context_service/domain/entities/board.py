"""
Board Entity

A monday.com board mapped into a tenant.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from context_service.domain.base import utcnow


class Board(SQLModel, table=True):
    """
    Board entity - one monday.com board of a tenant.

    Business Rules:
    - (tenant_id, monday_board_id) must be unique
    - Created lazily, subject to the plan's max boards cap
    - Deletion cascades to files, recovery records, viewers, notes and snapshots
    """

    __tablename__ = "boards"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    monday_board_id: str = Field(max_length=64, nullable=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_board_tenant_monday_board", "tenant_id", "monday_board_id", unique=True),
    )
