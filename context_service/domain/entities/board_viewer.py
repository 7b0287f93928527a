"""
BoardViewer Entity

Authorization record for one (board, monday user) pair.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from context_service.domain.base import utcnow

from .enums import ViewerStatus


class BoardViewer(SQLModel, table=True):
    """
    BoardViewer entity - stored access level of a user on a board.

    Business Rules:
    - (board_id, monday_user_id) must be unique
    - Auto-provisioned on first access: allowed for admins/owners, restricted otherwise
    - Live admins and board owners are privileged whatever the stored status
    - The viewer cap demotes the most recently updated non-privileged rows first
    """

    __tablename__ = "board_viewers"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    board_id: UUID = Field(foreign_key="boards.id", nullable=False, index=True)
    monday_user_id: str = Field(max_length=64, nullable=False)

    status: ViewerStatus = Field(default=ViewerStatus.restricted)

    # Cached from monday.com for listing
    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_board_viewer_board_user", "board_id", "monday_user_id", unique=True),
        Index("idx_board_viewer_status", "status"),
    )
