"""
File Entity

An uploaded attachment stored in the object store.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import BigInteger, Column, DateTime, Field, Index, SQLModel

from context_service.domain.base import utcnow


class File(SQLModel, table=True):
    """
    File entity - a confirmed upload attached to a board.

    Business Rules:
    - storage_path is namespaced under tenant_{tenant_id}/board_{board_id}/
    - size_bytes is the size read back from the object store, never the client claim
    - Counts towards the tenant storage counter while the row exists
    """

    __tablename__ = "files"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    board_id: UUID = Field(foreign_key="boards.id", nullable=False, index=True)

    name: str = Field(max_length=200)
    size_bytes: int = Field(sa_column=Column(BigInteger, nullable=False))
    content_type: Optional[str] = Field(default=None, max_length=255)
    storage_path: str = Field(max_length=512)
    uploaded_by: str = Field(default="unknown", max_length=64)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_file_board_created", "board_id", "created_at"),
        Index("idx_file_storage_path", "storage_path", unique=True),
    )
