"""
FileRecoveryRecord Entity

Soft-deleted file kept in the recovery vault for a fixed window.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import BigInteger, Column, DateTime, Field, Index, SQLModel

from context_service.domain.base import utcnow


class FileRecoveryRecord(SQLModel, table=True):
    """
    FileRecoveryRecord entity - a deleted file parked in the recovery vault.

    Business Rules:
    - Created on delete for plans with the recovery vault
    - expires_at = deleted_at + 7 days
    - Does not count towards the tenant storage counter
    - Restore re-creates the File and re-increments storage
    - Expired records are purged without touching the counter
    """

    __tablename__ = "file_recovery_records"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    board_id: UUID = Field(foreign_key="boards.id", nullable=False, index=True)

    file_id: UUID = Field(nullable=False)
    name: str = Field(max_length=200)
    size_bytes: int = Field(sa_column=Column(BigInteger, nullable=False))
    content_type: Optional[str] = Field(default=None, max_length=255)
    original_path: str = Field(max_length=512)
    vault_path: str = Field(max_length=512)
    uploaded_by: str = Field(default="unknown", max_length=64)

    deleted_by: str = Field(default="unknown", max_length=64)
    deleted_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    restored_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    restored_by: Optional[str] = Field(default=None, max_length=64)

    __table_args__ = (
        Index("idx_recovery_board_deleted", "board_id", "deleted_at"),
        Index("idx_recovery_expires_at", "expires_at"),
    )

    def is_restored(self) -> bool:
        return self.restored_at is not None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
