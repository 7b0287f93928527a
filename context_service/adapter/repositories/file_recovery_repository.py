from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from context_service.app.repositories.file_recovery_repository import IFileRecoveryRepository
from context_service.domain.entities import FileRecoveryRecord


class FileRecoveryRepository(IFileRecoveryRepository):
    """FileRecoveryRecord repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, record_id: UUID, board_id: UUID) -> Optional[FileRecoveryRecord]:
        """Get a recovery record of a board"""
        stmt = select(FileRecoveryRecord).where(
            FileRecoveryRecord.id == record_id, FileRecoveryRecord.board_id == board_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_restorable(self, board_id: UUID, now: datetime) -> List[FileRecoveryRecord]:
        """List unrestored, unexpired records of a board, newest first"""
        stmt = (
            select(FileRecoveryRecord)
            .where(
                FileRecoveryRecord.board_id == board_id,
                FileRecoveryRecord.restored_at.is_(None),
                FileRecoveryRecord.expires_at > now,
            )
            .order_by(FileRecoveryRecord.deleted_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_board(self, board_id: UUID) -> List[FileRecoveryRecord]:
        """List all records of a board"""
        stmt = select(FileRecoveryRecord).where(FileRecoveryRecord.board_id == board_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_expired(self, now: datetime, limit: int = 500) -> List[FileRecoveryRecord]:
        """List records whose expiry has passed, oldest first"""
        stmt = (
            select(FileRecoveryRecord)
            .where(FileRecoveryRecord.expires_at <= now)
            .order_by(FileRecoveryRecord.expires_at)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, record: FileRecoveryRecord) -> FileRecoveryRecord:
        """Create a new record"""
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def update(self, record: FileRecoveryRecord) -> FileRecoveryRecord:
        """Update existing record"""
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def delete(self, record: FileRecoveryRecord) -> None:
        """Delete a record"""
        await self.session.delete(record)
        await self.session.flush()

    async def delete_by_board(self, board_id: UUID) -> None:
        """Delete all records of a board"""
        await self.session.execute(
            delete(FileRecoveryRecord).where(FileRecoveryRecord.board_id == board_id)
        )
