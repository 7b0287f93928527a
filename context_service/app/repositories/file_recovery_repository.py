from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from context_service.domain.entities import FileRecoveryRecord


class IFileRecoveryRepository(ABC):
    """FileRecoveryRecord repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, record_id: UUID, board_id: UUID) -> Optional[FileRecoveryRecord]:
        """Get a recovery record of a board"""
        pass

    @abstractmethod
    async def list_restorable(self, board_id: UUID, now: datetime) -> List[FileRecoveryRecord]:
        """List unrestored, unexpired records of a board, newest first"""
        pass

    @abstractmethod
    async def list_by_board(self, board_id: UUID) -> List[FileRecoveryRecord]:
        """List all records of a board"""
        pass

    @abstractmethod
    async def list_expired(self, now: datetime, limit: int = 500) -> List[FileRecoveryRecord]:
        """List records whose expiry has passed"""
        pass

    @abstractmethod
    async def create(self, record: FileRecoveryRecord) -> FileRecoveryRecord:
        """Create a new record"""
        pass

    @abstractmethod
    async def update(self, record: FileRecoveryRecord) -> FileRecoveryRecord:
        """Update existing record"""
        pass

    @abstractmethod
    async def delete(self, record: FileRecoveryRecord) -> None:
        """Delete a record"""
        pass

    @abstractmethod
    async def delete_by_board(self, board_id: UUID) -> None:
        """Delete all records of a board"""
        pass
