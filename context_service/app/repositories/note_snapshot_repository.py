from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional
from uuid import UUID

from context_service.domain.entities import NoteSnapshot


class INoteSnapshotRepository(ABC):
    """NoteSnapshot repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, snapshot_id: UUID, board_id: UUID) -> Optional[NoteSnapshot]:
        """Get a snapshot of a board"""
        pass

    @abstractmethod
    async def list_by_board(self, board_id: UUID, limit: int = 7) -> List[NoteSnapshot]:
        """List snapshots of a board, newest first"""
        pass

    @abstractmethod
    async def upsert_for_day(self, board_id: UUID, html: str, snapshot_date: date) -> None:
        """Insert or replace the snapshot of a board for a day"""
        pass

    @abstractmethod
    async def prune(self, board_id: UUID, keep: int = 7) -> int:
        """Delete all but the newest `keep` snapshots; returns deleted count"""
        pass

    @abstractmethod
    async def delete_by_board(self, board_id: UUID) -> None:
        """Delete all snapshots of a board"""
        pass
