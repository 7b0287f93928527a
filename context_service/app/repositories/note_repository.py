from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from context_service.domain.entities import Note


class INoteRepository(ABC):
    """Note repository interface - application layer"""

    @abstractmethod
    async def get_by_board(self, board_id: UUID) -> Optional[Note]:
        """Get the note of a board"""
        pass

    @abstractmethod
    async def upsert(
        self, board_id: UUID, tenant_id: UUID, html: str, updated_by: Optional[str]
    ) -> Note:
        """Insert or replace the note of a board"""
        pass

    @abstractmethod
    async def delete_by_board(self, board_id: UUID) -> None:
        """Delete the note of a board"""
        pass
