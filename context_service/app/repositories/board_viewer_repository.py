from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from uuid import UUID

from context_service.domain.entities import BoardViewer, ViewerStatus


class IBoardViewerRepository(ABC):
    """BoardViewer repository interface - application layer"""

    @abstractmethod
    async def get(self, board_id: UUID, monday_user_id: str) -> Optional[BoardViewer]:
        """Get the viewer row of a user on a board"""
        pass

    @abstractmethod
    async def list_by_board(self, board_id: UUID) -> List[BoardViewer]:
        """List all viewer rows of a board, most recently updated first"""
        pass

    @abstractmethod
    async def list_active_by_board(self, board_id: UUID) -> List[BoardViewer]:
        """List allowed/editor rows of a board"""
        pass

    @abstractmethod
    async def count_active_by_tenant(self, tenant_id: UUID) -> int:
        """Count allowed/editor rows across all boards of a tenant"""
        pass

    @abstractmethod
    async def insert_if_absent(
        self, board_id: UUID, monday_user_id: str, status: ViewerStatus
    ) -> BoardViewer:
        """Create a row unless one exists; returns the stored row"""
        pass

    @abstractmethod
    async def upsert_status(
        self, board_id: UUID, monday_user_id: str, status: ViewerStatus
    ) -> BoardViewer:
        """Create or overwrite the stored status of a row"""
        pass

    @abstractmethod
    async def set_status(self, viewer_ids: Sequence[UUID], status: ViewerStatus) -> None:
        """Bulk update the stored status of rows"""
        pass

    @abstractmethod
    async def update(self, viewer: BoardViewer) -> BoardViewer:
        """Update an existing row"""
        pass

    @abstractmethod
    async def delete(self, board_id: UUID, monday_user_id: str) -> None:
        """Delete the row of a user on a board"""
        pass

    @abstractmethod
    async def delete_by_board(self, board_id: UUID) -> None:
        """Delete all rows of a board"""
        pass
