from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from uuid import UUID

from context_service.domain.entities import Board


class IBoardRepository(ABC):
    """Board repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, board_id: UUID) -> Optional[Board]:
        """Get board by ID"""
        pass

    @abstractmethod
    async def get_by_monday_id(self, tenant_id: UUID, monday_board_id: str) -> Optional[Board]:
        """Get board by tenant and monday.com board id"""
        pass

    @abstractmethod
    async def count_by_tenant(self, tenant_id: UUID) -> int:
        """Count boards of a tenant"""
        pass

    @abstractmethod
    async def create_if_absent(self, tenant_id: UUID, monday_board_id: str) -> Tuple[Board, bool]:
        """Insert-if-absent; returns the stored board and whether this call created it"""
        pass

    @abstractmethod
    async def list_by_tenant(self, tenant_id: UUID) -> List[Board]:
        """List boards of a tenant, oldest first"""
        pass

    @abstractmethod
    async def delete(self, board_id: UUID) -> None:
        """Delete a board row"""
        pass
