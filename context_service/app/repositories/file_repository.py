from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from context_service.domain.entities import File


class IFileRepository(ABC):
    """File repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, file_id: UUID, board_id: UUID) -> Optional[File]:
        """Get a file of a board"""
        pass

    @abstractmethod
    async def get_by_storage_path(self, storage_path: str) -> Optional[File]:
        """Get file by storage path"""
        pass

    @abstractmethod
    async def list_by_board(self, board_id: UUID, query: Optional[str] = None) -> List[File]:
        """List files of a board newest first, optionally filtered by name"""
        pass

    @abstractmethod
    async def sum_size_by_tenant(self, tenant_id: UUID) -> int:
        """Sum of size_bytes over all files of a tenant's boards"""
        pass

    @abstractmethod
    async def create(self, file: File) -> File:
        """Create a new file row"""
        pass

    @abstractmethod
    async def delete(self, file: File) -> None:
        """Delete a file row"""
        pass

    @abstractmethod
    async def delete_by_board(self, board_id: UUID) -> None:
        """Delete all file rows of a board"""
        pass
