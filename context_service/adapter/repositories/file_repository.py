from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from context_service.app.repositories.file_repository import IFileRepository
from context_service.domain.entities import Board, File


class FileRepository(IFileRepository):
    """File repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, file_id: UUID, board_id: UUID) -> Optional[File]:
        """Get a file of a board"""
        stmt = select(File).where(File.id == file_id, File.board_id == board_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_storage_path(self, storage_path: str) -> Optional[File]:
        """Get file by storage path"""
        stmt = select(File).where(File.storage_path == storage_path)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_board(self, board_id: UUID, query: Optional[str] = None) -> List[File]:
        """List files of a board newest first, optionally filtered by name"""
        stmt = select(File).where(File.board_id == board_id)
        if query:
            stmt = stmt.where(File.name.ilike(f"%{query}%"))
        stmt = stmt.order_by(File.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def sum_size_by_tenant(self, tenant_id: UUID) -> int:
        """Sum of size_bytes over all files of a tenant's boards"""
        stmt = (
            select(func.coalesce(func.sum(File.size_bytes), 0))
            .select_from(File)
            .join(Board, Board.id == File.board_id)
            .where(Board.tenant_id == tenant_id)
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def create(self, file: File) -> File:
        """Create a new file row"""
        self.session.add(file)
        await self.session.flush()
        await self.session.refresh(file)
        return file

    async def delete(self, file: File) -> None:
        """Delete a file row"""
        await self.session.delete(file)
        await self.session.flush()

    async def delete_by_board(self, board_id: UUID) -> None:
        """Delete all file rows of a board"""
        await self.session.execute(delete(File).where(File.board_id == board_id))
