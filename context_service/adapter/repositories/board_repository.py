from typing import List, Optional, Tuple
from uuid import UUID, uuid4

from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from context_service.adapter.repositories.upsert import insert_ignore
from context_service.app.repositories.board_repository import IBoardRepository
from context_service.domain.base import utcnow
from context_service.domain.entities import Board


class BoardRepository(IBoardRepository):
    """Board repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, board_id: UUID) -> Optional[Board]:
        """Get board by ID"""
        stmt = select(Board).where(Board.id == board_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_monday_id(self, tenant_id: UUID, monday_board_id: str) -> Optional[Board]:
        """Get board by tenant and monday.com board id"""
        stmt = select(Board).where(
            Board.tenant_id == tenant_id, Board.monday_board_id == monday_board_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_by_tenant(self, tenant_id: UUID) -> int:
        """Count boards of a tenant"""
        stmt = select(func.count()).select_from(Board).where(Board.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def create_if_absent(self, tenant_id: UUID, monday_board_id: str) -> Tuple[Board, bool]:
        """Insert-if-absent on (tenant_id, monday_board_id)"""
        inserted = await insert_ignore(
            self.session,
            Board,
            {
                "id": uuid4(),
                "tenant_id": tenant_id,
                "monday_board_id": monday_board_id,
                "created_at": utcnow(),
            },
            ["tenant_id", "monday_board_id"],
        )
        board = await self.get_by_monday_id(tenant_id, monday_board_id)
        return board, inserted > 0

    async def list_by_tenant(self, tenant_id: UUID) -> List[Board]:
        """List boards of a tenant, oldest first"""
        stmt = select(Board).where(Board.tenant_id == tenant_id).order_by(Board.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, board_id: UUID) -> None:
        """Delete a board row"""
        await self.session.execute(delete(Board).where(Board.id == board_id))
