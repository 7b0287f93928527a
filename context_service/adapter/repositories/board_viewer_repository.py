from typing import List, Optional, Sequence
from uuid import UUID, uuid4

from sqlalchemy import delete, func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from context_service.adapter.repositories.upsert import insert_ignore, upsert
from context_service.app.repositories.board_viewer_repository import IBoardViewerRepository
from context_service.domain.base import utcnow
from context_service.domain.entities import Board, BoardViewer, ViewerStatus

ACTIVE_STATUSES = [ViewerStatus.allowed, ViewerStatus.editor]


class BoardViewerRepository(IBoardViewerRepository):
    """BoardViewer repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, board_id: UUID, monday_user_id: str) -> Optional[BoardViewer]:
        """Get the viewer row of a user on a board"""
        stmt = (
            select(BoardViewer)
            .where(
                BoardViewer.board_id == board_id,
                BoardViewer.monday_user_id == monday_user_id,
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_board(self, board_id: UUID) -> List[BoardViewer]:
        """List all viewer rows of a board, most recently updated first"""
        stmt = (
            select(BoardViewer)
            .where(BoardViewer.board_id == board_id)
            .order_by(BoardViewer.updated_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_active_by_board(self, board_id: UUID) -> List[BoardViewer]:
        """List allowed/editor rows of a board"""
        stmt = (
            select(BoardViewer)
            .where(
                BoardViewer.board_id == board_id,
                BoardViewer.status.in_(ACTIVE_STATUSES),
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_active_by_tenant(self, tenant_id: UUID) -> int:
        """Count allowed/editor rows across the tenant's boards"""
        stmt = (
            select(func.count())
            .select_from(BoardViewer)
            .join(Board, Board.id == BoardViewer.board_id)
            .where(Board.tenant_id == tenant_id, BoardViewer.status.in_(ACTIVE_STATUSES))
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    def _new_row(self, board_id: UUID, monday_user_id: str, status: ViewerStatus) -> dict:
        now = utcnow()
        return {
            "id": uuid4(),
            "board_id": board_id,
            "monday_user_id": monday_user_id,
            "status": status,
            "created_at": now,
            "updated_at": now,
        }

    async def insert_if_absent(
        self, board_id: UUID, monday_user_id: str, status: ViewerStatus
    ) -> BoardViewer:
        """Insert-if-absent on (board_id, monday_user_id)"""
        await insert_ignore(
            self.session,
            BoardViewer,
            self._new_row(board_id, monday_user_id, status),
            ["board_id", "monday_user_id"],
        )
        return await self.get(board_id, monday_user_id)

    async def upsert_status(
        self, board_id: UUID, monday_user_id: str, status: ViewerStatus
    ) -> BoardViewer:
        """Create or overwrite the stored status"""
        await upsert(
            self.session,
            BoardViewer,
            self._new_row(board_id, monday_user_id, status),
            ["board_id", "monday_user_id"],
            update_columns=["status", "updated_at"],
        )
        return await self.get(board_id, monday_user_id)

    async def set_status(self, viewer_ids: Sequence[UUID], status: ViewerStatus) -> None:
        """Bulk update stored status"""
        if not viewer_ids:
            return
        stmt = (
            update(BoardViewer)
            .where(BoardViewer.id.in_(list(viewer_ids)))
            .values(status=status, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def update(self, viewer: BoardViewer) -> BoardViewer:
        """Update an existing row"""
        viewer.updated_at = utcnow()
        self.session.add(viewer)
        await self.session.flush()
        await self.session.refresh(viewer)
        return viewer

    async def delete(self, board_id: UUID, monday_user_id: str) -> None:
        """Delete the row of a user on a board"""
        stmt = delete(BoardViewer).where(
            BoardViewer.board_id == board_id,
            BoardViewer.monday_user_id == monday_user_id,
        )
        await self.session.execute(stmt)

    async def delete_by_board(self, board_id: UUID) -> None:
        """Delete all rows of a board"""
        await self.session.execute(delete(BoardViewer).where(BoardViewer.board_id == board_id))
