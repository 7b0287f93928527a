from sqlmodel.ext.asyncio.session import AsyncSession

from context_service.adapter.repositories.board_repository import BoardRepository
from context_service.adapter.repositories.board_viewer_repository import BoardViewerRepository
from context_service.adapter.repositories.file_recovery_repository import FileRecoveryRepository
from context_service.adapter.repositories.file_repository import FileRepository
from context_service.adapter.repositories.note_repository import NoteRepository
from context_service.adapter.repositories.note_snapshot_repository import NoteSnapshotRepository
from context_service.adapter.repositories.tenant_repository import TenantRepository
from context_service.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.tenants = TenantRepository(self.session)
        self.boards = BoardRepository(self.session)
        self.viewers = BoardViewerRepository(self.session)
        self.files = FileRepository(self.session)
        self.file_recoveries = FileRecoveryRepository(self.session)
        self.notes = NoteRepository(self.session)
        self.note_snapshots = NoteSnapshotRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
