from abc import ABC, abstractmethod

from context_service.app.repositories.board_repository import IBoardRepository
from context_service.app.repositories.board_viewer_repository import IBoardViewerRepository
from context_service.app.repositories.file_recovery_repository import IFileRecoveryRepository
from context_service.app.repositories.file_repository import IFileRepository
from context_service.app.repositories.note_repository import INoteRepository
from context_service.app.repositories.note_snapshot_repository import INoteSnapshotRepository
from context_service.app.repositories.tenant_repository import ITenantRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    tenants: ITenantRepository
    boards: IBoardRepository
    viewers: IBoardViewerRepository
    files: IFileRepository
    file_recoveries: IFileRecoveryRepository
    notes: INoteRepository
    note_snapshots: INoteSnapshotRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
