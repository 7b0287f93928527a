import logging
from typing import Optional, Sequence

from context_service.app.services.identity_provider import IIdentityProvider
from context_service.app.services.object_storage import IObjectStorage
from context_service.app.services.token_cipher import TokenCipher
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.app.use_cases.base import BoardScopedUseCase

logger = logging.getLogger(__name__)


class FileUseCase(BoardScopedUseCase):
    """Board-scoped use case with access to the object store"""

    def __init__(
        self,
        uow: UnitOfWork,
        identity_provider: IIdentityProvider,
        storage: IObjectStorage,
        cipher: Optional[TokenCipher] = None,
    ):
        super().__init__(uow, identity_provider, cipher)
        self.storage = storage

    async def _discard(self, paths: Sequence[str]) -> None:
        """Best-effort object removal"""
        try:
            await self.storage.remove(list(paths))
        except Exception as exc:
            logger.warning("Failed to remove objects %s: %s", list(paths), exc)
