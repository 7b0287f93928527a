"""
Board deletion shared by the boards API and the BOARD_DELETED webhook.
"""

import logging
from typing import List

from context_service.app.services.object_storage import IObjectStorage
from context_service.app.services.tenancy import UsageAccountant
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.domain.entities import Board

logger = logging.getLogger(__name__)

REMOVE_BATCH_SIZE = 100


class BoardDeletion:
    """
    Deletes a board with everything attached to it.

    Rows and the storage decrement (live file bytes only) commit together;
    object removal runs afterwards and never fails the deletion.
    The unit of work must already be entered by the caller.
    """

    def __init__(self, uow: UnitOfWork, storage: IObjectStorage):
        self.uow = uow
        self.storage = storage
        self.accountant = UsageAccountant(uow)

    async def delete(self, board: Board) -> int:
        """Returns the number of live file bytes released"""
        board_id = board.id
        tenant_id = board.tenant_id
        monday_board_id = board.monday_board_id

        files = await self.uow.files.list_by_board(board_id)
        records = await self.uow.file_recoveries.list_by_board(board_id)
        paths: List[str] = [file.storage_path for file in files]
        paths += [record.vault_path for record in records if not record.is_restored()]
        released = sum(file.size_bytes for file in files)

        await self.uow.files.delete_by_board(board_id)
        await self.uow.file_recoveries.delete_by_board(board_id)
        await self.uow.viewers.delete_by_board(board_id)
        await self.uow.notes.delete_by_board(board_id)
        await self.uow.note_snapshots.delete_by_board(board_id)
        await self.uow.boards.delete(board_id)
        await self.accountant.increment_storage(tenant_id, -released)
        await self.uow.commit()

        for start in range(0, len(paths), REMOVE_BATCH_SIZE):
            batch = paths[start : start + REMOVE_BATCH_SIZE]
            try:
                await self.storage.remove(batch)
            except Exception as exc:
                logger.warning("Failed to remove %s objects of board %s: %s", len(batch), monday_board_id, exc)

        logger.info(
            "Deleted board %s (%s files, %s bytes released)", monday_board_id, len(files), released
        )
        return released
