"""
Boards Use Cases

Board listing, deletion and the owner-delete setting.
"""

from .delete_board_use_case import DeleteBoardUseCase
from .dtos import BoardAdminDeleteResponse, BoardItem, BoardListResponse, DeleteBoardResponse
from .list_boards_use_case import ListBoardsUseCase
from .set_board_admin_delete_use_case import SetBoardAdminDeleteUseCase

__all__ = [
    "BoardAdminDeleteResponse",
    "BoardItem",
    "BoardListResponse",
    "DeleteBoardResponse",
    "DeleteBoardUseCase",
    "ListBoardsUseCase",
    "SetBoardAdminDeleteUseCase",
]
