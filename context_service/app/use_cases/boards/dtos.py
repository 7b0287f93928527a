"""
Boards Use Case DTOs (Data Transfer Objects)
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class BoardItem(BaseModel):
    id: str
    monday_board_id: str
    name: Optional[str] = None
    created_at: datetime


class BoardListResponse(BaseModel):
    """Response for list boards use case"""

    boards: List[BoardItem]


class DeleteBoardResponse(BaseModel):
    """Response for delete board use case"""

    deleted: bool
    monday_board_id: str
    bytes_released: int


class BoardAdminDeleteResponse(BaseModel):
    """Response for the board-admin-delete setting"""

    board_admin_delete_enabled: bool
