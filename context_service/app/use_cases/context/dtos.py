"""
Context Use Case DTOs (Data Transfer Objects)
"""

from typing import Optional

from pydantic import BaseModel


class CapsResponse(BaseModel):
    max_boards: Optional[int]
    max_storage_bytes: Optional[int]
    max_viewers: Optional[int]


class ContextResponse(BaseModel):
    """Response for resolve context use case"""

    tenant_id: str
    board_id: str
    monday_board_id: str
    plan: str
    caps: CapsResponse
    board_was_created: bool


class UsageCounters(BaseModel):
    boards_used: int
    storage_bytes_used: int
    viewers_used: int


class UsageResponse(BaseModel):
    """Response for get usage use case"""

    plan: str
    caps: CapsResponse
    usage: UsageCounters
