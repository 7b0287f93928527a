"""
Notes Use Case DTOs (Data Transfer Objects)
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel


class NoteResponse(BaseModel):
    """Response for get/save note use cases"""

    html: str
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None
    board_uuid: str
    monday_board_id: str
    tenant_id: str


class SnapshotItem(BaseModel):
    id: str
    snapshot_date: date
    created_at: datetime


class SnapshotListResponse(BaseModel):
    """Response for list snapshots use case"""

    snapshots: List[SnapshotItem]


class SnapshotSweepResponse(BaseModel):
    """Response for the daily snapshot job"""

    tenants: int
    boards: int
    snapshots_written: int
    snapshots_pruned: int
