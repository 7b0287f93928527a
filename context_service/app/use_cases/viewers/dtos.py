"""
Viewers Use Case DTOs (Data Transfer Objects)
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class ViewerStatusResponse(BaseModel):
    """Effective access of the caller on a board"""

    role: str
    is_admin: bool
    is_owner: bool
    can_edit: bool
    can_manage: bool


class ViewerItem(BaseModel):
    monday_user_id: str
    role: str
    name: Optional[str] = None
    email: Optional[str] = None
    updated_at: datetime


class ViewerListResponse(BaseModel):
    """Response for list viewers use case"""

    viewers: List[ViewerItem]


class RemoveViewerResponse(BaseModel):
    removed: bool
    monday_user_id: str
