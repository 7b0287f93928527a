"""
Viewers Use Cases

Viewer status, listing and role management on a board.
"""

from .dtos import RemoveViewerResponse, ViewerItem, ViewerListResponse, ViewerStatusResponse
from .get_viewer_status_use_case import GetViewerStatusUseCase
from .list_viewers_use_case import ListViewersUseCase
from .remove_viewer_use_case import RemoveViewerUseCase
from .set_viewer_role_use_case import SetViewerRoleUseCase

__all__ = [
    "RemoveViewerResponse",
    "ViewerItem",
    "ViewerListResponse",
    "ViewerStatusResponse",
    "GetViewerStatusUseCase",
    "ListViewersUseCase",
    "RemoveViewerUseCase",
    "SetViewerRoleUseCase",
]
