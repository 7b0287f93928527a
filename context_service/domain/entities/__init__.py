"""
Context Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    BillingStatus,
    LimitKind,
    PlanId,
    ViewerRole,
    ViewerStatus,
)

# Export all entities
from .tenant import Tenant
from .board import Board
from .file import File
from .file_recovery import FileRecoveryRecord
from .note import Note
from .note_snapshot import NoteSnapshot
from .board_viewer import BoardViewer

__all__ = [
    # Enums
    "BillingStatus",
    "LimitKind",
    "PlanId",
    "ViewerRole",
    "ViewerStatus",
    # Entities
    "Tenant",
    "Board",
    "File",
    "FileRecoveryRecord",
    "Note",
    "NoteSnapshot",
    "BoardViewer",
]
