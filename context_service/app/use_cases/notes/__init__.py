"""
Notes Use Cases

Board notes and their daily snapshots.
"""

from .dtos import NoteResponse, SnapshotItem, SnapshotListResponse, SnapshotSweepResponse
from .get_note_use_case import GetNoteUseCase
from .html_text import is_effectively_empty, sanitize_note_html
from .list_snapshots_use_case import ListSnapshotsUseCase
from .restore_snapshot_use_case import RestoreSnapshotUseCase
from .save_note_use_case import SaveNoteUseCase
from .take_note_snapshots_use_case import TakeNoteSnapshotsUseCase

__all__ = [
    "NoteResponse",
    "SnapshotItem",
    "SnapshotListResponse",
    "SnapshotSweepResponse",
    "GetNoteUseCase",
    "ListSnapshotsUseCase",
    "RestoreSnapshotUseCase",
    "SaveNoteUseCase",
    "TakeNoteSnapshotsUseCase",
    "is_effectively_empty",
    "sanitize_note_html",
]
