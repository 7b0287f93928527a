"""
Files Use Case DTOs (Data Transfer Objects)
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class SignUploadResponse(BaseModel):
    """Response for sign upload use case"""

    upload_url: str
    storage_path: str
    token: Optional[str] = None


class FileItem(BaseModel):
    id: str
    name: str
    size_bytes: int
    content_type: Optional[str] = None
    uploaded_by: str
    created_at: datetime


class FileListResponse(BaseModel):
    files: List[FileItem]


class DownloadUrlResponse(BaseModel):
    url: str
    expires_in: int


class DeleteFileResponse(BaseModel):
    """Response for delete file use case; recovery fields set when vaulted"""

    deleted: bool
    recovery_id: Optional[str] = None
    expires_at: Optional[datetime] = None


class RecoveryItem(BaseModel):
    id: str
    file_id: str
    name: str
    size_bytes: int
    content_type: Optional[str] = None
    deleted_by: str
    deleted_at: datetime
    expires_at: datetime


class RecoveryListResponse(BaseModel):
    records: List[RecoveryItem]


class PurgeRecoveryResponse(BaseModel):
    """Response for the recovery vault purge job"""

    purged: int
    failed: int


def to_file_item(file) -> FileItem:
    return FileItem(
        id=str(file.id),
        name=file.name,
        size_bytes=file.size_bytes,
        content_type=file.content_type,
        uploaded_by=file.uploaded_by,
        created_at=file.created_at,
    )
