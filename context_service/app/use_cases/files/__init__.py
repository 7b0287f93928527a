"""
Files Use Cases

Upload signing and confirmation, listing, downloads, deletion and the
recovery vault.
"""

from .confirm_upload_use_case import ConfirmUploadUseCase
from .delete_file_use_case import DeleteFileUseCase
from .dtos import (
    DeleteFileResponse,
    DownloadUrlResponse,
    FileItem,
    FileListResponse,
    PurgeRecoveryResponse,
    RecoveryItem,
    RecoveryListResponse,
    SignUploadResponse,
)
from .get_download_url_use_case import GetDownloadUrlUseCase
from .list_files_use_case import ListFilesUseCase
from .list_recovery_use_case import ListRecoveryUseCase
from .purge_recovery_vault_use_case import PurgeRecoveryVaultUseCase
from .restore_recovery_use_case import RestoreRecoveryUseCase
from .sign_upload_use_case import SignUploadUseCase

__all__ = [
    "DeleteFileResponse",
    "DownloadUrlResponse",
    "FileItem",
    "FileListResponse",
    "PurgeRecoveryResponse",
    "RecoveryItem",
    "RecoveryListResponse",
    "SignUploadResponse",
    "ConfirmUploadUseCase",
    "DeleteFileUseCase",
    "GetDownloadUrlUseCase",
    "ListFilesUseCase",
    "ListRecoveryUseCase",
    "PurgeRecoveryVaultUseCase",
    "RestoreRecoveryUseCase",
    "SignUploadUseCase",
]
