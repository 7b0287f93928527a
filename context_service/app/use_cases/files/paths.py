"""
Storage path rules for uploaded files.

Objects live under ``tenant_{tenant_id}/board_{board_id}/``; vaulted objects
under the ``recovery/`` folder of the same prefix.
"""

import re
import secrets
from uuid import UUID

from context_service.domain.errors import ValidationError

MAX_FILE_SIZE_BYTES = 512 * 1024 * 1024
MAX_FILE_NAME_LENGTH = 200
MAX_PATH_LENGTH = 512

CONTENT_TYPE_RE = re.compile(r"^[\w.+-]+/[\w.+-]+$", re.ASCII)
STORAGE_PATH_RE = re.compile(
    r"^tenant_[A-Za-z0-9-]+/board_[A-Za-z0-9-]+/[a-f0-9]{16}-[\w.\-]{1,200}$", re.ASCII
)
UNSAFE_CHARS_RE = re.compile(r"[^\w.\-]", re.ASCII)


def safe_file_name(name: str) -> str:
    return UNSAFE_CHARS_RE.sub("_", name)[:MAX_FILE_NAME_LENGTH]


def board_prefix(tenant_id: UUID, board_id: UUID) -> str:
    return f"tenant_{tenant_id}/board_{board_id}/"


def new_storage_path(tenant_id: UUID, board_id: UUID, name: str) -> str:
    return f"{board_prefix(tenant_id, board_id)}{secrets.token_hex(8)}-{safe_file_name(name)}"


def vault_path(tenant_id: UUID, board_id: UUID, file_id: UUID, name: str) -> str:
    return f"{board_prefix(tenant_id, board_id)}recovery/{file_id}-{safe_file_name(name)}"


def validate_upload(file_name, content_type, size_bytes) -> int:
    """Validate a sign-upload request, returning the declared size"""
    if isinstance(size_bytes, bool) or not isinstance(size_bytes, int) or size_bytes <= 0:
        raise ValidationError("sizeBytes must be a positive integer")
    if size_bytes > MAX_FILE_SIZE_BYTES:
        raise ValidationError("File exceeds the maximum upload size")
    validate_file_name(file_name)
    validate_content_type(content_type)
    return size_bytes


def validate_file_name(file_name) -> str:
    if not isinstance(file_name, str) or not file_name.strip():
        raise ValidationError("filename is required")
    if len(file_name) > MAX_FILE_NAME_LENGTH:
        raise ValidationError("filename is too long")
    return file_name


def validate_content_type(content_type) -> str:
    if not isinstance(content_type, str) or not CONTENT_TYPE_RE.match(content_type):
        raise ValidationError("contentType is invalid")
    return content_type


def is_valid_storage_path(path, prefix: str) -> bool:
    """Path shape, traversal and ownership check for a client-supplied path"""
    if not isinstance(path, str) or len(path) > MAX_PATH_LENGTH:
        return False
    if ".." in path or "//" in path:
        return False
    if not STORAGE_PATH_RE.match(path):
        return False
    return path.startswith(prefix)
