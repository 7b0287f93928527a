"""
Per-route rate limiting dependencies.

Buckets are keyed by ``{bucket}:{client ip}`` over a 60 second sliding window.
"""

import logging

from fastapi import Depends, Request

from context_service.app.services.rate_limiter import IRateLimiter
from context_service.depends import get_rate_limiter
from context_service.domain.errors import RateLimitExceeded

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit(bucket: str, limit: int, window_seconds: int = WINDOW_SECONDS):
    async def dependency(request: Request, limiter: IRateLimiter = Depends(get_rate_limiter)):
        key = f"{bucket}:{client_ip(request)}"
        try:
            decision = await limiter.hit(key, limit, window_seconds)
        except Exception as exc:
            logger.warning("Rate limiter unavailable for %s: %s", bucket, exc)
            return
        if not decision.allowed:
            logger.warning("Rate limit hit for %s", key)
            raise RateLimitExceeded(decision.retry_after)

    return dependency


read_rate_limit = rate_limit("read", 120)
file_mutation_rate_limit = rate_limit("files", 30)
viewer_mutation_rate_limit = rate_limit("viewers", 20)

boards_list_rate_limit = rate_limit("boards-list", 30)
boards_delete_rate_limit = rate_limit("boards-delete", 5)
board_admin_delete_toggle_rate_limit = rate_limit("board-admin-delete-toggle", 10)
notes_snapshots_list_rate_limit = rate_limit("notes-snapshots-list", 30)
notes_snapshots_restore_rate_limit = rate_limit("notes-snapshots-restore", 10)
files_sign_upload_rate_limit = rate_limit("files-sign-upload", 15)
files_confirm_upload_rate_limit = rate_limit("files-confirm-upload", 20)
files_recovery_list_rate_limit = rate_limit("files-recovery-list", 30)
files_recovery_restore_rate_limit = rate_limit("files-recovery-restore", 15)
viewers_status_rate_limit = rate_limit("viewers-status", 20)
viewers_remove_rate_limit = rate_limit("viewers-remove", 15)
