"""
Signed OAuth state: ``nonce.issued_at_ms.signature``.
"""

import hashlib
import hmac
import secrets
import time
from typing import Optional


def _sign(secret: str, message: str) -> str:
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def _now_ms() -> int:
    return int(time.time() * 1000)


def create_state(secret: str, now_ms: Optional[int] = None) -> str:
    nonce = secrets.token_urlsafe(16)
    issued_at = now_ms if now_ms is not None else _now_ms()
    message = f"{nonce}.{issued_at}"
    return f"{message}.{_sign(secret, message)}"


def verify_state(state: Optional[str], secret: str, ttl_seconds: int, now_ms: Optional[int] = None) -> bool:
    """Signature matches and the state is not older than ttl_seconds"""
    if not state or not secret:
        return False
    parts = state.split(".")
    if len(parts) != 3:
        return False
    nonce, issued_at, signature = parts
    if not nonce or not issued_at.isdigit():
        return False

    expected = _sign(secret, f"{nonce}.{issued_at}")
    if not hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8")):
        return False

    age_ms = (now_ms if now_ms is not None else _now_ms()) - int(issued_at)
    return 0 <= age_ms <= ttl_seconds * 1000
