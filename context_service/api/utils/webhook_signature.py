"""
Marketplace webhook authentication.

monday.com signs webhook deliveries either with a JWT (HS256, app signing
secret) in the Authorization header or with an HMAC-SHA256 of the raw body.
"""

import base64
import hashlib
import hmac
from typing import Optional

from jose import JWTError, jwt


def verify_webhook_authorization(authorization: Optional[str], raw_body: bytes, secret: str) -> bool:
    if not authorization or not secret:
        return False

    token = authorization.strip()
    if token.lower().startswith("bearer "):
        token = token[7:].strip()

    if token.count(".") == 2:
        try:
            jwt.decode(token, secret, algorithms=["HS256"], options={"verify_aud": False})
            return True
        except JWTError:
            pass

    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).digest()
    candidates = (digest.hex(), base64.b64encode(digest).decode("ascii"))
    presented = token.encode("utf-8")
    return any(hmac.compare_digest(presented, candidate.encode("ascii")) for candidate in candidates)
