"""
monday.com session token verification.

The embedded app sends the sessionToken issued by monday.com: an HS256 JWT
signed with the app's client secret. Identity claims sit under ``dat`` in
current tokens and at the top level in older ones.
"""

from typing import Any, Dict, Optional, Sequence

from jose import JWTError, jwt

from context_service.app.services.identity_provider import SessionIdentity
from context_service.domain.base import account_key

ACCOUNT_CLAIMS = ("account_id", "accountId", "aid")
USER_CLAIMS = ("user_id", "userId")
BOARD_CLAIMS = ("board_id", "boardId")


def verify_monday_jwt(
    token: str,
    secret: str,
    issuer: Optional[str] = None,
    audience: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Verify and decode a monday.com session token

    Args:
        token: Compact JWT
        secret: Signing secret
        issuer: Expected iss, checked only when set
        audience: Expected aud, checked only when set

    Returns:
        Decoded payload dict or None if invalid
    """
    if not token or not secret or token.count(".") != 2:
        return None
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            issuer=issuer or None,
            audience=audience or None,
            options={"verify_aud": bool(audience)},
        )
    except JWTError:
        return None


def _claim(payload: Dict[str, Any], names: Sequence[str]) -> Optional[Any]:
    nested = payload.get("dat")
    for container in (nested if isinstance(nested, dict) else {}, payload):
        for name in names:
            value = container.get(name)
            if value is not None and str(value).strip():
                return value
    return None


def session_identity_from_claims(payload: Dict[str, Any]) -> Optional[SessionIdentity]:
    """Identity carried by verified claims; None when there is no account id"""
    account = account_key(_claim(payload, ACCOUNT_CLAIMS))
    if account is None:
        return None
    user_id = _claim(payload, USER_CLAIMS)
    board_id = _claim(payload, BOARD_CLAIMS)
    return SessionIdentity(
        account_id=account,
        user_id=str(user_id).strip() if user_id is not None else None,
        board_id=str(board_id).strip() if board_id is not None else None,
    )
