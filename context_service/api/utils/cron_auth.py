"""
Cron Secret Authentication

Validates the bearer secret sent by the scheduler on cron endpoints.
"""

import hmac

from fastapi import Header, status

from config import ApplicationConfig
from context_service.api.error import ClientError
from context_service.libs.result import Error


async def verify_cron_secret(authorization: str = Header(None)):
    """
    Verify ``Authorization: Bearer <CRON_SECRET>``.

    Raises:
        ClientError: 401 if the secret is unset, missing or wrong

    Returns:
        True if valid
    """
    secret = ApplicationConfig.CRON_SECRET
    if not secret or not authorization:
        raise ClientError(
            Error("UNAUTHORIZED", "Cron secret required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    expected = f"Bearer {secret}".encode("utf-8")
    if not hmac.compare_digest(authorization.strip().encode("utf-8"), expected):
        raise ClientError(
            Error("INVALID_CRON_SECRET", "Invalid cron secret"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return True
