from functools import lru_cache
from typing import Dict

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from context_service.adapter.services.monday_client import (
    MondayApiClient,
    MondayOAuthClient,
    monday_api_url,
)
from context_service.adapter.services.rate_limiter import InMemoryRateLimiter, RedisRateLimiter
from context_service.adapter.services.supabase_storage import SupabaseObjectStorage
from context_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from context_service.api.error import ClientError
from context_service.api.utils.monday_jwt import session_identity_from_claims, verify_monday_jwt
from context_service.app.services.identity_provider import (
    IIdentityProvider,
    IOAuthClient,
    SessionIdentity,
)
from context_service.app.services.object_storage import IObjectStorage
from context_service.app.services.rate_limiter import IRateLimiter
from context_service.app.services.token_cipher import TokenCipher
from context_service.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@lru_cache(maxsize=None)
def get_identity_provider() -> IIdentityProvider:
    return MondayApiClient(
        api_url=monday_api_url(ApplicationConfig.MONDAY_API_REGION, ApplicationConfig.MONDAY_API_URL),
        timeout=ApplicationConfig.MONDAY_API_TIMEOUT_SECONDS,
    )


@lru_cache(maxsize=None)
def get_oauth_client() -> IOAuthClient:
    return MondayOAuthClient(
        token_url=ApplicationConfig.MONDAY_OAUTH_TOKEN_URL,
        client_id=ApplicationConfig.MONDAY_CLIENT_ID,
        client_secret=ApplicationConfig.MONDAY_CLIENT_SECRET,
        redirect_uri=ApplicationConfig.MONDAY_OAUTH_REDIRECT_URI,
        timeout=ApplicationConfig.MONDAY_API_TIMEOUT_SECONDS,
    )


@lru_cache(maxsize=None)
def get_object_storage() -> IObjectStorage:
    return SupabaseObjectStorage(
        base_url=ApplicationConfig.STORAGE_URL,
        service_key=ApplicationConfig.STORAGE_SERVICE_KEY,
        bucket=ApplicationConfig.STORAGE_BUCKET,
        timeout=ApplicationConfig.STORAGE_TIMEOUT_SECONDS,
    )


@lru_cache(maxsize=None)
def get_token_cipher() -> TokenCipher:
    return TokenCipher.from_config(
        ApplicationConfig.TOKEN_ENCRYPTION_KEY, ApplicationConfig.MONDAY_CLIENT_SECRET
    )


@lru_cache(maxsize=None)
def get_rate_limiter() -> IRateLimiter:
    if ApplicationConfig.CACHE_BACKEND == "redis":
        return RedisRateLimiter.from_url(ApplicationConfig.REDIS_URL)
    return InMemoryRateLimiter()


def get_sku_mapping() -> Dict[str, str]:
    return dict(ApplicationConfig.MONDAY_PLAN_SKUS or {})


async def get_session_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> SessionIdentity:
    """
    Dependency to verify the monday.com session token from the Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        SessionIdentity with account, user and board ids

    Raises:
        ClientError: 401 if the token is missing, invalid or has no account id
    """
    if credentials is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Missing session token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    payload = verify_monday_jwt(
        credentials.credentials,
        ApplicationConfig.MONDAY_CLIENT_SECRET,
        issuer=ApplicationConfig.MONDAY_JWT_ISSUER,
        audience=ApplicationConfig.MONDAY_JWT_AUDIENCE,
    )
    identity = session_identity_from_claims(payload) if payload else None
    if identity is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Invalid or expired session token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return identity
