import time

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from context_service.adapter.services.rate_limiter import InMemoryRateLimiter
from context_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from context_service.app.services.identity_provider import OAuthTokens
from context_service.app.services.tenancy import UsageAccountant
from context_service.app.services.token_cipher import TokenCipher
from context_service.depends import (
    get_identity_provider,
    get_oauth_client,
    get_object_storage,
    get_rate_limiter,
    get_sku_mapping,
    get_token_cipher,
    get_unit_of_work,
)
from context_service.domain.entities import PlanId, Tenant
from tests.fixtures.fakes import FakeIdentityProvider, FakeOAuthClient, FakeObjectStorage

ACCOUNT_ID = "12345"
API = ApplicationConfig.API_PREFIX
SKUS = {"pro_monthly": "sku-pro-m", "plus_monthly": "sku-plus-m"}


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def identity_provider():
    provider = FakeIdentityProvider()
    provider.admins.add("1")
    return provider


@pytest.fixture
def storage():
    return FakeObjectStorage()


@pytest.fixture
def oauth_client():
    return FakeOAuthClient(OAuthTokens(access_token="oauth-access", refresh_token="oauth-refresh", account_id=ACCOUNT_ID))


@pytest_asyncio.fixture
async def client(db_session, identity_provider, storage, oauth_client):
    from context_service.api.app import create_app

    app = create_app(ApplicationConfig)
    limiter = InMemoryRateLimiter()
    cipher = TokenCipher(bytes(range(32)))

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    app.dependency_overrides[get_object_storage] = lambda: storage
    app.dependency_overrides[get_oauth_client] = lambda: oauth_client
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    app.dependency_overrides[get_token_cipher] = lambda: cipher
    app.dependency_overrides[get_sku_mapping] = lambda: dict(SKUS)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers():
    """Authorization header carrying a monday.com session token"""

    def make(user_id="1", account_id=ACCOUNT_ID, board_id=None):
        claims = {"dat": {"account_id": account_id, "user_id": user_id}, "exp": int(time.time()) + 300}
        if board_id is not None:
            claims["dat"]["board_id"] = board_id
        token = jwt.encode(claims, ApplicationConfig.MONDAY_CLIENT_SECRET, algorithm="HS256")
        return {"Authorization": f"Bearer {token}"}

    return make


@pytest_asyncio.fixture
async def seed_tenant(db_session):
    """Create the account's tenant with a monday.com credential; returns its id"""

    async def seed(plan=PlanId.free, account_id=ACCOUNT_ID):
        tenant = Tenant(account_id=account_id, plan=plan, access_token="monday-access-token")
        db_session.add(tenant)
        tenant_id = tenant.id
        await db_session.commit()
        return tenant_id

    return seed


@pytest_asyncio.fixture
async def storage_drift(db_session):
    """Counter minus live file bytes for a tenant"""

    async def drift(tenant_id):
        async with SqlAlchemyUnitOfWork(db_session) as uow:
            return await UsageAccountant(uow).storage_drift(tenant_id)

    return drift
