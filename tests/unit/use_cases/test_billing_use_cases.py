from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from context_service.app.services.identity_provider import OAuthTokens
from context_service.app.services.token_cipher import TokenCipher
from context_service.app.use_cases.billing import (
    ConnectTenantUseCase,
    HandleMarketplaceEventUseCase,
    StartCheckoutUseCase,
)
from context_service.domain.entities import BillingStatus, Board, PlanId, Tenant
from context_service.domain.errors import AuthorizationError
from tests.fixtures.contexts import SESSION, enter_board, make_resolved
from tests.fixtures.fakes import FakeOAuthClient

SKUS = {"pro_monthly": "sku-pro-m", "plus_annual": "sku-plus-y"}


@pytest.fixture
def tenant():
    return Tenant(id=uuid4(), account_id="12345", plan=PlanId.free, pending_plan=PlanId.pro)


@pytest.fixture
def uow(mock_uow, tenant):
    mock_uow.tenants = MagicMock()
    mock_uow.tenants.get_or_create = AsyncMock(return_value=tenant)
    mock_uow.tenants.get_by_account_id = AsyncMock(return_value=tenant)
    mock_uow.tenants.update = AsyncMock(side_effect=lambda value: value)
    mock_uow.tenants.upsert_credentials = AsyncMock(return_value=tenant)
    mock_uow.boards = MagicMock()
    mock_uow.boards.get_by_monday_id = AsyncMock(return_value=None)
    return mock_uow


@pytest.mark.asyncio
async def test_purchase_by_configured_sku(uow, storage, tenant):
    payload = {"type": "app_subscription_created", "data": {"account_id": 12345, "sku": "sku-pro-m"}}

    result = await HandleMarketplaceEventUseCase(uow, storage, SKUS).execute(payload)

    assert result.value.plan == "pro"
    assert tenant.plan == PlanId.pro
    assert tenant.billing_status == BillingStatus.active
    assert tenant.pending_plan is None
    uow.tenants.get_or_create.assert_awaited_once_with("12345")
    uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_plan_field_used_when_sku_unknown(uow, storage, tenant):
    payload = {"type": "upgraded", "accountId": "12345", "plan": "Ultra"}

    result = await HandleMarketplaceEventUseCase(uow, storage, SKUS).execute(payload)

    assert result.value.plan == "pro"


@pytest.mark.asyncio
async def test_cancel_drops_to_free(uow, storage, tenant):
    tenant.plan = PlanId.premium

    result = await HandleMarketplaceEventUseCase(uow, storage).execute(
        {"type": "app_subscription_cancelled", "data": {"account": {"id": 12345}}}
    )

    assert result.value.plan == "free"
    assert tenant.plan == PlanId.free
    assert tenant.billing_status == BillingStatus.canceled


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"type": "install", "data": {"account_id": 1}},
        {"type": "purchased", "data": {"account_id": 1, "plan": "galactic"}},
        {},
    ],
)
async def test_unknown_events_and_plans_are_ignored(uow, storage, payload):
    result = await HandleMarketplaceEventUseCase(uow, storage).execute(payload)

    assert result.is_ok()
    assert result.value.ignored is True
    uow.tenants.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_billing_event_without_account(uow, storage):
    result = await HandleMarketplaceEventUseCase(uow, storage).execute({"type": "purchased", "plan": "pro"})

    assert result.error.code == "MISSING_ACCOUNT_ID"


@pytest.mark.asyncio
async def test_board_deleted_event(uow, storage, tenant):
    board = Board(id=uuid4(), tenant_id=tenant.id, monday_board_id="500")
    uow.boards.get_by_monday_id.return_value = board
    for name in ("files", "file_recoveries"):
        repo = MagicMock()
        repo.list_by_board = AsyncMock(return_value=[])
        repo.delete_by_board = AsyncMock()
        setattr(uow, name, repo)
    for name in ("viewers", "notes", "note_snapshots"):
        repo = MagicMock()
        repo.delete_by_board = AsyncMock()
        setattr(uow, name, repo)
    uow.boards.delete = AsyncMock()

    result = await HandleMarketplaceEventUseCase(uow, storage).execute(
        {"type": "board_deleted", "data": {"account_id": 12345, "board_id": 500}}
    )

    assert result.value.ignored is False
    uow.boards.get_by_monday_id.assert_awaited_once_with(tenant.id, "500")
    uow.boards.delete.assert_awaited_once_with(board.id)


@pytest.mark.asyncio
async def test_board_deleted_event_for_unknown_board(uow, storage):
    result = await HandleMarketplaceEventUseCase(uow, storage).execute(
        {"type": "board_deleted", "account_id": 12345, "board_id": 999}
    )
    assert result.value.ignored is True

    result = await HandleMarketplaceEventUseCase(uow, storage).execute({"type": "board_deleted"})
    assert result.error.code == "MISSING_BOARD_REFERENCE"


@pytest.mark.asyncio
async def test_checkout_records_pending_plan(uow, identity_provider):
    identity_provider.admins.add("1")
    resolved = make_resolved()
    use_case = enter_board(StartCheckoutUseCase(uow, identity_provider, SKUS), resolved)

    result = await use_case.execute(SESSION, "500", "Pro_Monthly")

    assert result.value.url == identity_provider.checkout_url
    assert result.value.plan == "pro"
    assert identity_provider.checkout_skus == ["sku-pro-m"]
    assert resolved.tenant.pending_plan == PlanId.pro
    assert resolved.tenant.billing_status == BillingStatus.pending


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "sku,code",
    [("free", "INVALID_SKU"), ("gold_monthly", "INVALID_SKU"), ("premium_monthly", "SKU_NOT_CONFIGURED")],
)
async def test_checkout_sku_rejections(uow, identity_provider, sku, code):
    use_case = enter_board(StartCheckoutUseCase(uow, identity_provider, SKUS), make_resolved())

    result = await use_case.execute(SESSION, "500", sku)

    assert result.error.code == code


@pytest.mark.asyncio
async def test_checkout_requires_admin(uow, identity_provider):
    use_case = enter_board(StartCheckoutUseCase(uow, identity_provider, SKUS), make_resolved())

    with pytest.raises(AuthorizationError):
        await use_case.execute(SESSION, "500", "pro_monthly")

    assert identity_provider.checkout_skus == []


@pytest.mark.asyncio
async def test_connect_stores_encrypted_tokens(uow, identity_provider, tenant):
    cipher = TokenCipher(bytes(range(32)))
    oauth = FakeOAuthClient(OAuthTokens(access_token="access", refresh_token="refresh", account_id="12345"))

    result = await ConnectTenantUseCase(uow, oauth, identity_provider, cipher).execute("code-1")

    assert result.value.account_id == "12345"
    account, access, refresh = uow.tenants.upsert_credentials.await_args.args
    assert account == "12345"
    assert cipher.decrypt(access) == "access"
    assert cipher.decrypt(refresh) == "refresh"
    assert access != "access"


@pytest.mark.asyncio
async def test_connect_falls_back_to_account_query(uow, identity_provider):
    identity_provider.account_id = "777"
    oauth = FakeOAuthClient(OAuthTokens(access_token="access"))

    result = await ConnectTenantUseCase(uow, oauth, identity_provider, TokenCipher(bytes(32))).execute("code")

    assert result.value.account_id == "777"


@pytest.mark.asyncio
async def test_connect_rejections(uow, identity_provider):
    oauth = FakeOAuthClient(OAuthTokens(access_token="access"))
    use_case = ConnectTenantUseCase(uow, oauth, identity_provider, TokenCipher(bytes(32)))

    assert (await use_case.execute("")).error.code == "MISSING_CODE"
    assert (await use_case.execute("code")).error.code == "ACCOUNT_UNRESOLVED"
    uow.tenants.upsert_credentials.assert_not_awaited()
