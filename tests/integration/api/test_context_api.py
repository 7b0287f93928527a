import pytest
from httpx import AsyncClient

from config import ApplicationConfig
from context_service.domain.entities import PlanId

API = ApplicationConfig.API_PREFIX


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get(f"{API}/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_free_plan_board_cap(client: AsyncClient, auth_headers, seed_tenant):
    """Boards 1-3 are provisioned on the free plan, the fourth is refused"""
    await seed_tenant(PlanId.free)

    for board_id in (101, "102", 103):
        response = await client.post(
            f"{API}/context/resolve", json={"boardId": board_id}, headers=auth_headers()
        )
        assert response.status_code == 200
        data = response.json()
        assert data["board_was_created"] is True
        assert data["plan"] == "free"
        assert data["caps"]["max_boards"] == 3

    response = await client.post(f"{API}/context/resolve", json={"boardId": 104}, headers=auth_headers())

    assert response.status_code == 403
    error = response.json()["error"]
    assert error["code"] == "limit_reached"
    assert error["kind"] == "boards"
    assert error["current_plan"] == "free"
    assert error["limit"] == 3
    assert error["upgrade_required"] is True

    # Existing boards stay reachable
    response = await client.post(f"{API}/context/resolve", json={"boardId": 101}, headers=auth_headers())
    assert response.status_code == 200
    assert response.json()["board_was_created"] is False


@pytest.mark.asyncio
async def test_board_id_from_session_token(client: AsyncClient, auth_headers, seed_tenant):
    await seed_tenant()

    response = await client.post(f"{API}/context/resolve", json={}, headers=auth_headers(board_id=777))

    assert response.status_code == 200
    assert response.json()["monday_board_id"] == "777"


@pytest.mark.asyncio
async def test_missing_board_id(client: AsyncClient, auth_headers, seed_tenant):
    await seed_tenant()

    response = await client.post(f"{API}/context/resolve", json={}, headers=auth_headers())

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "invalid_request"


@pytest.mark.asyncio
async def test_denied_user_leaves_no_board_behind(client: AsyncClient, auth_headers, seed_tenant):
    await seed_tenant()

    response = await client.post(f"{API}/context/resolve", json={"boardId": 200}, headers=auth_headers(user_id="2"))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "forbidden"

    usage = await client.get(f"{API}/usage", params={"boardId": 201}, headers=auth_headers())
    assert usage.status_code == 200
    # Only the board the admin just opened exists
    assert usage.json()["usage"]["boards_used"] == 1


@pytest.mark.asyncio
async def test_usage_report(client: AsyncClient, auth_headers, seed_tenant):
    await seed_tenant(PlanId.pro)

    response = await client.get(f"{API}/usage", params={"boardId": 300}, headers=auth_headers())

    assert response.status_code == 200
    data = response.json()
    assert data["plan"] == "pro"
    assert data["caps"] == {"max_boards": 100, "max_storage_bytes": 80 * 1024**3, "max_viewers": 50}
    assert data["usage"]["boards_used"] == 1
    assert data["usage"]["storage_bytes_used"] == 0


@pytest.mark.asyncio
async def test_unknown_account_gets_free_tenant(client: AsyncClient, auth_headers):
    response = await client.post(f"{API}/context/resolve", json={"boardId": 1}, headers=auth_headers(account_id=999))

    # No credential yet: nobody can be verified as admin, so the caller is restricted
    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "headers",
    [{}, {"Authorization": "Bearer not-a-token"}, {"Authorization": "Basic abc"}],
)
async def test_session_token_required(client: AsyncClient, headers):
    response = await client.post(f"{API}/context/resolve", json={"boardId": 1}, headers=headers)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"
