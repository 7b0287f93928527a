from uuid import UUID

import pytest
from httpx import AsyncClient

from config import ApplicationConfig
from context_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from context_service.app.services.identity_provider import UserProfile
from context_service.domain.entities import PlanId, ViewerStatus

API = ApplicationConfig.API_PREFIX


@pytest.mark.asyncio
async def test_admin_grants_and_removes_access(client: AsyncClient, auth_headers, seed_tenant, identity_provider):
    await seed_tenant(PlanId.plus)
    identity_provider.profiles["2"] = UserProfile(id="2", name="Grace", email="grace@example.com")
    admin, member = auth_headers(), auth_headers(user_id="2")
    await client.post(f"{API}/context/resolve", json={"boardId": 500}, headers=admin)

    denied = await client.get(f"{API}/notes", params={"boardId": 500}, headers=member)
    assert denied.status_code == 403

    granted = await client.post(
        f"{API}/viewers/set-role", json={"boardId": 500, "userId": 2, "role": "viewer"}, headers=admin
    )
    assert granted.status_code == 200
    assert granted.json()["role"] == "viewer"
    assert granted.json()["name"] == "Grace"

    assert (await client.get(f"{API}/notes", params={"boardId": 500}, headers=member)).status_code == 200
    status = await client.get(f"{API}/viewers/status", params={"boardId": 500}, headers=member)
    assert status.json()["role"] == "viewer"
    assert status.json()["can_edit"] is False

    write = await client.post(f"{API}/notes", json={"boardId": 500, "html": "<p>x</p>"}, headers=member)
    assert write.status_code == 403
    assert write.json()["error"]["message"] == "editor access required"

    listed = await client.get(f"{API}/viewers", params={"boardId": 500}, headers=admin)
    assert {viewer["monday_user_id"] for viewer in listed.json()["viewers"]} == {"1", "2"}

    removed = await client.post(f"{API}/viewers/remove", json={"boardId": 500, "userId": "2"}, headers=admin)
    assert removed.status_code == 200
    assert (await client.get(f"{API}/notes", params={"boardId": 500}, headers=member)).status_code == 403


@pytest.mark.asyncio
async def test_editor_role_needs_premium(client: AsyncClient, auth_headers, seed_tenant):
    await seed_tenant(PlanId.plus)

    response = await client.post(
        f"{API}/viewers/set-role", json={"boardId": 500, "userId": "2", "role": "editor"}, headers=auth_headers()
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "forbidden"


@pytest.mark.asyncio
async def test_free_plan_has_no_viewer_seats(client: AsyncClient, auth_headers, seed_tenant):
    await seed_tenant(PlanId.free)

    response = await client.post(
        f"{API}/viewers/set-role", json={"boardId": 500, "userId": "2", "role": "viewer"}, headers=auth_headers()
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "limit_reached"
    assert response.json()["error"]["kind"] == "viewers"


@pytest.mark.asyncio
async def test_admin_cannot_change_own_role(client: AsyncClient, auth_headers, seed_tenant):
    await seed_tenant(PlanId.pro)

    response = await client.post(
        f"{API}/viewers/set-role", json={"boardId": 500, "userId": "1", "role": "viewer"}, headers=auth_headers()
    )

    assert response.status_code == 403
    assert response.json()["error"]["message"] == "cannot modify own access"


@pytest.mark.asyncio
async def test_invalid_role(client: AsyncClient, auth_headers, seed_tenant):
    await seed_tenant(PlanId.pro)

    response = await client.post(
        f"{API}/viewers/set-role", json={"boardId": 500, "userId": "2", "role": "owner"}, headers=auth_headers()
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_ROLE"


@pytest.mark.asyncio
async def test_viewer_mutations_are_rate_limited(client: AsyncClient):
    for _ in range(15):
        response = await client.post(f"{API}/viewers/remove", json={"boardId": 500, "userId": "2"})
        assert response.status_code == 401

    response = await client.post(f"{API}/viewers/remove", json={"boardId": 500, "userId": "2"})

    assert response.status_code == 429
    assert response.json()["error"]["code"] == "rate_limited"
    assert int(response.headers["Retry-After"]) >= 1


@pytest.mark.asyncio
async def test_first_access_stores_viewer_profile(
    client: AsyncClient, auth_headers, seed_tenant, identity_provider, db_session
):
    await seed_tenant(PlanId.plus)
    identity_provider.profiles["2"] = UserProfile(id="2", name="Grace", email="grace@example.com")
    context = await client.post(f"{API}/context/resolve", json={"boardId": 500}, headers=auth_headers())
    board_id = context.json()["board_id"]

    denied = await client.get(f"{API}/notes", params={"boardId": 500}, headers=auth_headers(user_id="2"))

    assert denied.status_code == 403
    async with SqlAlchemyUnitOfWork(db_session) as uow:
        row = await uow.viewers.get(UUID(board_id), "2")
        stored = (row.name, row.email, row.status)
    assert stored == ("Grace", "grace@example.com", ViewerStatus.restricted)
