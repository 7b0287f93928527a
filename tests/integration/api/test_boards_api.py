import pytest
from httpx import AsyncClient

from config import ApplicationConfig
from context_service.domain.entities import PlanId

API = ApplicationConfig.API_PREFIX


async def open_boards(client, headers, *board_ids):
    for board_id in board_ids:
        response = await client.post(f"{API}/context/resolve", json={"boardId": board_id}, headers=headers)
        assert response.status_code == 200


@pytest.mark.asyncio
async def test_list_boards(client: AsyncClient, auth_headers, seed_tenant, identity_provider):
    await seed_tenant(PlanId.pro)
    identity_provider.board_names["501"] = "Roadmap"
    headers = auth_headers()
    await open_boards(client, headers, 500, 501)

    response = await client.get(f"{API}/boards", params={"boardId": 500}, headers=headers)

    assert response.status_code == 200
    boards = {board["monday_board_id"]: board["name"] for board in response.json()["boards"]}
    assert set(boards) == {"500", "501"}
    assert boards["501"] == "Roadmap"


@pytest.mark.asyncio
async def test_admin_deletes_board(client: AsyncClient, auth_headers, seed_tenant):
    await seed_tenant(PlanId.pro)
    headers = auth_headers()
    await open_boards(client, headers, 500, 501)
    await client.post(f"{API}/notes", json={"boardId": 501, "html": "<p>Old</p>"}, headers=headers)

    response = await client.post(f"{API}/boards/delete", json={"boardId": 500, "targetBoardId": 501}, headers=headers)

    assert response.status_code == 200
    assert response.json()["deleted"] is True
    usage = await client.get(f"{API}/usage", params={"boardId": 500}, headers=headers)
    assert usage.json()["usage"]["boards_used"] == 1


@pytest.mark.asyncio
async def test_delete_unknown_board(client: AsyncClient, auth_headers, seed_tenant):
    await seed_tenant(PlanId.pro)

    response = await client.post(
        f"{API}/boards/delete", json={"boardId": 500, "targetBoardId": 999}, headers=auth_headers()
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "BOARD_NOT_FOUND"


@pytest.mark.asyncio
async def test_board_owner_delete_follows_setting(client: AsyncClient, auth_headers, seed_tenant, identity_provider):
    await seed_tenant(PlanId.pro)
    identity_provider.owners.add("3")
    admin, owner = auth_headers(), auth_headers(user_id="3")
    await open_boards(client, admin, 500, 501)

    denied = await client.post(f"{API}/boards/delete", json={"boardId": 500, "targetBoardId": 501}, headers=owner)
    assert denied.status_code == 403

    toggled = await client.post(
        f"{API}/settings/board-admin-delete", json={"boardId": 500, "enabled": True}, headers=admin
    )
    assert toggled.status_code == 200
    assert toggled.json() == {"board_admin_delete_enabled": True}

    allowed = await client.post(f"{API}/boards/delete", json={"boardId": 500, "targetBoardId": 501}, headers=owner)
    assert allowed.status_code == 200


@pytest.mark.asyncio
async def test_setting_needs_admin(client: AsyncClient, auth_headers, seed_tenant, identity_provider):
    await seed_tenant(PlanId.pro)
    identity_provider.owners.add("3")

    response = await client.post(
        f"{API}/settings/board-admin-delete", json={"boardId": 500, "enabled": True}, headers=auth_headers(user_id="3")
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_board_delete_has_its_own_tight_bucket(client: AsyncClient):
    for _ in range(5):
        response = await client.post(f"{API}/boards/delete", json={"boardId": 500, "targetBoardId": 501})
        assert response.status_code == 401

    blocked = await client.post(f"{API}/boards/delete", json={"boardId": 500, "targetBoardId": 501})
    listed = await client.get(f"{API}/boards", params={"boardId": 500})

    assert blocked.status_code == 429
    assert listed.status_code == 401
