import json

import httpx
import pytest

from context_service.adapter.services.monday_client import (
    MondayApiClient,
    MondayOAuthClient,
    monday_api_url,
)
from context_service.domain.errors import DependencyError


def graphql(handler_data=None, status_code=200, body=None):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if body is not None:
            return httpx.Response(status_code, json=body)
        return httpx.Response(status_code, json={"data": handler_data or {}})

    return httpx.MockTransport(handler), requests


def test_region_url():
    assert monday_api_url("EU") == "https://api-eu.monday.com/v2"
    assert monday_api_url("bad region!", "https://custom/v2") == "https://custom/v2"
    assert monday_api_url(None) == "https://api.monday.com/v2"


@pytest.mark.asyncio
async def test_role_facts_in_one_query():
    transport, requests = graphql(
        {
            "boards": [{"owners": [{"id": 7}]}],
            "users": [{"id": 1, "is_admin": True}, {"id": 7, "is_admin": False}],
        }
    )
    client = MondayApiClient(transport=transport)

    facts = await client.fetch_role_facts("token", "500", ["1", "7", "9", "1"])

    assert facts["1"].is_admin and not facts["1"].is_owner
    assert facts["7"].is_owner and not facts["7"].is_admin
    assert not facts["9"].is_privileged
    assert len(requests) == 1
    sent = json.loads(requests[0].content)
    assert sent["variables"] == {"boardIds": ["500"], "userIds": ["1", "7", "9"]}
    assert requests[0].headers["Authorization"] == "token"


@pytest.mark.asyncio
async def test_graphql_errors_raise_dependency_error():
    transport, _ = graphql(body={"errors": [{"message": "Not authenticated"}]})

    with pytest.raises(DependencyError):
        await MondayApiClient(transport=transport).fetch_users("token", ["1"])


@pytest.mark.asyncio
async def test_http_errors_raise_dependency_error():
    transport, _ = graphql(status_code=500, body={})

    with pytest.raises(DependencyError):
        await MondayApiClient(transport=transport).fetch_account_id("token")


@pytest.mark.asyncio
async def test_board_names_are_chunked():
    transport, requests = graphql({"boards": [{"id": 1, "name": "Roadmap"}]})

    names = await MondayApiClient(transport=transport).fetch_board_names(
        "token", [str(board_id) for board_id in range(30)]
    )

    assert len(requests) == 2
    assert names == {"1": "Roadmap"}


@pytest.mark.asyncio
async def test_checkout_url():
    transport, requests = graphql({"billing_create_checkout": {"url": "https://checkout"}})

    url = await MondayApiClient(transport=transport).create_checkout_url("token", "sku-1")

    assert url == "https://checkout"
    assert json.loads(requests[0].content)["variables"] == {"sku": "sku-1"}

    transport, _ = graphql({"billing_create_checkout": None})
    with pytest.raises(DependencyError):
        await MondayApiClient(transport=transport).create_checkout_url("token", "sku-1")


@pytest.mark.asyncio
async def test_oauth_exchange_reads_account_id():
    requests = []

    def handler(request):
        requests.append(json.loads(request.content))
        return httpx.Response(
            200, json={"access_token": "a", "refresh_token": "r", "scope_data": {"account_id": 12345}}
        )

    client = MondayOAuthClient(
        "https://auth.test/token", "client", "secret", "https://app/cb", transport=httpx.MockTransport(handler)
    )

    tokens = await client.exchange_code("code-1")

    assert (tokens.access_token, tokens.refresh_token, tokens.account_id) == ("a", "r", "12345")
    assert requests[0]["grant_type"] == "authorization_code"
    assert requests[0]["redirect_uri"] == "https://app/cb"


@pytest.mark.asyncio
async def test_oauth_exchange_without_access_token():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"error": "invalid_grant"}))

    with pytest.raises(DependencyError):
        await MondayOAuthClient("https://auth.test/token", "c", "s", transport=transport).exchange_code("x")


@pytest.mark.asyncio
async def test_oauth_refresh_sends_refresh_grant():
    requests = []

    def handler(request):
        requests.append(json.loads(request.content))
        return httpx.Response(200, json={"access_token": "new-access", "refresh_token": "new-refresh"})

    client = MondayOAuthClient("https://auth.test/token", "client", "secret", transport=httpx.MockTransport(handler))

    tokens = await client.refresh_token("old-refresh")

    assert (tokens.access_token, tokens.refresh_token) == ("new-access", "new-refresh")
    assert requests == [
        {
            "client_id": "client",
            "client_secret": "secret",
            "refresh_token": "old-refresh",
            "grant_type": "refresh_token",
        }
    ]


@pytest.mark.asyncio
async def test_oauth_refresh_rejected():
    transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"error": "invalid_grant"}))

    with pytest.raises(DependencyError):
        await MondayOAuthClient("https://auth.test/token", "c", "s", transport=transport).refresh_token("r")
