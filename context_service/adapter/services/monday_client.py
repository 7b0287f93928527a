"""HTTP clients for the monday.com GraphQL API and OAuth token endpoint."""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence

import httpx

from context_service.app.services.identity_provider import (
    IIdentityProvider,
    IOAuthClient,
    OAuthTokens,
    UserProfile,
)
from context_service.domain.errors import DependencyError
from context_service.domain.viewer_roles import RoleFacts

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.monday.com/v2"
API_VERSION = "2024-10"
BOARD_NAME_CHUNK_SIZE = 25

_REGION = re.compile(r"^[a-z0-9-]+$")

ROLE_QUERY = """
query ($boardIds: [ID!], $userIds: [ID!]) {
  boards(ids: $boardIds) { owners { id } }
  users(ids: $userIds) { id is_admin }
}
"""

USERS_QUERY = """
query ($userIds: [ID!]) {
  users(ids: $userIds) { id name email }
}
"""

BOARD_NAMES_QUERY = """
query ($boardIds: [ID!]) {
  boards(ids: $boardIds) { id name }
}
"""

ACCOUNT_QUERY = """
query {
  account { id }
}
"""

CHECKOUT_MUTATION = """
mutation ($sku: String!) {
  billing_create_checkout (sku: $sku) { url }
}
"""


def monday_api_url(region: Optional[str], default_url: Optional[str] = None) -> str:
    """Region-specific GraphQL endpoint, falling back to the configured URL"""
    if region and _REGION.match(region.strip().lower()):
        return f"https://api-{region.strip().lower()}.monday.com/v2"
    return default_url or DEFAULT_API_URL


def _unique_ids(ids: Sequence[Any]) -> List[str]:
    seen: List[str] = []
    for value in ids:
        if value is None:
            continue
        text = str(value).strip()
        if text and text not in seen:
            seen.append(text)
    return seen


class MondayApiClient(IIdentityProvider):
    """Thin async wrapper around the monday.com GraphQL API.

    Transport failures, non-2xx responses and GraphQL errors are raised as
    DependencyError; callers decide whether a failure is fatal.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_url = api_url
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json", "API-Version": API_VERSION},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _query(self, access_token: str, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._client.post(
                self._api_url,
                json={"query": query, "variables": variables},
                headers={"Authorization": access_token},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("monday API returned HTTP %s", exc.response.status_code)
            raise DependencyError("monday", f"monday API returned HTTP {exc.response.status_code}") from exc
        except httpx.RequestError as exc:
            logger.error("monday API request failed: %s", exc)
            raise DependencyError("monday", "monday API unreachable") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise DependencyError("monday", "monday API returned invalid JSON") from exc

        if body.get("errors") or body.get("error_message"):
            logger.error("monday API returned errors: %s", body.get("errors") or body.get("error_message"))
            raise DependencyError("monday", "monday API returned errors")
        return body.get("data") or {}

    async def fetch_role_facts(
        self, access_token: str, monday_board_id: str, user_ids: Sequence[str]
    ) -> Dict[str, RoleFacts]:
        ids = _unique_ids(user_ids)
        if not ids:
            return {}

        data = await self._query(
            access_token, ROLE_QUERY, {"boardIds": [str(monday_board_id)], "userIds": ids}
        )

        owners = set()
        for board in data.get("boards") or []:
            for owner in (board or {}).get("owners") or []:
                if owner and owner.get("id") is not None:
                    owners.add(str(owner["id"]))

        admins = {
            str(user["id"]): bool(user.get("is_admin"))
            for user in data.get("users") or []
            if user and user.get("id") is not None
        }

        return {
            user_id: RoleFacts(is_admin=admins.get(user_id, False), is_owner=user_id in owners)
            for user_id in ids
        }

    async def fetch_users(self, access_token: str, user_ids: Sequence[str]) -> Dict[str, UserProfile]:
        ids = _unique_ids(user_ids)
        if not ids:
            return {}
        data = await self._query(access_token, USERS_QUERY, {"userIds": ids})
        return {
            str(user["id"]): UserProfile(
                id=str(user["id"]), name=user.get("name"), email=user.get("email")
            )
            for user in data.get("users") or []
            if user and user.get("id") is not None
        }

    async def fetch_board_names(
        self, access_token: str, monday_board_ids: Sequence[str]
    ) -> Dict[str, str]:
        ids = _unique_ids(monday_board_ids)
        names: Dict[str, str] = {}
        for start in range(0, len(ids), BOARD_NAME_CHUNK_SIZE):
            chunk = ids[start:start + BOARD_NAME_CHUNK_SIZE]
            data = await self._query(access_token, BOARD_NAMES_QUERY, {"boardIds": chunk})
            for board in data.get("boards") or []:
                if board and board.get("id") is not None:
                    names[str(board["id"])] = board.get("name") or ""
        return names

    async def fetch_account_id(self, access_token: str) -> Optional[str]:
        data = await self._query(access_token, ACCOUNT_QUERY, {})
        account = data.get("account") or {}
        if account.get("id") is None:
            return None
        return str(account["id"])

    async def create_checkout_url(self, access_token: str, sku: str) -> str:
        data = await self._query(access_token, CHECKOUT_MUTATION, {"sku": sku})
        url = (data.get("billing_create_checkout") or {}).get("url")
        if not url:
            logger.error("billing_create_checkout returned no url")
            raise DependencyError("monday", "Checkout could not be created")
        return url


class MondayOAuthClient(IOAuthClient):
    """monday.com OAuth token endpoint: code exchange and refresh grants"""

    def __init__(
        self,
        token_url: str,
        client_id: str,
        client_secret: str,
        redirect_uri: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._token_url = token_url
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._client = httpx.AsyncClient(timeout=httpx.Timeout(timeout), transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def exchange_code(self, code: str) -> OAuthTokens:
        payload = {"code": code, "grant_type": "authorization_code"}
        if self._redirect_uri:
            payload["redirect_uri"] = self._redirect_uri
        return await self._request_tokens(payload, "token exchange")

    async def refresh_token(self, refresh_token: str) -> OAuthTokens:
        return await self._request_tokens(
            {"refresh_token": refresh_token, "grant_type": "refresh_token"}, "token refresh"
        )

    async def _request_tokens(self, grant: dict, action: str) -> OAuthTokens:
        payload = {"client_id": self._client_id, "client_secret": self._client_secret, **grant}
        try:
            response = await self._client.post(self._token_url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error("monday OAuth %s returned HTTP %s", action, exc.response.status_code)
            raise DependencyError("monday", f"OAuth {action} failed") from exc
        except (httpx.RequestError, ValueError) as exc:
            logger.error("monday OAuth %s failed: %s", action, exc)
            raise DependencyError("monday", f"OAuth {action} failed") from exc

        access_token = body.get("access_token") if isinstance(body, dict) else None
        if not access_token:
            raise DependencyError("monday", f"OAuth {action} returned no access token")
        account_id = None
        for container in (body, body.get("data") or {}, body.get("scope_data") or {}):
            if isinstance(container, dict) and container.get("account_id") is not None:
                account_id = str(container["account_id"])
                break

        return OAuthTokens(
            access_token=access_token,
            refresh_token=body.get("refresh_token"),
            account_id=account_id,
        )
