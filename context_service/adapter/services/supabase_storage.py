"""Object storage backed by the Supabase storage REST API."""

import logging
from typing import Optional, Sequence
from urllib.parse import parse_qs, quote, urlparse

import httpx

from context_service.app.services.object_storage import IObjectStorage, SignedUpload
from context_service.domain.errors import DependencyError

logger = logging.getLogger(__name__)


class SupabaseObjectStorage(IObjectStorage):
    """Signed URLs, HEAD, move and remove against one storage bucket"""

    def __init__(
        self,
        base_url: str,
        service_key: str,
        bucket: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._bucket = bucket
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout),
            headers={"Authorization": f"Bearer {service_key}", "apikey": service_key},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def _object_path(self, path: str) -> str:
        return f"{quote(self._bucket)}/{quote(path, safe='/')}"

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as exc:
            logger.error("Storage %s %s returned HTTP %s", method, url, exc.response.status_code)
            raise DependencyError("storage", f"Storage returned HTTP {exc.response.status_code}") from exc
        except httpx.RequestError as exc:
            logger.error("Storage %s %s failed: %s", method, url, exc)
            raise DependencyError("storage", "Storage unreachable") from exc

    async def create_signed_upload_url(self, path: str) -> SignedUpload:
        response = await self._request("POST", f"/object/upload/sign/{self._object_path(path)}")
        relative = response.json().get("url") or ""
        token = parse_qs(urlparse(relative).query).get("token", [None])[0]
        return SignedUpload(upload_url=f"{self._base_url}{relative}", token=token)

    async def create_signed_download_url(self, path: str, expires_in: int = 60) -> str:
        response = await self._request(
            "POST", f"/object/sign/{self._object_path(path)}", json={"expiresIn": expires_in}
        )
        body = response.json()
        relative = body.get("signedURL") or body.get("signedUrl") or ""
        return f"{self._base_url}{relative}"

    async def get_object_size(self, path: str) -> Optional[int]:
        try:
            response = await self._client.head(f"/object/authenticated/{self._object_path(path)}")
        except httpx.RequestError as exc:
            logger.error("Storage HEAD %s failed: %s", path, exc)
            raise DependencyError("storage", "Storage unreachable") from exc

        if response.status_code in (400, 404):
            return None
        if response.status_code >= 300:
            logger.error("Storage HEAD %s returned HTTP %s", path, response.status_code)
            raise DependencyError("storage", f"Storage returned HTTP {response.status_code}")

        length = response.headers.get("content-length")
        if length is None or not length.isdigit():
            raise DependencyError("storage", "Storage did not report object size")
        return int(length)

    async def move(self, source: str, destination: str) -> None:
        await self._request(
            "POST",
            "/object/move",
            json={"bucketId": self._bucket, "sourceKey": source, "destinationKey": destination},
        )

    async def remove(self, paths: Sequence[str]) -> None:
        if not paths:
            return
        await self._request("DELETE", f"/object/{quote(self._bucket)}", json={"prefixes": list(paths)})
