import json

import httpx
import pytest

from context_service.adapter.services.supabase_storage import SupabaseObjectStorage
from context_service.domain.errors import DependencyError

BASE = "https://project.supabase.test/storage/v1"


def make_storage(handler):
    return SupabaseObjectStorage(BASE, "service-key", "context-files", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_signed_upload_url():
    def handler(request):
        assert request.url.path == "/storage/v1/object/upload/sign/context-files/tenant_1/board_2/a.pdf"
        assert request.headers["Authorization"] == "Bearer service-key"
        return httpx.Response(
            200, json={"url": "/object/upload/sign/context-files/tenant_1/board_2/a.pdf?token=abc"}
        )

    signed = await make_storage(handler).create_signed_upload_url("tenant_1/board_2/a.pdf")

    assert signed.token == "abc"
    assert signed.upload_url.startswith(BASE + "/object/upload/sign/")


@pytest.mark.asyncio
async def test_signed_download_url_ttl():
    def handler(request):
        assert json.loads(request.content) == {"expiresIn": 60}
        return httpx.Response(200, json={"signedURL": "/object/sign/context-files/a.pdf?token=t"})

    url = await make_storage(handler).create_signed_download_url("a.pdf", expires_in=60)

    assert url == BASE + "/object/sign/context-files/a.pdf?token=t"


@pytest.mark.asyncio
async def test_object_size():
    def handler(request):
        if request.url.path.endswith("missing.pdf"):
            return httpx.Response(404)
        return httpx.Response(200, headers={"content-length": str(6 * 1024 * 1024)})

    storage = make_storage(handler)

    assert await storage.get_object_size("a.pdf") == 6 * 1024 * 1024
    assert await storage.get_object_size("missing.pdf") is None


@pytest.mark.asyncio
async def test_move_and_remove_payloads():
    seen = []

    def handler(request):
        seen.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={})

    storage = make_storage(handler)
    await storage.move("a", "b")
    await storage.remove(["a", "b"])
    await storage.remove([])

    assert seen == [
        ("POST", "/storage/v1/object/move", {"bucketId": "context-files", "sourceKey": "a", "destinationKey": "b"}),
        ("DELETE", "/storage/v1/object/context-files", {"prefixes": ["a", "b"]}),
    ]


@pytest.mark.asyncio
async def test_failures_raise_dependency_error():
    storage = make_storage(lambda request: httpx.Response(503))

    with pytest.raises(DependencyError):
        await storage.move("a", "b")
    with pytest.raises(DependencyError):
        await storage.get_object_size("a")
