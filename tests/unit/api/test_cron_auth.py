import pytest

from config import ApplicationConfig
from context_service.api.error import ClientError
from context_service.api.utils.cron_auth import verify_cron_secret


@pytest.mark.asyncio
async def test_valid_cron_secret(monkeypatch):
    monkeypatch.setattr(ApplicationConfig, "CRON_SECRET", "cron-secret")

    assert await verify_cron_secret("Bearer cron-secret") is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "configured,header,code",
    [
        ("", "Bearer anything", "UNAUTHORIZED"),
        ("cron-secret", None, "UNAUTHORIZED"),
        ("cron-secret", "Bearer wrong", "INVALID_CRON_SECRET"),
        ("cron-secret", "cron-secret", "INVALID_CRON_SECRET"),
    ],
)
async def test_rejected_cron_secret(monkeypatch, configured, header, code):
    monkeypatch.setattr(ApplicationConfig, "CRON_SECRET", configured)

    with pytest.raises(ClientError) as exc:
        await verify_cron_secret(header)

    assert exc.value.status_code == 401
    assert exc.value.base_error.code == code
