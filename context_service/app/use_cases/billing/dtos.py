"""
Billing Use Case DTOs (Data Transfer Objects)
"""

from typing import Optional

from pydantic import BaseModel


class WebhookResponse(BaseModel):
    """Acknowledgement returned to the marketplace"""

    ok: bool = True
    ignored: bool = False
    event: Optional[str] = None
    plan: Optional[str] = None


class CheckoutResponse(BaseModel):
    url: str
    plan: str


class ConnectTenantResponse(BaseModel):
    """Response for the OAuth callback use case"""

    tenant_id: str
    account_id: str


class TokenRefreshResponse(BaseModel):
    """Response for the monday.com token refresh job"""

    tenants: int
    refreshed: int
    failed: int
    skipped: int
