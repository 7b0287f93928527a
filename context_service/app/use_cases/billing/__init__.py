"""
Billing Use Cases

Marketplace webhooks, checkout, OAuth tenant provisioning and token refresh.
"""

from .connect_tenant_use_case import ConnectTenantUseCase
from .dtos import CheckoutResponse, ConnectTenantResponse, TokenRefreshResponse, WebhookResponse
from .handle_marketplace_event_use_case import HandleMarketplaceEventUseCase
from .refresh_tenant_tokens_use_case import RefreshTenantTokensUseCase
from .start_checkout_use_case import StartCheckoutUseCase

__all__ = [
    "CheckoutResponse",
    "ConnectTenantResponse",
    "TokenRefreshResponse",
    "WebhookResponse",
    "ConnectTenantUseCase",
    "HandleMarketplaceEventUseCase",
    "RefreshTenantTokensUseCase",
    "StartCheckoutUseCase",
]
