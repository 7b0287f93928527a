"""
Tenant Entity

Represents one monday.com account using the app.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import BigInteger, Column, DateTime, Field, Index, SQLModel

from context_service.domain.base import utcnow

from .enums import BillingStatus, PlanId


class Tenant(SQLModel, table=True):
    """
    Tenant entity - one per monday.com account.

    Business Rules:
    - account_id is the canonical (normalised) account id and is unique
    - Created lazily on first board resolution or on OAuth callback (upsert)
    - plan/billing_status are driven by marketplace webhooks
    - storage_bytes_used is only changed through atomic increments
    - Access/refresh tokens are stored encrypted
    """

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    account_id: str = Field(max_length=64, nullable=False)

    plan: PlanId = Field(default=PlanId.free)
    pending_plan: Optional[PlanId] = Field(default=None)
    billing_status: BillingStatus = Field(default=BillingStatus.active)

    storage_bytes_used: int = Field(
        default=0, sa_column=Column(BigInteger, nullable=False, default=0)
    )

    access_token: Optional[str] = Field(default=None)
    refresh_token: Optional[str] = Field(default=None)

    board_admin_delete_enabled: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_tenant_account_id", "account_id", unique=True),
        Index("idx_tenant_plan", "plan"),
    )
