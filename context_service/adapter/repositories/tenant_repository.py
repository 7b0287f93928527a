from typing import Iterable, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from context_service.adapter.repositories.upsert import insert_ignore, upsert
from context_service.app.repositories.tenant_repository import ITenantRepository
from context_service.domain.base import utcnow
from context_service.domain.entities import BillingStatus, PlanId, Tenant


class TenantRepository(ITenantRepository):
    """Tenant repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _new_row(self, account_id: str) -> dict:
        now = utcnow()
        return {
            "id": uuid4(),
            "account_id": account_id,
            "plan": PlanId.free,
            "billing_status": BillingStatus.active,
            "storage_bytes_used": 0,
            "board_admin_delete_enabled": False,
            "created_at": now,
            "updated_at": now,
        }

    async def get_by_id(self, tenant_id: UUID) -> Optional[Tenant]:
        """Get tenant by ID, always reloading the row from the database"""
        stmt = (
            select(Tenant)
            .where(Tenant.id == tenant_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_account_id(self, account_id: str) -> Optional[Tenant]:
        """Get tenant by canonical account id"""
        stmt = (
            select(Tenant)
            .where(Tenant.account_id == account_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create(self, account_id: str) -> Tenant:
        """Insert-if-absent on the unique account id, safe under concurrent first touch"""
        await insert_ignore(self.session, Tenant, self._new_row(account_id), ["account_id"])
        return await self.get_by_account_id(account_id)

    async def upsert_credentials(
        self, account_id: str, access_token: Optional[str], refresh_token: Optional[str]
    ) -> Tenant:
        """Insert or update encrypted credentials keyed by account id"""
        values = self._new_row(account_id)
        values["access_token"] = access_token
        values["refresh_token"] = refresh_token
        await upsert(
            self.session,
            Tenant,
            values,
            ["account_id"],
            update_columns=["access_token", "refresh_token", "updated_at"],
        )
        return await self.get_by_account_id(account_id)

    async def update(self, tenant: Tenant) -> Tenant:
        """Update existing tenant"""
        tenant.updated_at = utcnow()
        self.session.add(tenant)
        await self.session.flush()
        await self.session.refresh(tenant)
        return tenant

    async def increment_storage(self, tenant_id: UUID, delta_bytes: int) -> None:
        """Single UPDATE so concurrent deltas never overwrite each other"""
        stmt = (
            update(Tenant)
            .where(Tenant.id == tenant_id)
            .values(
                storage_bytes_used=Tenant.storage_bytes_used + int(delta_bytes),
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def list_by_plans(self, plans: Iterable[str]) -> List[Tenant]:
        """List tenants on any of the given plans"""
        stmt = select(Tenant).where(Tenant.plan.in_(list(plans)))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_with_refresh_token(self) -> List[Tenant]:
        """List tenants holding a stored monday.com refresh token"""
        stmt = select(Tenant).where(Tenant.refresh_token.is_not(None)).order_by(Tenant.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
