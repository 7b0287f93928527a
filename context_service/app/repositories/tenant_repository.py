from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from uuid import UUID

from context_service.domain.entities import Tenant


class ITenantRepository(ABC):
    """Tenant repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, tenant_id: UUID) -> Optional[Tenant]:
        """Get tenant by ID"""
        pass

    @abstractmethod
    async def get_by_account_id(self, account_id: str) -> Optional[Tenant]:
        """Get tenant by canonical monday.com account id"""
        pass

    @abstractmethod
    async def get_or_create(self, account_id: str) -> Tenant:
        """Insert-if-absent keyed by account id, then return the stored row"""
        pass

    @abstractmethod
    async def upsert_credentials(
        self, account_id: str, access_token: Optional[str], refresh_token: Optional[str]
    ) -> Tenant:
        """Insert or update the tenant's encrypted monday.com credentials"""
        pass

    @abstractmethod
    async def update(self, tenant: Tenant) -> Tenant:
        """Update existing tenant"""
        pass

    @abstractmethod
    async def increment_storage(self, tenant_id: UUID, delta_bytes: int) -> None:
        """Atomically add delta_bytes (may be negative) to storage_bytes_used"""
        pass

    @abstractmethod
    async def list_by_plans(self, plans: Iterable[str]) -> List[Tenant]:
        """List tenants on any of the given plans"""
        pass

    @abstractmethod
    async def list_with_refresh_token(self) -> List[Tenant]:
        """List tenants holding a stored monday.com refresh token"""
        pass
