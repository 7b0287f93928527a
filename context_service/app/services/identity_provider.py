from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from context_service.domain.viewer_roles import RoleFacts


@dataclass(frozen=True)
class UserProfile:
    """Display data of a monday.com user"""

    id: str
    name: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class OAuthTokens:
    access_token: str
    refresh_token: Optional[str] = None
    account_id: Optional[str] = None


class IIdentityProvider(ABC):
    """monday.com API as seen by the application layer"""

    @abstractmethod
    async def fetch_role_facts(
        self, access_token: str, monday_board_id: str, user_ids: Sequence[str]
    ) -> Dict[str, RoleFacts]:
        """Admin/owner facts for each user id on a board, in one call"""
        pass

    @abstractmethod
    async def fetch_users(self, access_token: str, user_ids: Sequence[str]) -> Dict[str, UserProfile]:
        """Name and email of each user id"""
        pass

    @abstractmethod
    async def fetch_board_names(
        self, access_token: str, monday_board_ids: Sequence[str]
    ) -> Dict[str, str]:
        """Board names keyed by monday.com board id"""
        pass

    @abstractmethod
    async def fetch_account_id(self, access_token: str) -> Optional[str]:
        """Account id the token belongs to"""
        pass

    @abstractmethod
    async def create_checkout_url(self, access_token: str, sku: str) -> str:
        """Marketplace checkout URL for a plan SKU"""
        pass


class IOAuthClient(ABC):
    """monday.com OAuth token endpoint"""

    @abstractmethod
    async def exchange_code(self, code: str) -> OAuthTokens:
        """Exchange an authorization code for tokens"""
        pass

    @abstractmethod
    async def refresh_token(self, refresh_token: str) -> OAuthTokens:
        """Trade a refresh token for a new access token (and possibly a new refresh token)"""
        pass


@dataclass(frozen=True)
class SessionIdentity:
    """Identity carried by a verified monday.com session token"""

    account_id: str
    user_id: Optional[str] = None
    board_id: Optional[str] = None
