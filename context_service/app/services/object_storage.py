from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class SignedUpload:
    upload_url: str
    token: Optional[str] = None


class IObjectStorage(ABC):
    """Object store holding uploaded file contents"""

    @abstractmethod
    async def create_signed_upload_url(self, path: str) -> SignedUpload:
        """Time-boxed URL the client uploads to"""
        pass

    @abstractmethod
    async def create_signed_download_url(self, path: str, expires_in: int = 60) -> str:
        """Time-boxed URL the client downloads from"""
        pass

    @abstractmethod
    async def get_object_size(self, path: str) -> Optional[int]:
        """Actual stored length in bytes, None when the object does not exist"""
        pass

    @abstractmethod
    async def move(self, source: str, destination: str) -> None:
        """Move an object between paths"""
        pass

    @abstractmethod
    async def remove(self, paths: Sequence[str]) -> None:
        """Remove objects"""
        pass
