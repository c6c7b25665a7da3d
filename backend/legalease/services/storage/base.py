"""
Abstract base class for blob storage adapters.
All storage implementations must inherit from this class.
"""
from abc import ABC, abstractmethod


class FileStorageInterface(ABC):
    """
    Abstract interface for raw document bytes.
    Keys are opaque to callers; the registry builds them as documents/{owner}/{file_name}.
    """

    @abstractmethod
    async def save_bytes(self, data: bytes, key: str, content_type: str) -> str:
        """
        Store bytes under key.

        Returns:
            The key the blob was stored under
        """
        pass

    @abstractmethod
    async def get_file(self, key: str) -> bytes:
        """
        Retrieve a blob.

        Raises:
            FileNotFoundError: if nothing is stored under key
        """
        pass

    @abstractmethod
    async def delete_file(self, key: str) -> bool:
        """Delete a blob. Returns False if it was not found."""
        pass

    @abstractmethod
    async def file_exists(self, key: str) -> bool:
        pass

    @abstractmethod
    async def initialize(self):
        """Initialize storage (create directories, verify buckets, etc.)."""
        pass

    @abstractmethod
    async def close(self):
        pass
