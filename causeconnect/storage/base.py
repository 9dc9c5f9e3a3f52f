"""
Storage Backend Abstract Base Class

Interface every storage backend implements. Business code only talks to
StorageBackend, so the concrete backend is a configuration choice.
"""
from abc import ABC, abstractmethod
from typing import Optional
from dataclasses import dataclass
from datetime import datetime


@dataclass
class StoredFile:
    """
    Metadata about a stored file.

    Attributes:
        path: The storage path where file was saved
        size: File size in bytes
        content_type: MIME type of the file
        stored_at: When the file was stored
        checksum: MD5 of the content
    """
    path: str
    size: int
    content_type: str
    stored_at: datetime
    checksum: Optional[str] = None


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StoredFileNotFound(StorageError):
    """Raised when a requested file doesn't exist."""
    pass


class StorageBackend(ABC):
    """
    Abstract base class for file storage backends.
    """

    @abstractmethod
    async def save(
        self,
        file_content: bytes,
        destination_path: str,
        content_type: Optional[str] = None
    ) -> StoredFile:
        """
        Save file content to storage.

        Args:
            file_content: Raw bytes of the file to store
            destination_path: Relative path, e.g. "chat/<conv>/<user>/1700000000000-photo.png"
            content_type: MIME type of the file

        Raises:
            StorageError: If the file cannot be saved
        """

    @abstractmethod
    async def get(self, path: str) -> bytes:
        """
        Retrieve file content.

        Raises:
            StoredFileNotFound: If the file doesn't exist
        """

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """Delete a file. Returns False if it didn't exist."""

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if a file exists."""
