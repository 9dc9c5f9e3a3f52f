"""
Storage Module

File storage behind a strategy interface; STORAGE_BACKEND picks the
implementation.
"""

from causeconnect.storage.base import (
    StorageBackend,
    StoredFile,
    StorageError,
    StoredFileNotFound,
)
from causeconnect.storage.local import LocalStorage
from causeconnect.core.config import settings
from causeconnect.core.exceptions import ServiceUnavailable

_storage_instance: StorageBackend | None = None


def get_storage() -> StorageBackend:
    """
    Return the configured storage backend (created once, then reused).

    Raises:
        ServiceUnavailable: If the configured backend is not available
    """
    global _storage_instance

    if _storage_instance is None:
        _storage_instance = _create_storage_backend()

    return _storage_instance


def _create_storage_backend() -> StorageBackend:
    backend = settings.STORAGE_BACKEND.lower()

    if backend == "local":
        return LocalStorage(base_path=settings.UPLOAD_DIR)

    # s3 / gcs are accepted by config but have no implementation here
    raise ServiceUnavailable(
        f"Storage backend '{backend}' is not configured. Set STORAGE_BACKEND=local."
    )


def reset_storage() -> None:
    """Drop the singleton so the next get_storage() re-reads the config."""
    global _storage_instance
    _storage_instance = None


__all__ = [
    "get_storage",
    "reset_storage",
    "StorageBackend",
    "StoredFile",
    "StorageError",
    "StoredFileNotFound",
    "LocalStorage",
]
