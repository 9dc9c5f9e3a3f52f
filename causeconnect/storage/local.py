"""
Local Filesystem Storage Backend

Stores uploads on the local filesystem under UPLOAD_DIR:

{base_path}/
├── events/{user_id}/{ms}-{random}.{ext}
├── avatars/...
└── chat/{conversation_id}/{user_id}/{ms}-{name}

Fits development and single-server deployments; several API instances
need a shared backend instead.
"""

import hashlib
import logging
import aiofiles
import aiofiles.os
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional

from causeconnect.storage.base import (
    StorageBackend,
    StoredFile,
    StorageError,
    StoredFileNotFound,
)

logger = logging.getLogger(__name__)


class LocalStorage(StorageBackend):
    """
    Local filesystem storage implementation using async file I/O.

    Attributes:
        base_path: Root directory for all file storage
    """

    def __init__(self, base_path: str):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"LocalStorage initialized at: {self.base_path.absolute()}")

    def _get_full_path(self, relative_path: str) -> Path:
        """
        Resolve ``relative_path`` under base_path.

        Raises:
            StorageError: If the path would escape base_path
        """
        resolved = (self.base_path / relative_path).resolve()
        try:
            resolved.relative_to(self.base_path.resolve())
        except ValueError:
            logger.warning(f"Path traversal attempt detected: {relative_path}")
            raise StorageError(f"Invalid path: {relative_path}")
        return resolved

    async def save(
        self,
        file_content: bytes,
        destination_path: str,
        content_type: Optional[str] = None
    ) -> StoredFile:
        full_path = self._get_full_path(destination_path)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(full_path, 'wb') as f:
                await f.write(file_content)
        except OSError as e:
            logger.error(f"Failed to save file {destination_path}: {e}")
            raise StorageError(f"Failed to save file: {e}") from e

        checksum = hashlib.md5(file_content).hexdigest()
        logger.info(
            f"File saved: {destination_path} "
            f"({len(file_content)} bytes, checksum: {checksum[:8]}...)"
        )
        return StoredFile(
            path=destination_path,
            size=len(file_content),
            content_type=content_type or "application/octet-stream",
            stored_at=datetime.now(timezone.utc),
            checksum=checksum,
        )

    async def get(self, path: str) -> bytes:
        full_path = self._get_full_path(path)
        if not full_path.is_file():
            raise StoredFileNotFound(f"File not found: {path}")
        async with aiofiles.open(full_path, 'rb') as f:
            return await f.read()

    async def delete(self, path: str) -> bool:
        full_path = self._get_full_path(path)
        if not full_path.is_file():
            return False
        await aiofiles.os.remove(full_path)
        logger.info(f"File deleted: {path}")
        return True

    async def exists(self, path: str) -> bool:
        return self._get_full_path(path).is_file()
