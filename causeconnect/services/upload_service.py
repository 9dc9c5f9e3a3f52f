"""
Upload Service

Generic bucketed uploads (event images, avatars, post and squad media).
"""

import logging
from typing import Optional
from uuid import UUID

from causeconnect.core.config import settings
from causeconnect.core.exceptions import ValidationFailed
from causeconnect.schemas.storage import UploadResponse
from causeconnect.storage import get_storage
from causeconnect.utils.file_utils import detect_mime_type, file_extension, random_base36, sanitize_filename
from causeconnect.utils.time import now_millis

logger = logging.getLogger(__name__)


async def upload_file(
    user_id: UUID,
    bucket: Optional[str],
    filename: str,
    content: bytes,
    declared_type: Optional[str] = None,
) -> UploadResponse:
    """
    Store ``content`` at ``{bucket}/{user_id}/{ms}-{random}.{ext}``.

    Raises:
        ValidationFailed: Unknown bucket, empty or oversized file
        ServiceUnavailable: Storage backend not configured
    """
    if not bucket or bucket not in settings.STORAGE_BUCKETS:
        raise ValidationFailed(
            f"Invalid bucket. Must be one of: {', '.join(settings.STORAGE_BUCKETS)}"
        )
    if not content:
        raise ValidationFailed("File is empty")
    if len(content) > settings.MAX_FILE_SIZE_BYTES:
        raise ValidationFailed(f"File exceeds the {settings.MAX_FILE_SIZE_MB} MB limit")

    storage = get_storage()

    name = sanitize_filename(filename)
    mime_type = detect_mime_type(content, declared_type)
    path = f"{bucket}/{user_id}/{now_millis()}-{random_base36(8)}.{file_extension(name)}"

    stored = await storage.save(content, path, mime_type)
    logger.info(f"Upload by {user_id} stored at {stored.path}")

    return UploadResponse(
        url=f"{settings.PUBLIC_FILES_URL}/{stored.path}",
        path=stored.path,
        bucket=bucket,
        size=stored.size,
        type=mime_type,
        name=name,
    )
