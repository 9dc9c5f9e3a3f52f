"""
Storage Endpoints

- POST /storage-upload      - Bucketed upload (multipart ``file``, ``X-Bucket-Name`` header)
- GET  /files/{path}        - Serve a stored file (mounted at the app root)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Header, UploadFile, status
from fastapi.responses import Response

from causeconnect.api.deps import get_current_user
from causeconnect.core.exceptions import NotFound
from causeconnect.models import User
from causeconnect.schemas.base import ErrorResponse
from causeconnect.schemas.storage import UploadResponse
from causeconnect.services.upload_service import upload_file
from causeconnect.storage import StorageError, get_storage
from causeconnect.utils.file_utils import detect_mime_type

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Storage"])
files_router = APIRouter(tags=["Storage"])


@router.post(
    "/storage-upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid bucket or file too large"},
        503: {"model": ErrorResponse, "description": "Storage backend not configured"},
    }
)
async def storage_upload(
    file: UploadFile = File(...),
    x_bucket_name: Optional[str] = Header(None),
    current_user: User = Depends(get_current_user),
):
    content = await file.read()
    return await upload_file(
        current_user.id,
        x_bucket_name,
        file.filename or "file",
        content,
        file.content_type,
    )


@files_router.get("/files/{path:path}")
async def serve_file(path: str):
    try:
        content = await get_storage().get(path)
    except StorageError as e:
        logger.debug(f"File lookup failed for {path}: {e}")
        raise NotFound("File not found")
    return Response(content=content, media_type=detect_mime_type(content))
