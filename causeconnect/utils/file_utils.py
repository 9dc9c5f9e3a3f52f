"""
File Utilities

Helpers for upload handling. Never trust client-supplied names or types.
"""

import os
import re
import secrets
import string
import logging

import filetype

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def detect_mime_type(file_content: bytes, declared: str | None = None) -> str:
    """
    Detect the MIME type from magic bytes, falling back to the declared
    type and then to text/plain or application/octet-stream.
    """
    kind = filetype.guess(file_content)
    if kind is not None:
        return kind.mime

    if declared and declared != "application/octet-stream":
        return declared

    try:
        file_content[:1024].decode("utf-8")
        return "text/plain"
    except (UnicodeDecodeError, ValueError):
        return "application/octet-stream"


def attachment_kind(mime_type: str) -> str:
    """Map a MIME type to image, video, audio or file."""
    for kind in ("image", "video", "audio"):
        if mime_type.startswith(f"{kind}/"):
            return kind
    return "file"


def sanitize_filename(filename: str) -> str:
    """
    Remove dangerous characters from a filename.
    """
    filename = os.path.basename(filename or "")
    filename = filename.replace("\x00", "")
    filename = re.sub(r'[^\w\-.]', '_', filename)
    filename = re.sub(r'_+', '_', filename)
    filename = filename.strip('_.')

    if len(filename) > 200:
        name, ext = os.path.splitext(filename)
        filename = name[:200 - len(ext)] + ext

    return filename or "unnamed_file"


def file_extension(filename: str) -> str:
    """Lowercase extension without the dot, or "bin"."""
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower()
    return re.sub(r'[^a-z0-9]', '', ext) or "bin"


def random_base36(length: int) -> str:
    return ''.join(secrets.choice(_BASE36) for _ in range(length))
