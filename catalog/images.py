"""Product image handling before upload.

Uploads are checked (size, type, dimensions), downscaled to a sane width and
re-encoded, then posted to the API's ``/upload`` endpoint, which returns the
public ``url`` and storage ``key``.
"""

from __future__ import annotations

import io
import logging
import math
import re

from django.conf import settings
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ALLOWED_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")
MAX_DIMENSION = 4000

# Pillow format name per MIME type
FORMATS = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/gif": "GIF",
    "image/webp": "WEBP",
}


class ImageValidationError(ValueError):
    pass


def format_bytes(size: int) -> str:
    if size == 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    i = min(int(math.floor(math.log(size, 1024))), len(units) - 1)
    value = round(size / (1024 ** i), 2)
    return f"{value:g} {units[i]}"


def safe_filename(name: str) -> str:
    return re.sub(r"[^a-zA-Z0-9.-]", "_", name or "upload")


def _open(upload) -> Image.Image:
    upload.seek(0)
    try:
        img = Image.open(upload)
        img.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageValidationError("File is not a readable image") from exc
    finally:
        upload.seek(0)
    return img


def validate_image(upload, max_size_mb: float | None = None, allowed_types=ALLOWED_TYPES,
                   max_width: int = MAX_DIMENSION, max_height: int = MAX_DIMENSION) -> None:
    max_size_mb = max_size_mb or settings.IMAGE_UPLOAD_MAX_MB

    if upload.size > max_size_mb * 1024 * 1024:
        raise ImageValidationError(f"File size must be less than {max_size_mb:g}MB")

    content_type = getattr(upload, "content_type", "")
    if content_type not in allowed_types:
        raise ImageValidationError(f"File type not allowed. Allowed types: {', '.join(allowed_types)}")

    width, height = _open(upload).size
    if width > max_width or height > max_height:
        raise ImageValidationError(f"Image must be at most {max_width}x{max_height} pixels")


def compress_image(upload, max_width: int | None = None, quality: int | None = None) -> tuple[bytes, str]:
    """Downscale to ``max_width`` keeping aspect ratio and re-encode in the same format."""
    max_width = max_width or settings.IMAGE_UPLOAD_MAX_WIDTH
    quality = quality or settings.IMAGE_UPLOAD_QUALITY

    img = _open(upload)
    content_type = getattr(upload, "content_type", "") or Image.MIME.get(img.format, "image/jpeg")
    fmt = FORMATS.get(content_type, img.format or "JPEG")

    width, height = img.size
    if width > max_width:
        height = round(height * max_width / width)
        width = max_width
        img = img.resize((width, height), Image.Resampling.LANCZOS)

    if fmt == "JPEG" and img.mode not in ("RGB", "L"):
        img = img.convert("RGB")

    out = io.BytesIO()
    save_kwargs = {"quality": quality} if fmt in ("JPEG", "WEBP") else {"optimize": True}
    img.save(out, format=fmt, **save_kwargs)
    return out.getvalue(), content_type


def upload_image(client, upload, path: str = "images") -> dict:
    """Validate, compress and upload. Returns ``{"url": ..., "key": ...}``."""
    validate_image(upload)
    content, content_type = compress_image(upload)
    filename = safe_filename(upload.name)

    logger.info("Uploading %s (%s -> %s)", filename, format_bytes(upload.size), format_bytes(len(content)))
    data = client.upload("/upload", filename, content, content_type, extra={"path": path},
                         error_message="Failed to upload file") or {}
    return {"url": data.get("url", ""), "key": data.get("key", "")}
