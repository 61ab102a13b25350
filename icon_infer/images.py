"""Image format detection and icon decoding."""

from __future__ import annotations

import io
import logging
from typing import Optional
from urllib.parse import urlparse

from filetype import guess
from PIL import Image, UnidentifiedImageError

from .errors import DecodeError
from .models import Icon

logger = logging.getLogger("icon_infer")

ALLOWED_IMAGE_TYPES = {"png", "apng", "ico", "jpg", "gif", "webp", "bmp", "tiff"}


def detect_image_format(data: bytes) -> Optional[str]:
    """Detect image type using filetype; returns lowercase extension."""
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        ext = kind.extension.lower()
        if ext == "jpeg":
            return "jpg"
        if ext == "tif":
            return "tiff"
        return ext
    return None


def decode_icon(data: bytes, source: str) -> Icon:
    """Decode ``data`` fetched from ``source`` into an RGBA icon."""
    if not data:
        raise DecodeError(f"{source}: empty payload")
    extension = detect_image_format(data)
    if not extension or extension not in ALLOWED_IMAGE_TYPES:
        raise DecodeError(f"{source}: unsupported image type ({extension or 'unknown'})")
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            rgba = img.convert("RGBA")
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as exc:
        raise DecodeError(f"{source}: {exc}") from exc
    if rgba.width == 0 or rgba.height == 0:
        raise DecodeError(f"{source}: image has no pixels")
    name = urlparse(source).hostname or ""
    logger.debug("Decoded %s as %s %dx%d", source, extension, rgba.width, rgba.height)
    return Icon(source=source, name=name, extension=extension, image=rgba)
