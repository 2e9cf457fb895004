"""Data URI helpers — base64 image payloads inline as `data:<mime>;base64,<data>`."""

from __future__ import annotations

import base64
import binascii
import io
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError


def encode_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_uri(uri: str) -> Tuple[str, bytes]:
    """Return (mime_type, payload). Raises ValueError for anything but a base64 data URI."""
    if not uri.startswith("data:"):
        raise ValueError("not a data URI")
    header, sep, payload = uri[5:].partition(",")
    if not sep or not header.endswith(";base64"):
        raise ValueError("only base64 data URIs are supported")
    mime_type = header[: -len(";base64")] or "text/plain"
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid base64 payload: {e}") from e


def describe_image(data: bytes) -> Optional[Tuple[str, int, int]]:
    """(format, width, height) for a raster payload; None for SVG or undecodable bytes."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.format or "unknown", img.width, img.height
    except (UnidentifiedImageError, OSError):
        return None


def extension_for(mime_type: str) -> str:
    return {
        "image/png": ".png",
        "image/jpeg": ".jpg",
        "image/webp": ".webp",
        "image/svg+xml": ".svg",
    }.get(mime_type, ".bin")
