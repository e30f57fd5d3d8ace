"""Helpers for the encoded image blobs stored on products."""

from __future__ import annotations

import base64
import binascii
import mimetypes
import re
from pathlib import Path

from .errors import ValidationError

_DATA_URL_RE = re.compile(r"^data:(image/[\w.+-]+);base64,", re.IGNORECASE)


def to_data_url(data: bytes, mime_type: str = "image/jpeg") -> str:
    return f"data:{mime_type};base64,{base64.standard_b64encode(data).decode()}"


def strip_data_url(payload: str) -> str:
    """Remove a ``data:image/...;base64,`` header, if present."""
    return _DATA_URL_RE.sub("", payload.strip(), count=1)


def decode_image_payload(payload: bytes | str) -> bytes:
    """Return raw image bytes from bytes, a data URL or bare base64 text.

    Raises:
        ValueError: If a string payload is not valid base64.
    """
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    try:
        return base64.b64decode(strip_data_url(payload), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Image payload is not valid base64: {e}") from None


def load_image_file(path: str | Path) -> str:
    """Read an image file and return it as a data URL."""
    p = Path(path)
    if not p.is_file():
        raise ValidationError(f"Image file not found: {p}")
    mime_type = mimetypes.guess_type(p.name)[0] or "image/jpeg"
    if not mime_type.startswith("image/"):
        raise ValidationError(f"Not an image file: {p.name}")
    return to_data_url(p.read_bytes(), mime_type)
