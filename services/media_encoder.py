"""Turn uploaded files into base64 payloads with an attached preview handle."""

from __future__ import annotations

import base64
import binascii

from models.session_models import UploadedMedia
from services.errors import SizeLimitExceeded
from services.preview_registry import PreviewRegistry

MAX_UPLOAD_BYTES = 200 * 1024 * 1024
DEFAULT_MIME_TYPE = "application/octet-stream"


def check_size(size: int, limit: int = MAX_UPLOAD_BYTES) -> None:
    """Raise SizeLimitExceeded when ``size`` is over ``limit``."""
    if size > limit:
        raise SizeLimitExceeded(size, limit)


def decode_payload(encoded_payload: str) -> bytes:
    """Return the original bytes for a payload produced by :func:`encode`."""
    try:
        return base64.b64decode(encoded_payload.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ValueError("Payload is not valid base64.") from exc


def to_data_url(encoded_payload: str, mime_type: str) -> str:
    """Wrap an already-encoded payload in a data URL."""
    return f"data:{mime_type};base64,{encoded_payload}"


def encode(
    data: bytes,
    mime_type: str,
    previews: PreviewRegistry,
    *,
    filename: str = "upload",
    limit: int = MAX_UPLOAD_BYTES,
) -> UploadedMedia:
    """Encode ``data`` and acquire a preview handle for it.

    The size check happens before anything is allocated. If encoding fails
    after the handle was acquired, the handle is released before the error
    propagates, so a failed encode never leaks a preview.

    Raises:
        SizeLimitExceeded: If ``data`` is larger than ``limit``.
    """
    check_size(len(data), limit)
    mime_type = mime_type or DEFAULT_MIME_TYPE

    handle = previews.acquire(data, mime_type)
    try:
        encoded = base64.b64encode(data).decode("ascii")
        return UploadedMedia(
            raw_bytes=bytes(data),
            encoded_payload=encoded,
            mime_type=mime_type,
            preview_handle=handle,
            filename=filename or "upload",
        )
    except BaseException:
        previews.release(handle)
        raise
