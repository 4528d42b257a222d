"""Validation helpers for uploaded footage."""

from fastapi import HTTPException, UploadFile

from services.media_encoder import DEFAULT_MIME_TYPE, check_size

READ_CHUNK_BYTES = 1024 * 1024


def normalize_mime_type(content_type: str | None) -> str:
    """Strip MIME parameters (e.g. 'video/webm;codecs=vp9') and lowercase."""
    mime = (content_type or "").lower().split(";", 1)[0].strip()
    return mime or DEFAULT_MIME_TYPE


async def read_upload_bytes(upload: UploadFile, limit: int) -> bytes:
    """Read an upload, failing as soon as it grows past ``limit`` bytes.

    Raises:
        HTTPException(400): The upload is missing or empty.
        SizeLimitExceeded: The upload is larger than ``limit``.
    """
    if not upload.filename:
        raise HTTPException(status_code=400, detail="Uploaded file must have a filename.")

    declared = getattr(upload, "size", None)
    if declared is not None:
        check_size(declared, limit)

    chunks = []
    total = 0
    while True:
        chunk = await upload.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        check_size(total, limit)
        chunks.append(chunk)

    if not total:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")
    return b"".join(chunks)
