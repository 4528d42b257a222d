"""Poster thumbnails for uploaded still images.

Provides a small OOP wrapper around Pillow that turns the raw bytes of an
uploaded image into a PNG poster fitting within 160x160 pixels, so the
session overview can show a preview without shipping the full file.
Video uploads do not get a poster.

Example:
    tg = ThumbnailGenerator(max_size=(160, 160))
    png_bytes = tg.create_thumbnail(media.raw_bytes)
"""
from __future__ import annotations

import io
from typing import Tuple

from PIL import Image, UnidentifiedImageError


class ThumbnailGenerator:
    """Generate PNG thumbnails from raw image bytes.

    Args:
        max_size: Maximum width and height for the thumbnail. Defaults to (160, 160).
        background: Background color used to flatten transparent images.
            Defaults to white.
    """

    def __init__(self, max_size: Tuple[int, int] = (160, 160), background: Tuple[int, int, int] | None = None):
        self.max_size = max_size
        self.background = background or (255, 255, 255)

    def create_thumbnail(self, data: bytes) -> bytes:
        """Create a PNG thumbnail from raw image bytes.

        Raises:
            ValueError: If the bytes cannot be opened as an image.
        """
        try:
            src = Image.open(io.BytesIO(data))
            src.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise ValueError("Uploaded bytes are not a supported image format") from exc

        src = src.convert("RGBA")
        src.thumbnail(self.max_size, Image.LANCZOS)

        # Flatten alpha against the background color
        background = Image.new("RGB", src.size, self.background)
        background.paste(src, mask=src.split()[3])

        out_io = io.BytesIO()
        background.save(out_io, format="PNG", optimize=True)
        return out_io.getvalue()
