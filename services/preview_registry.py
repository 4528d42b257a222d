"""Ownership-scoped preview handles for uploaded media.

A handle is an opaque token the presentation layer can turn into a URL to
render the original file. The session store is the only owner: it acquires
a handle when media is uploaded and releases it when the media is replaced
or cleared. Released handles stop resolving immediately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional
from uuid import uuid4

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreviewEntry:
    data: bytes
    mime_type: str


class PreviewRegistry:
    """In-memory map of live preview handles to the bytes they render."""

    def __init__(self) -> None:
        self._entries: Dict[str, PreviewEntry] = {}

    def acquire(self, data: bytes, mime_type: str) -> str:
        """Register ``data`` and return a new handle bound to it."""
        handle = uuid4().hex
        self._entries[handle] = PreviewEntry(data=data, mime_type=mime_type)
        return handle

    def release(self, handle: str) -> bool:
        """Revoke ``handle``. Returns False if it was already released."""
        if self._entries.pop(handle, None) is None:
            LOGGER.warning("Preview handle %s released more than once", handle)
            return False
        return True

    def resolve(self, handle: str) -> Optional[PreviewEntry]:
        return self._entries.get(handle)

    def __contains__(self, handle: object) -> bool:
        return handle in self._entries

    def __len__(self) -> int:
        return len(self._entries)
