"""Session domain models for the video inspector."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional, Tuple
from uuid import uuid4

from models.analysis_result import AnalysisResult

ChatRole = Literal["user", "model"]


class SessionPhase(str, Enum):
	"""Lifecycle phase derived from what a session currently holds."""

	EMPTY = "empty"
	MEDIA_LOADED = "media_loaded"
	ANALYZED = "analyzed"


@dataclass(frozen=True)
class UploadedMedia:
	"""An uploaded file, its base64 payload, and the preview handle it owns."""

	raw_bytes: bytes = field(repr=False)
	encoded_payload: str = field(repr=False)
	mime_type: str
	preview_handle: str
	filename: str = "upload"
	media_id: str = field(default_factory=lambda: uuid4().hex)

	@property
	def size_bytes(self) -> int:
		return len(self.raw_bytes)

	@property
	def is_image(self) -> bool:
		return self.mime_type.startswith("image/")

	@property
	def is_video(self) -> bool:
		return self.mime_type.startswith("video/")


@dataclass(frozen=True)
class ChatMessage:
	"""One transcript entry. The timestamp is fixed when the message is built."""

	role: ChatRole
	text: str
	timestamp: float = field(default_factory=lambda: time.time())

	def to_wire(self) -> dict:
		return {"role": self.role, "text": self.text, "timestamp": self.timestamp}


@dataclass(frozen=True)
class SessionState:
	"""Immutable snapshot of one inspector session.

	Transitions in ``services.session.transitions`` return new snapshots
	instead of mutating this one.
	"""

	session_id: str
	media: Optional[UploadedMedia] = None
	analysis: Optional[AnalysisResult] = None
	messages: Tuple[ChatMessage, ...] = ()

	@property
	def phase(self) -> SessionPhase:
		if self.media is None:
			return SessionPhase.EMPTY
		if self.analysis is None:
			return SessionPhase.MEDIA_LOADED
		return SessionPhase.ANALYZED
