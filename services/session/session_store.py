"""Simple in-memory store for inspector sessions.

The store is the single owner of session snapshots and of the preview
handles attached to uploaded media. All state changes go through the pure
functions in ``services.session.transitions``; the store only sequences
them around the asynchronous model calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, Sequence, Tuple
from uuid import uuid4

from models.analysis_result import AnalysisResult
from models.session_models import ChatMessage, SessionState, UploadedMedia
from services import media_encoder
from services.errors import AnalysisInProgress, MediaSuperseded, ModelUnavailable, NoMediaLoaded
from services.preview_registry import PreviewEntry, PreviewRegistry
from services.session import transitions
from services.session.turn_sequencer import TurnSequencer

LOGGER = logging.getLogger(__name__)

CHAT_FAILURE_MESSAGE = (
	"I encountered an error processing your request. Please check the API key or video format."
)


class Analyzer(Protocol):
	async def analyze(self, encoded_payload: str, mime_type: str) -> AnalysisResult: ...


class ChatResponder(Protocol):
	async def ask(self, media: UploadedMedia, history: Sequence[ChatMessage], question: str) -> str: ...


@dataclass
class _SessionRuntime:
	"""Bookkeeping for in-flight work; never part of a snapshot."""

	analyzing_media_id: Optional[str] = None
	turns: TurnSequencer = field(default_factory=TurnSequencer)


class SessionStore:
	"""Manage inspector sessions, their media, analyses, and transcripts."""

	def __init__(self, previews: Optional[PreviewRegistry] = None) -> None:
		self._sessions: Dict[str, SessionState] = {}
		self._runtime: Dict[str, _SessionRuntime] = {}
		self.previews = previews or PreviewRegistry()

	def __len__(self) -> int:
		return len(self._sessions)

	def create(self) -> SessionState:
		"""Create a new empty session."""
		session_id = uuid4().hex
		state = SessionState(session_id=session_id)
		self._sessions[session_id] = state
		self._runtime[session_id] = _SessionRuntime()
		return state

	def get(self, session_id: str) -> SessionState:
		"""Return a session or raise KeyError if missing."""
		state = self._sessions.get(session_id)
		if state is None:
			raise KeyError(f"Session {session_id} not found")
		return state

	def _commit(self, previous: SessionState, new_state: SessionState) -> SessionState:
		"""Store ``new_state`` and release a preview the new snapshot dropped."""
		self._sessions[new_state.session_id] = new_state
		old_media = previous.media
		if old_media is not None and (new_state.media is None or new_state.media.media_id != old_media.media_id):
			self.previews.release(old_media.preview_handle)
		return new_state

	def upload(self, session_id: str, data: bytes, mime_type: str, filename: str = "upload") -> SessionState:
		"""Encode ``data`` and make it the session's media.

		Raises:
			KeyError: Unknown session.
			SizeLimitExceeded: ``data`` is over the ceiling; the session is unchanged.
		"""
		state = self.get(session_id)
		media = media_encoder.encode(data, mime_type, self.previews, filename=filename)
		LOGGER.info("Session %s loaded %s (%s, %d bytes)", session_id, media.filename, media.mime_type, media.size_bytes)
		return self._commit(state, transitions.upload(state, media))

	def clear(self, session_id: str) -> SessionState:
		"""Drop media, analysis, and transcript; release the preview."""
		state = self.get(session_id)
		return self._commit(state, transitions.clear(state))

	def is_analyzing(self, session_id: str) -> bool:
		state = self.get(session_id)
		runtime = self._runtime[session_id]
		return runtime.analyzing_media_id is not None and transitions.is_current(state, runtime.analyzing_media_id)

	def pending_questions(self, session_id: str) -> int:
		self.get(session_id)
		return self._runtime[session_id].turns.pending

	async def analyze(self, session_id: str, analyzer: Analyzer) -> AnalysisResult:
		"""Run one analysis for the current media and store its result.

		A second call for the same media while one is pending is rejected.
		Failures leave the session exactly as it was.

		Raises:
			NoMediaLoaded: Nothing to analyze.
			AnalysisInProgress: An analysis for this media is already pending.
			MediaSuperseded: The media changed before the answer arrived.
			ModelUnavailable, ModelTimeout, SchemaViolation: From ``analyzer``.
		"""
		state = self.get(session_id)
		media = state.media
		if media is None:
			raise NoMediaLoaded("Upload a file before running an analysis.")
		runtime = self._runtime[session_id]
		if runtime.analyzing_media_id == media.media_id:
			raise AnalysisInProgress("An analysis of this file is already running.")

		runtime.analyzing_media_id = media.media_id
		try:
			result = await analyzer.analyze(media.encoded_payload, media.mime_type)
		finally:
			if runtime.analyzing_media_id == media.media_id:
				runtime.analyzing_media_id = None

		current = self.get(session_id)
		if not transitions.is_current(current, media.media_id):
			LOGGER.info("Discarding analysis for superseded media %s in session %s", media.media_id, session_id)
			raise MediaSuperseded("The file changed while the analysis was running.")
		self._commit(current, transitions.analysis_completed(current, media.media_id, result))
		return result

	async def ask(self, session_id: str, question: str, responder: ChatResponder) -> Tuple[ChatMessage, ChatMessage]:
		"""Ask a follow-up question and append the question/answer pair.

		Calls may overlap. Each one snapshots the committed transcript as its
		history when dispatched, and pairs are appended in dispatch order no
		matter which answer arrives first. Any failure of ``responder`` becomes
		an in-band apology instead of an error; only cancellation propagates.

		Raises:
			NoMediaLoaded: Nothing to ask about.
			ValueError: ``question`` is blank.
			MediaSuperseded: The media changed before the answer arrived; nothing is appended.
		"""
		state = self.get(session_id)
		media = state.media
		if media is None:
			raise NoMediaLoaded("Upload a file before asking questions.")
		question = (question or "").strip()
		if not question:
			raise ValueError("Question text is required.")

		turns = self._runtime[session_id].turns
		ticket = turns.take()
		try:
			answer = await responder.ask(media, state.messages, question)
		except ModelUnavailable as exc:
			LOGGER.warning("Chat request failed for session %s; replying with fallback: %s", session_id, exc)
			answer = CHAT_FAILURE_MESSAGE
		except Exception:
			LOGGER.exception("Unexpected chat failure for session %s; replying with fallback", session_id)
			answer = CHAT_FAILURE_MESSAGE
		except BaseException:
			turns.abandon(ticket)
			raise

		async with turns.turn(ticket):
			user_message = ChatMessage(role="user", text=question)
			model_message = ChatMessage(role="model", text=answer)
			current = self.get(session_id)
			if transitions.is_current(current, media.media_id):
				self._commit(current, transitions.turn_completed(current, media.media_id, user_message, model_message))
			else:
				LOGGER.info("Dropping chat turn for superseded media %s in session %s", media.media_id, session_id)
				raise MediaSuperseded("The file changed while the question was being answered.")
		return user_message, model_message

	def preview(self, session_id: str, handle: str) -> PreviewEntry:
		"""Resolve a preview handle owned by the session's current media.

		Raises:
			KeyError: Unknown session, or the handle was released or belongs elsewhere.
		"""
		state = self.get(session_id)
		entry = self.previews.resolve(handle)
		if state.media is None or state.media.preview_handle != handle or entry is None:
			raise KeyError(f"Preview {handle} not found")
		return entry
