"""Pure session transitions: each takes a snapshot and returns the next one."""

from __future__ import annotations

from dataclasses import replace

from models.analysis_result import AnalysisResult
from models.session_models import ChatMessage, SessionState, UploadedMedia


def upload(state: SessionState, media: UploadedMedia) -> SessionState:
	"""Load new media; previous analysis and transcript no longer apply."""
	return replace(state, media=media, analysis=None, messages=())


def clear(state: SessionState) -> SessionState:
	"""Return to the empty phase. Clearing an empty session is a no-op."""
	if state.media is None and state.analysis is None and not state.messages:
		return state
	return replace(state, media=None, analysis=None, messages=())


def is_current(state: SessionState, media_id: str) -> bool:
	"""Return True if ``media_id`` names the media the session still holds."""
	return state.media is not None and state.media.media_id == media_id


def analysis_completed(state: SessionState, media_id: str, result: AnalysisResult) -> SessionState:
	"""Store ``result`` if it was computed for the media still loaded."""
	if not is_current(state, media_id):
		return state
	return replace(state, analysis=result)


def turn_completed(
	state: SessionState,
	media_id: str,
	question: ChatMessage,
	answer: ChatMessage,
) -> SessionState:
	"""Append a question and its answer as one contiguous pair."""
	if not is_current(state, media_id):
		return state
	return replace(state, messages=state.messages + (question, answer))
