"""Session lifecycle helpers for the inspector API."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import HTTPException, Request, UploadFile
from fastapi.responses import Response

from models.session_models import SessionState
from services.errors import (
	AnalysisInProgress,
	MediaSuperseded,
	ModelTimeout,
	ModelUnavailable,
	NoMediaLoaded,
	SchemaViolation,
	SizeLimitExceeded,
)
from services.media_encoder import MAX_UPLOAD_BYTES
from services.openai.video_analyzer import VideoAnalyzer
from services.openai.video_chat import VideoChatService
from services.session.session_store import SessionStore
from services.thumbnail_generator import ThumbnailGenerator
from utils.media_validation import normalize_mime_type, read_upload_bytes
from utils.settings import Settings

ANALYSIS_FAILED = "Analysis failed. Ensure your API key is correct and valid for the configured model."
FILE_TOO_LARGE = "File is too large. For larger CCTV files, please use smaller segments or dedicated infrastructure."


def _store(request: Request) -> SessionStore:
	return request.app.state.session_store


def _settings(request: Request) -> Settings:
	return request.app.state.settings


def _get_state(store: SessionStore, session_id: str) -> SessionState:
	try:
		return store.get(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc


def serialize_state(store: SessionStore, state: SessionState) -> Dict[str, Any]:
	"""Return the snapshot the presentation layer renders from."""
	media = state.media
	return {
		"session_id": state.session_id,
		"phase": state.phase.value,
		"media": None
		if media is None
		else {
			"filename": media.filename,
			"mime_type": media.mime_type,
			"size_bytes": media.size_bytes,
			"preview_url": f"/sessions/{state.session_id}/preview/{media.preview_handle}",
			"thumbnail_url": f"/sessions/{state.session_id}/thumbnail" if media.is_image else None,
		},
		"analysis": state.analysis.to_wire() if state.analysis else None,
		"messages": [message.to_wire() for message in state.messages],
		"analyzing": store.is_analyzing(state.session_id),
		"pending_questions": store.pending_questions(state.session_id),
	}


async def start_session(request: Request) -> Dict[str, Any]:
	"""Create a new empty session and return its id."""
	state = _store(request).create()
	return {"session_id": state.session_id, "phase": state.phase.value}


async def get_session(request: Request, session_id: str) -> Dict[str, Any]:
	store = _store(request)
	return serialize_state(store, _get_state(store, session_id))


async def upload_media(request: Request, session_id: str, file: UploadFile) -> Dict[str, Any]:
	"""Read, encode, and load an uploaded file into the session."""
	store = _store(request)
	_get_state(store, session_id)
	try:
		data = await read_upload_bytes(file, MAX_UPLOAD_BYTES)
		state = store.upload(
			session_id,
			data,
			normalize_mime_type(file.content_type),
			filename=file.filename or "upload",
		)
	except SizeLimitExceeded as exc:
		raise HTTPException(status_code=413, detail=FILE_TOO_LARGE) from exc
	return serialize_state(store, state)


async def clear_media(request: Request, session_id: str) -> Dict[str, Any]:
	store = _store(request)
	try:
		state = store.clear(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc
	return serialize_state(store, state)


async def run_analysis(request: Request, session_id: str) -> Dict[str, Any]:
	"""Analyze the session's media and return the stored result."""
	store = _store(request)
	_get_state(store, session_id)
	settings = _settings(request)
	analyzer = VideoAnalyzer(
		request.app.state.openai_client,
		model=settings.openai_model,
		timeout=settings.model_timeout_seconds,
	)
	try:
		result = await store.analyze(session_id, analyzer)
	except (NoMediaLoaded, AnalysisInProgress, MediaSuperseded) as exc:
		raise HTTPException(status_code=409, detail=str(exc)) from exc
	except ModelTimeout as exc:
		raise HTTPException(status_code=504, detail=ANALYSIS_FAILED) from exc
	except ModelUnavailable as exc:
		raise HTTPException(status_code=503, detail=ANALYSIS_FAILED) from exc
	except SchemaViolation as exc:
		raise HTTPException(status_code=502, detail=ANALYSIS_FAILED) from exc
	return result.to_wire()


def _require_analysis(store: SessionStore, session_id: str):
	state = _get_state(store, session_id)
	if state.analysis is None:
		raise HTTPException(status_code=404, detail="No analysis available for this session.")
	return state.analysis


async def filter_actions(request: Request, session_id: str, query: str) -> Dict[str, Any]:
	analysis = _require_analysis(_store(request), session_id)
	actions = analysis.filter_actions(query)
	return {"query": query, "actions": [action.model_dump() for action in actions]}


async def analysis_summary(request: Request, session_id: str) -> Dict[str, Any]:
	analysis = _require_analysis(_store(request), session_id)
	return analysis.summary_counts()


async def ask_question(request: Request, session_id: str, question: str) -> Dict[str, Any]:
	"""Ask a follow-up question; model failures come back as an in-band answer.

	A question whose file was replaced mid-flight is rejected with 409 since its
	pair is never added to the transcript.
	"""
	store = _store(request)
	_get_state(store, session_id)
	settings = _settings(request)
	responder = VideoChatService(
		request.app.state.openai_client,
		model=settings.openai_model,
		timeout=settings.model_timeout_seconds,
		history_limit=settings.chat_history_limit,
	)
	try:
		user_message, model_message = await store.ask(session_id, question, responder)
	except (NoMediaLoaded, MediaSuperseded) as exc:
		raise HTTPException(status_code=409, detail=str(exc)) from exc
	except ValueError as exc:
		raise HTTPException(status_code=400, detail=str(exc)) from exc
	return {"question": user_message.to_wire(), "answer": model_message.to_wire()}


async def list_messages(request: Request, session_id: str) -> Dict[str, Any]:
	state = _get_state(_store(request), session_id)
	return {"session_id": session_id, "messages": [message.to_wire() for message in state.messages]}


async def get_preview(request: Request, session_id: str, handle: str) -> Response:
	"""Return the original bytes behind a live preview handle."""
	try:
		entry = _store(request).preview(session_id, handle)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc
	return Response(content=entry.data, media_type=entry.mime_type)


async def get_thumbnail(request: Request, session_id: str) -> Response:
	"""Return a PNG poster for image media.

	Raises:
		HTTPException(404) if the session holds no image.
		HTTPException(415) if the image bytes cannot be decoded.
	"""
	state = _get_state(_store(request), session_id)
	if state.media is None or not state.media.is_image:
		raise HTTPException(status_code=404, detail="Thumbnail not available for this session")
	try:
		png = ThumbnailGenerator().create_thumbnail(state.media.raw_bytes)
	except ValueError as exc:
		raise HTTPException(status_code=415, detail=str(exc)) from exc
	return Response(content=png, media_type="image/png")
