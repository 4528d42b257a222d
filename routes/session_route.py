"""FastAPI routes for inspector sessions."""

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from pydantic import BaseModel

from controllers.session_controller import (
	analysis_summary,
	ask_question,
	clear_media,
	filter_actions,
	get_preview,
	get_session,
	get_thumbnail,
	list_messages,
	run_analysis,
	start_session,
	upload_media,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])


class QuestionPayload(BaseModel):
	question: str


@router.post("")
async def start_session_route(request: Request):
	try:
		return await start_session(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}")
async def get_session_route(request: Request, session_id: str):
	try:
		return await get_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/media")
async def upload_media_route(request: Request, session_id: str, file: UploadFile = File(...)):
	"""Load footage into the session, replacing anything loaded before."""
	try:
		return await upload_media(request, session_id, file)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/{session_id}/media")
async def clear_media_route(request: Request, session_id: str):
	try:
		return await clear_media(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}/preview/{handle}")
async def preview_route(request: Request, session_id: str, handle: str):
	"""Stream back the uploaded file while its preview handle is live."""
	try:
		return await get_preview(request, session_id, handle)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}/thumbnail")
async def thumbnail_route(request: Request, session_id: str):
	try:
		return await get_thumbnail(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/analysis")
async def analysis_route(request: Request, session_id: str):
	"""Run the structured analysis on the loaded footage."""
	try:
		return await run_analysis(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}/analysis/actions")
async def actions_route(request: Request, session_id: str, query: str = ""):
	try:
		return await filter_actions(request, session_id, query)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}/analysis/summary")
async def summary_route(request: Request, session_id: str):
	try:
		return await analysis_summary(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/messages")
async def post_message_route(request: Request, session_id: str, payload: QuestionPayload):
	"""Ask a follow-up question about the loaded footage."""
	try:
		return await ask_question(request, session_id, payload.question)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}/messages")
async def list_messages_route(request: Request, session_id: str):
	try:
		return await list_messages(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
