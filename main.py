import inspect
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from openai import AsyncOpenAI

from routes.session_route import router as session_router
from services.session.session_store import SessionStore
from utils.settings import load_settings

LOGGER = logging.getLogger(__name__)


def _create_openai_client(api_key: str, http_client=None):
    """Return an AsyncOpenAI client, or None when no credential is configured.

    SDK retries are disabled: a failed call is surfaced once and the user
    decides whether to re-submit.
    """
    if not api_key:
        LOGGER.warning("OPENAI_API_KEY is not set; analysis and chat will report the model as unavailable")
        return None
    try:
        return AsyncOpenAI(api_key=api_key, max_retries=0, http_client=http_client)
    except Exception as exc:
        raise RuntimeError("Failed to initialize OpenAI Async client") from exc


async def _close_client(client) -> None:
    aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
    if aclose is None:
        return
    try:
        if inspect.iscoroutinefunction(aclose):
            await aclose()
        else:
            result = aclose()
            if inspect.isawaitable(result):
                await result
    except Exception as exc:
        # Shutdown errors must not mask whatever stopped the app.
        LOGGER.warning("Error while closing OpenAI client: %s", exc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - settings loaded from the environment / .env
      - the OpenAI async client (None without a credential)
      - the in-memory session store
    and attach them to `app.state`.
    """
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    app.state.settings = settings
    app.state.openai_client = _create_openai_client(settings.openai_api_key)
    app.state.session_store = SessionStore()

    try:
        yield
    finally:
        client = getattr(app.state, "openai_client", None)
        if client is not None:
            await _close_client(client)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    app = FastAPI(lifespan=lifespan)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports OpenAI client presence and live sessions.
        """
        has_openai = getattr(request.app.state, "openai_client", None) is not None
        store = getattr(request.app.state, "session_store", None)
        return {"ok": True, "openai_available": has_openai, "sessions": len(store) if store is not None else 0}

    app.include_router(session_router)

    return app


app = create_app()
