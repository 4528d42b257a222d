"""Run a single model request with a timeout and translate SDK failures."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Optional

import openai

from services.errors import ModelTimeout, ModelUnavailable

LOGGER = logging.getLogger(__name__)


def require_client(client: Optional[openai.AsyncOpenAI]) -> openai.AsyncOpenAI:
    """Return ``client`` or raise ModelUnavailable when no credential was configured."""
    if client is None:
        raise ModelUnavailable("OpenAI client is not configured; set OPENAI_API_KEY.")
    return client


async def call_model(request: Awaitable[Any], *, timeout: float, operation: str) -> Any:
    """Await ``request`` and map every failure onto the inspector error types.

    Args:
        request: The pending SDK call, e.g. ``client.responses.create(...)``.
        timeout: Seconds to wait before failing with ModelTimeout.
        operation: Short name used in log lines.
    """
    try:
        return await asyncio.wait_for(request, timeout=timeout)
    except asyncio.TimeoutError as exc:
        LOGGER.error("%s timed out after %.1fs", operation, timeout)
        raise ModelTimeout(f"{operation} timed out after {timeout:.0f}s") from exc
    except openai.APITimeoutError as exc:
        LOGGER.error("%s timed out in the OpenAI client: %s", operation, exc)
        raise ModelTimeout(f"{operation} timed out") from exc
    except openai.OpenAIError as exc:
        LOGGER.error("OpenAI Responses API error during %s: %s", operation, exc)
        raise ModelUnavailable(f"{operation} failed: {exc}") from exc
