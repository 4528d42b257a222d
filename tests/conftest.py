"""Shared fakes for the OpenAI Responses API and sample payloads."""

import inspect
import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from services.preview_registry import PreviewRegistry
from services.session.session_store import SessionStore

OPENAI_URL = "https://api.openai.com/v1/responses"

SAMPLE_ANALYSIS: Dict[str, Any] = {
    "crowdCount": 3,
    "actions": [{"timestamp": "0:02", "description": "Man enters through door", "intensity": "low"}],
    "attributes": ["yellow jacket"],
    "objects": ["red backpack"],
    "audioTranscription": "",
}


class FakeUsage:
    def __init__(self, input_tokens: int = 100, output_tokens: int = 20) -> None:
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens


class FakeResponse:
    """Minimal stand-in for an OpenAI Responses API result."""

    def __init__(self, text: str = "") -> None:
        self.output_text = text
        self.output: List[Any] = []
        self.usage = FakeUsage()


class FakeResponses:
    def __init__(self, handler: Callable[[Dict[str, Any]], Any]) -> None:
        self.calls: List[Dict[str, Any]] = []
        self._handler = handler

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        result = self._handler(kwargs)
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, BaseException):
            raise result
        if isinstance(result, str):
            return FakeResponse(result)
        return result


class FakeOpenAIClient:
    """Exposes `responses.create` only, which is all the services call."""

    def __init__(self, handler: Callable[[Dict[str, Any]], Any]) -> None:
        self.responses = FakeResponses(handler)


def scripted(*replies: Any) -> Callable[[Dict[str, Any]], Any]:
    """Return a handler that plays back ``replies`` in order."""
    queue = list(replies)

    def handler(_kwargs: Dict[str, Any]) -> Any:
        return queue.pop(0)

    return handler


def last_user_text(kwargs: Dict[str, Any]) -> str:
    return kwargs["input"][-1]["content"][0]["text"]


def connection_error() -> Exception:
    import openai

    return openai.APIConnectionError(request=httpx.Request("POST", OPENAI_URL))


def timeout_error() -> Exception:
    import openai

    return openai.APITimeoutError(request=httpx.Request("POST", OPENAI_URL))


def auth_error() -> Exception:
    import openai

    request = httpx.Request("POST", OPENAI_URL)
    return openai.AuthenticationError(
        "Incorrect API key provided",
        response=httpx.Response(401, request=request),
        body=None,
    )


@pytest.fixture
def sample_analysis_json() -> str:
    return json.dumps(SAMPLE_ANALYSIS)


@pytest.fixture
def previews() -> PreviewRegistry:
    return PreviewRegistry()


@pytest.fixture
def store(previews: PreviewRegistry) -> SessionStore:
    return SessionStore(previews)


class OversizedPayload(bytes):
    """Reports a large length without allocating it."""

    def __new__(cls, reported: int):
        obj = super().__new__(cls, b"")
        obj.reported = reported
        return obj

    def __len__(self) -> int:
        return self.reported
