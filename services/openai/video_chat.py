"""Follow-up questions about uploaded footage.

Every question is a self-contained request: the media, the framing text,
the prior transcript and the new question are re-sent each time, so no
model-side session has to be kept alive.
"""

import logging
import time
from typing import Optional, Sequence

from openai import AsyncOpenAI

from models.session_models import ChatMessage, UploadedMedia
from services.openai.analysis_prompts import build_chat_preamble, build_system_prompt
from services.openai.media_inputs import build_chat_inputs
from services.openai.model_call import call_model, require_client
from services.openai.response_parser import extract_text, extract_usage
from services.openai.video_analyzer import DEFAULT_MODEL, DEFAULT_TIMEOUT_SECONDS

LOGGER = logging.getLogger(__name__)

EMPTY_ANSWER = "I'm sorry, I couldn't process that question."


class VideoChatService:
    """Answer free-text questions with the whole conversation as context."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI],
        *,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        history_limit: int = 0,
    ) -> None:
        if history_limit < 0:
            raise ValueError("history_limit must be zero or positive")
        self.client = client
        self.model = model
        self.timeout = timeout
        self.history_limit = history_limit
        self.system_prompt = build_system_prompt()
        self.preamble = build_chat_preamble()

    async def ask(self, media: UploadedMedia, history: Sequence[ChatMessage], question: str) -> str:
        """Return the model's answer to ``question``.

        Raises:
            ModelUnavailable: No client, auth/quota/network failure.
            ModelTimeout: The call exceeded ``timeout``.
        """
        client = require_client(self.client)
        if self.history_limit:
            # Whole question/answer pairs only, so the context never opens on an answer.
            keep = self.history_limit - self.history_limit % 2
            history = list(history)[-keep:] if keep else []

        inputs = build_chat_inputs(
            self.system_prompt,
            self.preamble,
            encoded_payload=media.encoded_payload,
            mime_type=media.mime_type,
            history=history,
            question=question,
            filename=media.filename,
        )

        start = time.time()
        response = await call_model(
            client.responses.create(model=self.model, input=inputs),
            timeout=self.timeout,
            operation="chat",
        )
        usage = extract_usage(response)
        LOGGER.info(
            "Chat latency: %.3fs (history=%d, input_tokens=%s, output_tokens=%s)",
            time.time() - start,
            len(history),
            usage["input_tokens"],
            usage["output_tokens"],
        )

        answer = extract_text(response).strip()
        return answer or EMPTY_ANSWER
