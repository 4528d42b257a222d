"""Structured CCTV analysis using OpenAI's Responses API."""

import logging
import time
from typing import Optional

from openai import AsyncOpenAI

from models.analysis_result import AnalysisResult
from services.openai.analysis_prompts import build_analysis_prompt, build_system_prompt
from services.openai.analysis_schema import RESPONSE_FORMAT
from services.openai.media_inputs import build_analysis_inputs
from services.openai.model_call import call_model, require_client
from services.openai.response_parser import extract_text, extract_usage, parse_analysis

LOGGER = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-5"
DEFAULT_TIMEOUT_SECONDS = 120.0


class VideoAnalyzer:
    """Send uploaded footage to the model and decode the structured answer."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI],
        *,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.client = client
        self.model = model
        self.timeout = timeout
        self.system_prompt = build_system_prompt()
        self.instruction = build_analysis_prompt()

    async def analyze(self, encoded_payload: str, mime_type: str) -> AnalysisResult:
        """Return a validated analysis for the base64 ``encoded_payload``.

        Raises:
            ModelUnavailable: No client, auth/quota/network failure.
            ModelTimeout: The call exceeded ``timeout``.
            SchemaViolation: The answer does not match the declared schema.
        """
        client = require_client(self.client)
        inputs = build_analysis_inputs(
            self.system_prompt,
            self.instruction,
            encoded_payload=encoded_payload,
            mime_type=mime_type,
        )

        start = time.time()
        response = await call_model(
            client.responses.create(
                model=self.model,
                input=inputs,
                text={"format": RESPONSE_FORMAT},
            ),
            timeout=self.timeout,
            operation="analysis",
        )
        latency = time.time() - start

        usage = extract_usage(response)
        LOGGER.info(
            "Analysis latency: %.3fs (input_tokens=%s, output_tokens=%s)",
            latency,
            usage["input_tokens"],
            usage["output_tokens"],
        )
        return parse_analysis(extract_text(response))
