"""Helpers to parse Responses API outputs."""

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from models.analysis_result import AnalysisResult
from services.errors import SchemaViolation

LOGGER = logging.getLogger(__name__)

_LOG_PREVIEW_CHARS = 200


def _field(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def extract_text(response: Any) -> str:
    """Return the text the model produced, or an empty string."""
    output_text = _field(response, "output_text")
    if isinstance(output_text, str) and output_text:
        return output_text
    for item in _field(response, "output", None) or []:
        if _field(item, "type") != "message":
            continue
        for content in _field(item, "content", None) or []:
            if _field(content, "type") == "output_text":
                return _field(content, "text", "") or ""
    return ""


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
    """Return token usage information from the response, if present."""
    usage = _field(response, "usage")
    return {
        "input_tokens": _field(usage, "input_tokens") if usage else None,
        "output_tokens": _field(usage, "output_tokens") if usage else None,
    }


def parse_analysis(text: str) -> AnalysisResult:
    """Validate untrusted model text into an AnalysisResult.

    Raises:
        SchemaViolation: If the text is empty, is not JSON, misses a required
            field, or carries a value of the wrong type.
    """
    if not text or not text.strip():
        raise SchemaViolation("Model returned an empty analysis.")
    try:
        return AnalysisResult.model_validate_json(text)
    except ValidationError as exc:
        LOGGER.error("Analysis response failed validation: %s", exc)
        LOGGER.error("Offending response text: %r", text[:_LOG_PREVIEW_CHARS])
        raise SchemaViolation(f"Invalid response format from model: {exc.error_count()} error(s)") from exc
