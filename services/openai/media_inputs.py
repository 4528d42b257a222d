"""Utilities to build multimodal input payloads for the Responses API."""

from typing import Any, Dict, Iterable, List, Optional

from models.session_models import ChatMessage
from services.media_encoder import to_data_url


def build_media_part(encoded_payload: str, mime_type: str, filename: Optional[str] = None) -> Dict[str, Any]:
    """Return the content part carrying the uploaded media.

    Still images go in as an image input; video and anything else go in as
    a file input carrying the same base64 data URL.
    """
    data_url = to_data_url(encoded_payload, mime_type)
    if mime_type.startswith("image/"):
        return {"type": "input_image", "image_url": data_url}
    return {"type": "input_file", "filename": filename or "recording", "file_data": data_url}


def _text_message(role: str, text: str) -> Dict[str, Any]:
    content_type = "output_text" if role == "assistant" else "input_text"
    return {"type": "message", "role": role, "content": [{"type": content_type, "text": text}]}


def build_analysis_inputs(
    system_prompt: str,
    instruction: str,
    *,
    encoded_payload: str,
    mime_type: str,
) -> List[Dict[str, Any]]:
    """Build the input array for a one-shot structured analysis."""
    return [
        _text_message("system", system_prompt),
        {
            "type": "message",
            "role": "user",
            "content": [
                build_media_part(encoded_payload, mime_type),
                {"type": "input_text", "text": instruction},
            ],
        },
    ]


def history_to_turns(history: Iterable[ChatMessage]) -> List[Dict[str, Any]]:
    """Map transcript messages onto role-tagged Responses API messages."""
    return [_text_message("assistant" if msg.role == "model" else "user", msg.text) for msg in history]


def build_chat_inputs(
    system_prompt: str,
    preamble: str,
    *,
    encoded_payload: str,
    mime_type: str,
    history: Iterable[ChatMessage],
    question: str,
    filename: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Build the full-context input array for one follow-up question.

    The media and framing come first, then every prior turn in order, then
    the new question.
    """
    inputs: List[Dict[str, Any]] = [
        _text_message("system", system_prompt),
        {
            "type": "message",
            "role": "user",
            "content": [
                build_media_part(encoded_payload, mime_type, filename),
                {"type": "input_text", "text": preamble},
            ],
        },
    ]
    inputs.extend(history_to_turns(history))
    inputs.append(_text_message("user", question))
    return inputs
