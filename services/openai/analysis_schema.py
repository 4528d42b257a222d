"""Structured-output schema for the CCTV analysis request."""

from typing import Any, Dict

SCHEMA_NAME = "cctv_analysis"

INTENSITY_LEVELS = ["low", "medium", "high"]

ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "crowdCount": {
            "type": "integer",
            "description": "Total count of distinct people appearing.",
        },
        "actions": {
            "type": "array",
            "description": "Observed actions in the order they happen.",
            "items": {
                "type": "object",
                "properties": {
                    "timestamp": {"type": "string", "description": "Rough timestamp such as 0:02."},
                    "description": {"type": "string"},
                    "intensity": {
                        "type": "string",
                        "enum": INTENSITY_LEVELS,
                        "description": "low, medium, or high",
                    },
                },
                "required": ["timestamp", "description", "intensity"],
                "additionalProperties": False,
            },
        },
        "attributes": {
            "type": "array",
            "description": "Clothing or physical attributes.",
            "items": {"type": "string"},
        },
        "objects": {
            "type": "array",
            "description": "Notable objects.",
            "items": {"type": "string"},
        },
        "audioTranscription": {
            "type": "string",
            "description": "Transcription of significant audio; empty when there is none.",
        },
    },
    "required": ["crowdCount", "actions", "attributes", "objects", "audioTranscription"],
    "additionalProperties": False,
}

# Responses API `text.format` block requesting a single JSON document.
RESPONSE_FORMAT: Dict[str, Any] = {
    "type": "json_schema",
    "name": SCHEMA_NAME,
    "schema": ANALYSIS_SCHEMA,
    "strict": True,
}
