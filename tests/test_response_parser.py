import json

import pytest

from conftest import SAMPLE_ANALYSIS, FakeResponse
from services.errors import SchemaViolation
from services.openai.response_parser import extract_text, extract_usage, parse_analysis

REQUIRED_FIELDS = ["crowdCount", "actions", "attributes", "objects", "audioTranscription"]


def _with(**overrides):
    payload = dict(SAMPLE_ANALYSIS)
    payload.update(overrides)
    return json.dumps(payload)


def test_valid_document_is_decoded(sample_analysis_json):
    result = parse_analysis(sample_analysis_json)

    assert result.crowd_count == 3
    assert result.actions[0].timestamp == "0:02"
    assert result.actions[0].description == "Man enters through door"
    assert result.actions[0].intensity == "low"
    assert result.attributes == ["yellow jacket"]
    assert result.objects == ["red backpack"]
    assert result.audio_transcription == ""
    assert result.to_wire() == SAMPLE_ANALYSIS


@pytest.mark.parametrize("missing", REQUIRED_FIELDS)
def test_missing_field_is_a_schema_violation(missing):
    payload = dict(SAMPLE_ANALYSIS)
    del payload[missing]

    with pytest.raises(SchemaViolation):
        parse_analysis(json.dumps(payload))


@pytest.mark.parametrize("text", ["{not json", "", "   ", "[]", "null", "42"])
def test_malformed_text_is_a_schema_violation(text):
    with pytest.raises(SchemaViolation):
        parse_analysis(text)


@pytest.mark.parametrize(
    "overrides",
    [
        {"crowdCount": "3"},
        {"crowdCount": 2.5},
        {"crowdCount": -1},
        {"crowdCount": True},
        {"attributes": "yellow jacket"},
        {"objects": [1, 2]},
        {"audioTranscription": None},
        {"actions": [{"timestamp": "0:02", "description": "Runs", "intensity": "extreme"}]},
        {"actions": [{"timestamp": "0:02", "intensity": "low"}]},
    ],
)
def test_wrong_types_are_not_coerced(overrides):
    with pytest.raises(SchemaViolation):
        parse_analysis(_with(**overrides))


def test_action_order_and_duplicates_are_preserved():
    actions = [
        {"timestamp": "0:09", "description": "Car leaves", "intensity": "medium"},
        {"timestamp": "0:01", "description": "Car arrives", "intensity": "high"},
    ]
    result = parse_analysis(_with(actions=actions, objects=["bag", "bag"]))

    assert [a.timestamp for a in result.actions] == ["0:09", "0:01"]
    assert result.objects == ["bag", "bag"]


def test_extract_text_prefers_output_text():
    assert extract_text(FakeResponse("hello")) == "hello"


def test_extract_text_walks_message_output():
    response = {
        "output": [
            {"type": "reasoning", "content": []},
            {"type": "message", "content": [{"type": "output_text", "text": "from message"}]},
        ]
    }
    assert extract_text(response) == "from message"


def test_extract_text_of_empty_response():
    assert extract_text(object()) == ""


def test_extract_usage():
    assert extract_usage(FakeResponse("x")) == {"input_tokens": 100, "output_tokens": 20}
    assert extract_usage(object()) == {"input_tokens": None, "output_tokens": None}
