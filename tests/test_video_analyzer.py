import asyncio

import pytest

from conftest import SAMPLE_ANALYSIS, FakeOpenAIClient, auth_error, connection_error, scripted, timeout_error
from services.errors import ModelTimeout, ModelUnavailable, SchemaViolation
from services.openai.analysis_schema import ANALYSIS_SCHEMA, RESPONSE_FORMAT
from services.openai.video_analyzer import VideoAnalyzer


async def test_analysis_returns_validated_result(sample_analysis_json):
    client = FakeOpenAIClient(scripted(sample_analysis_json))
    analyzer = VideoAnalyzer(client, model="test-model")

    result = await analyzer.analyze("AAAA", "video/mp4")

    assert result.to_wire() == SAMPLE_ANALYSIS


async def test_request_declares_schema_and_carries_media(sample_analysis_json):
    client = FakeOpenAIClient(scripted(sample_analysis_json))

    await VideoAnalyzer(client, model="test-model").analyze("QUJD", "video/mp4")

    (call,) = client.responses.calls
    assert call["model"] == "test-model"
    assert call["text"] == {"format": RESPONSE_FORMAT}
    user_content = call["input"][1]["content"]
    assert user_content[0]["type"] == "input_file"
    assert user_content[0]["file_data"] == "data:video/mp4;base64,QUJD"
    assert "people" in user_content[1]["text"]
    assert "transcription" in user_content[1]["text"]


async def test_image_media_is_sent_as_image_input(sample_analysis_json):
    client = FakeOpenAIClient(scripted(sample_analysis_json))

    await VideoAnalyzer(client).analyze("QUJD", "image/jpeg")

    media_part = client.responses.calls[0]["input"][1]["content"][0]
    assert media_part == {"type": "input_image", "image_url": "data:image/jpeg;base64,QUJD"}


def test_schema_requires_all_five_fields():
    assert sorted(ANALYSIS_SCHEMA["required"]) == sorted(SAMPLE_ANALYSIS)
    assert ANALYSIS_SCHEMA["properties"]["actions"]["items"]["properties"]["intensity"]["enum"] == [
        "low",
        "medium",
        "high",
    ]


async def test_malformed_answer_is_schema_violation():
    client = FakeOpenAIClient(scripted("{not json"))

    with pytest.raises(SchemaViolation):
        await VideoAnalyzer(client).analyze("AAAA", "video/mp4")


async def test_missing_client_is_model_unavailable():
    with pytest.raises(ModelUnavailable):
        await VideoAnalyzer(None).analyze("AAAA", "video/mp4")


@pytest.mark.parametrize("error", [connection_error(), auth_error()])
async def test_sdk_errors_become_model_unavailable(error):
    client = FakeOpenAIClient(scripted(error))

    with pytest.raises(ModelUnavailable) as excinfo:
        await VideoAnalyzer(client).analyze("AAAA", "video/mp4")

    assert not isinstance(excinfo.value, ModelTimeout)


async def test_sdk_timeout_becomes_model_timeout():
    client = FakeOpenAIClient(scripted(timeout_error()))

    with pytest.raises(ModelTimeout):
        await VideoAnalyzer(client).analyze("AAAA", "video/mp4")


async def test_slow_answer_times_out(sample_analysis_json):
    async def slow(_kwargs):
        await asyncio.sleep(1)
        return sample_analysis_json

    client = FakeOpenAIClient(slow)

    with pytest.raises(ModelTimeout):
        await VideoAnalyzer(client, timeout=0.01).analyze("AAAA", "video/mp4")
