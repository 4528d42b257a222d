import pytest

from conftest import OversizedPayload
from services import media_encoder
from services.errors import SizeLimitExceeded
from services.media_encoder import MAX_UPLOAD_BYTES, decode_payload, encode

MIB = 1024 * 1024


def test_limit_is_200_mib():
    assert MAX_UPLOAD_BYTES == 200 * MIB


@pytest.mark.parametrize("data", [b"", b"\x00", bytes(range(256)), b"\xff\xd8\xff\xe0" * 1000])
def test_payload_decodes_to_original_bytes(previews, data):
    media = encode(data, "video/mp4", previews)

    assert decode_payload(media.encoded_payload) == data
    assert media.raw_bytes == data


def test_ten_megabyte_mp4_is_accepted(previews):
    data = bytes(10 * MIB)

    media = encode(data, "video/mp4", previews, filename="lobby.mp4")

    assert media.size_bytes == 10 * MIB
    assert media.is_video and not media.is_image
    assert media.filename == "lobby.mp4"
    assert media.preview_handle in previews


def test_oversized_file_fails_without_allocating_a_preview(previews):
    with pytest.raises(SizeLimitExceeded) as excinfo:
        encode(OversizedPayload(250 * MIB), "video/mp4", previews)

    assert excinfo.value.limit == MAX_UPLOAD_BYTES
    assert excinfo.value.size == 250 * MIB
    assert len(previews) == 0


def test_file_exactly_at_limit_is_accepted(previews):
    media = encode(b"abc", "image/png", previews, limit=3)
    assert media.is_image


def test_preview_is_released_when_encoding_fails(previews, monkeypatch):
    def broken(_data):
        raise MemoryError("out of memory")

    monkeypatch.setattr(media_encoder.base64, "b64encode", broken)

    with pytest.raises(MemoryError):
        encode(b"frame", "video/mp4", previews)

    assert len(previews) == 0


def test_missing_mime_type_falls_back_to_octet_stream(previews):
    media = encode(b"data", "", previews)
    assert media.mime_type == "application/octet-stream"


def test_decode_rejects_garbage():
    with pytest.raises(ValueError):
        decode_payload("not base64!!")


def test_preview_handles_resolve_until_released(previews):
    media = encode(b"clip", "video/webm", previews)

    entry = previews.resolve(media.preview_handle)
    assert entry.data == b"clip"
    assert entry.mime_type == "video/webm"

    assert previews.release(media.preview_handle) is True
    assert previews.resolve(media.preview_handle) is None
    assert previews.release(media.preview_handle) is False
