"""Tests for data URL decoding/encoding of uploaded images and synthesized audio."""

import pytest

from landmark_lens.core.io_utils import decode_data_url, encode_data_url


@pytest.mark.fast
def test_decode_data_url_with_mime_prefix():
    assert decode_data_url("data:image/jpeg;base64,aGVsbG8=") == b"hello"


@pytest.mark.fast
def test_decode_bare_base64_and_ignores_whitespace():
    assert decode_data_url("  aGVs\nbG8=  ") == b"hello"


@pytest.mark.fast
def test_decode_data_url_with_parameters():
    assert decode_data_url("data:image/png;name=photo.png;base64,aGVsbG8=") == b"hello"


@pytest.mark.fast
@pytest.mark.parametrize("value", ["", "   ", "data:image/jpeg;base64,"])
def test_decode_empty_payload_raises(value):
    with pytest.raises(ValueError, match="empty"):
        decode_data_url(value)


@pytest.mark.fast
def test_decode_non_base64_data_url_raises():
    with pytest.raises(ValueError, match="Only base64"):
        decode_data_url("data:text/plain,hello")


@pytest.mark.fast
def test_decode_invalid_base64_raises():
    with pytest.raises(ValueError, match="Invalid base64"):
        decode_data_url("data:image/jpeg;base64,not*base64!")


@pytest.mark.fast
def test_encode_data_url():
    assert encode_data_url(b"hello", "audio/wav") == "data:audio/wav;base64,aGVsbG8="
