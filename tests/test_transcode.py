import base64
import os

import pytest

from crypto.transcode import decode_from_base64, decode_from_utf8, encode_to_base64, encode_to_utf8
from utils.errors import InvalidEncoding, MalformedToken


def test_base64_matches_standard_alphabet() -> None:
    assert encode_to_base64(b"\x00\xffsolution") == base64.b64encode(b"\x00\xffsolution").decode()
    assert decode_from_base64("AP9zb2x1dGlvbg==") == b"\x00\xffsolution"


def test_base64_accepts_buffers_and_int_iterables() -> None:
    assert encode_to_base64(bytearray(b"abc")) == "YWJj"
    assert encode_to_base64(memoryview(b"abc")) == "YWJj"
    assert encode_to_base64([97, 98, 99]) == "YWJj"


def test_base64_handles_multi_megabyte_buffers() -> None:
    data = os.urandom(8 * 1024 * 1024)
    text = encode_to_base64(data)
    assert len(text) == 4 * ((len(data) + 2) // 3)
    assert decode_from_base64(text) == data


def test_base64_ignores_surrounding_whitespace() -> None:
    assert decode_from_base64("YWJj\n") == b"abc"


@pytest.mark.parametrize("bad", ["not base64!", "YWJ", "YW=j", "YW Jj"])
def test_invalid_base64_is_malformed_token(bad: str) -> None:
    with pytest.raises(MalformedToken):
        decode_from_base64(bad)


def test_non_string_token_is_malformed() -> None:
    with pytest.raises(MalformedToken):
        decode_from_base64(b"YWJj")  # type: ignore[arg-type]


def test_utf8_round_trip_and_rejection() -> None:
    text = "fn main() { println!(\"héllo 🌍\"); }"
    assert decode_from_utf8(encode_to_utf8(text)) == text
    with pytest.raises(InvalidEncoding):
        decode_from_utf8(b"\xff\xfe\xfd")
