"""Text <-> bytes helpers used by the envelope.

base64 goes through binascii's table codec, which is linear in the input and
does not recurse, so multi-megabyte source files encode and decode the same
way short strings do.
"""
import base64
import binascii

from typing import Iterable

from utils.errors import InvalidEncoding, MalformedToken


def encode_to_utf8(text: str) -> bytes:
    return text.encode("utf-8")


def decode_from_utf8(buffer: bytes | bytearray | memoryview) -> str:
    try:
        return bytes(buffer).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidEncoding("Decrypted data is not valid UTF-8") from exc


def _as_bytes(buffer: bytes | bytearray | memoryview | Iterable[int]) -> bytes:
    if isinstance(buffer, bytes):
        return buffer
    # buffers and iterables of ints; bytes() rejects values outside 0..255
    return bytes(buffer)


def encode_to_base64(buffer: bytes | bytearray | memoryview | Iterable[int]) -> str:
    return base64.b64encode(_as_bytes(buffer)).decode("ascii")


def decode_from_base64(text: str) -> bytes:
    """Strict base64 decode. Surrounding whitespace is ignored, anything else outside the alphabet is not."""
    if not isinstance(text, str):
        raise MalformedToken("Token must be a string")
    try:
        return base64.b64decode(text.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedToken("Token is not valid base64") from exc
