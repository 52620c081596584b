"""UTF-8 sequence classification and assembly, free of I/O."""

from __future__ import annotations

from typing import NamedTuple


class Utf8Validation(NamedTuple):
    is_valid: bool
    expected_bytes: int
    error: str = ""


def utf8_byte_length(first: int) -> int:
    """
    Sequence length announced by a leading byte.

    1 for ASCII, 2-4 for multi-byte leads, 0 for continuation bytes and
    bytes that can never start a sequence (0xF5 and above).
    """
    if first & 0x80 == 0:
        return 1
    if first & 0xE0 == 0xC0:
        return 2
    if first & 0xF0 == 0xE0:
        return 3
    if first & 0xF8 == 0xF0 and first <= 0xF4:
        return 4
    return 0


def is_continuation_byte(b: int) -> bool:
    return b & 0xC0 == 0x80


def validate_utf8_sequence(data: bytes) -> Utf8Validation:
    """Check lead byte, length and continuation bytes of one sequence."""
    if not data:
        return Utf8Validation(False, 0, "empty byte sequence")
    expected = utf8_byte_length(data[0])
    if expected == 0:
        return Utf8Validation(False, 0, "invalid start byte")
    if len(data) < expected:
        return Utf8Validation(False, expected, "incomplete sequence")
    if not all(is_continuation_byte(b) for b in data[1:expected]):
        return Utf8Validation(False, expected, "invalid continuation byte")
    return Utf8Validation(True, expected)


def build_utf8_string(first: int, continuation: bytes) -> str | None:
    """
    Decode one character from its bytes.

    Returns None for byte patterns that are well formed but still not
    valid UTF-8 (overlong forms, surrogates, code points past U+10FFFF).
    """
    try:
        text = (bytes((first,)) + continuation).decode("utf-8")
    except UnicodeDecodeError:
        return None
    return text if len(text) == 1 else None


def truncate_utf8(data: bytes, max_bytes: int) -> bytes:
    """Cut ``data`` to at most ``max_bytes`` without splitting a character."""
    if len(data) <= max_bytes:
        return data
    end = max(max_bytes, 0)
    while end > 0 and is_continuation_byte(data[end]):
        end -= 1
    return data[:end]
