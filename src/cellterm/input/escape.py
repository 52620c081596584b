"""
Byte-level input state machine.

``decode_event`` is a generator: it yields how long (in seconds) it is
willing to wait for the next byte and is sent that byte, or None when
nothing arrived in time. When it has seen enough it returns a
``Decoded`` holding the event plus any bytes it read but did not use,
which the driver must feed back in before reading new input.

Keeping the machine free of I/O lets the blocking ``InputDecoder`` and
the asyncio ``AsyncInputDecoder`` share it, and lets tests decode plain
byte strings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generator

from cellterm.config import DecoderConfig
from cellterm.input.events import Event
from cellterm.input.keys import (
    ARROW_KEYS,
    ESCAPE_KEY,
    FUNCTION_KEYS,
    NAVIGATION_KEYS,
    NUMERIC_KEYS,
    VT100_FUNCTION_KEYS,
    KeyCode,
    KeyEvent,
    KeyModifier,
    map_basic_key,
    map_ctrl_letter,
    map_ctrl_number,
    parse_modifier_code,
)
from cellterm.input.mouse import X10_OFFSET, parse_mouse_sgr, parse_mouse_x10
from cellterm.input.utf8 import (
    build_utf8_string,
    is_continuation_byte,
    truncate_utf8,
    utf8_byte_length,
)

logger = logging.getLogger(__name__)

ESC = 0x1B
PASTE_END = b"\x1b[201~"

Machine = Generator[float, "int | None", "Decoded"]


@dataclass(frozen=True, slots=True)
class Decoded:
    event: Event
    unread: bytes = b""


def _escape_event(unread: bytes = b"") -> Decoded:
    return Decoded(Event.from_key(ESCAPE_KEY), unread)


def _key(code: KeyCode, modifiers: KeyModifier = KeyModifier.NONE) -> Decoded:
    return Decoded(Event.from_key(KeyEvent(code, "", modifiers)))


def _literal(b: int, unread: bytes = b"") -> Decoded:
    """The byte as a one-character key, used when it is not valid UTF-8."""
    return Decoded(Event.from_key(map_basic_key(chr(b))), unread)


class _Budget:
    """Caps the bytes one escape sequence may consume."""

    __slots__ = ("remaining", "timeout")

    def __init__(self, config: DecoderConfig) -> None:
        self.remaining = config.max_sequence_bytes
        self.timeout = config.escape_timeout

    def read(self) -> Generator[float, int | None, int | None]:
        if self.remaining <= 0:
            logger.debug("escape sequence exceeded byte limit")
            return None
        self.remaining -= 1
        return (yield self.timeout)


def decode_event(first: int, config: DecoderConfig) -> Machine:
    """Decode one event that starts with byte ``first``."""
    if first == ESC:
        return (yield from _decode_escape(config))
    if first == 0x03:
        if config.ctrl_c_quits:
            return Decoded(Event.quit())
        return Decoded(Event.from_key(KeyEvent(KeyCode.CHAR, "c", KeyModifier.CTRL)))
    ctrl = map_ctrl_letter(first)
    if ctrl is None:
        ctrl = map_ctrl_number(first)
    if ctrl is not None:
        return Decoded(Event.from_key(ctrl))
    if first < 0x80:
        return Decoded(Event.from_key(map_basic_key(chr(first))))
    return (yield from _decode_utf8(first, config))


def _decode_utf8(first: int, config: DecoderConfig) -> Machine:
    length = utf8_byte_length(first)
    if length == 0:
        return _literal(first)
    tail = bytearray()
    while len(tail) < length - 1:
        b = yield config.escape_timeout
        if b is None:
            logger.debug("truncated UTF-8 sequence %02x %s", first, tail.hex())
            return _literal(first, bytes(tail))
        if not is_continuation_byte(b):
            logger.debug("bad UTF-8 continuation byte %02x after %02x", b, first)
            return _literal(first, bytes(tail) + bytes((b,)))
        tail.append(b)
    ch = build_utf8_string(first, bytes(tail))
    if ch is None:
        return _literal(first, bytes(tail))
    return Decoded(Event.from_key(map_basic_key(ch)))


def _decode_escape(config: DecoderConfig) -> Machine:
    budget = _Budget(config)
    c2 = yield from budget.read()
    if c2 is None:
        return _escape_event()
    intro = chr(c2)
    if intro == "[":
        return (yield from _decode_csi(budget, config))
    if intro == "O":
        return (yield from _decode_ss3(budget))
    if intro in VT100_FUNCTION_KEYS:
        return _key(VT100_FUNCTION_KEYS[intro])
    # Not a sequence: a lone Escape, then c2 as its own event
    return _escape_event(bytes((c2,)))


def _decode_ss3(budget: _Budget) -> Machine:
    c3 = yield from budget.read()
    if c3 is None:
        return _escape_event(b"O")
    final = chr(c3)
    if final in VT100_FUNCTION_KEYS:
        return _key(VT100_FUNCTION_KEYS[final])
    if final in ARROW_KEYS:
        return _key(ARROW_KEYS[final])
    if final in ("H", "F"):
        return _key(NAVIGATION_KEYS[final])
    return _escape_event()


def _decode_csi(budget: _Budget, config: DecoderConfig) -> Machine:
    c3 = yield from budget.read()
    if c3 is None:
        return _escape_event(b"[")
    final = chr(c3)
    if final in ARROW_KEYS:
        return _key(ARROW_KEYS[final])
    if final in NAVIGATION_KEYS:
        return _key(NAVIGATION_KEYS[final])
    if final == "I":
        return Decoded(Event.focus_in())
    if final == "O":
        return Decoded(Event.focus_out())
    if final == "M":
        return (yield from _decode_x10(budget))
    if final == "<":
        return (yield from _decode_sgr_mouse(budget))
    if "1" <= final <= "6":
        return (yield from _decode_numeric(final, budget, config))
    logger.debug("unrecognized CSI final byte %r", final)
    return _escape_event()


def _decode_numeric(first_digit: str, budget: _Budget, config: DecoderConfig) -> Machine:
    c4 = yield from budget.read()
    if c4 is None:
        return _escape_event()
    ch = chr(c4)
    if ch == "~":
        return _key(NUMERIC_KEYS[first_digit])
    if ch == ";":
        return (yield from _decode_modified(first_digit, budget))
    if not ch.isdigit():
        return _escape_event()

    digits = first_digit + ch
    c5 = yield from budget.read()
    if c5 is None:
        return _escape_event()
    ch = chr(c5)
    if ch == "~":
        code = FUNCTION_KEYS.get(digits)
        return _key(code) if code is not None else _escape_event()
    if ch == ";":
        return (yield from _decode_modified(digits, budget))
    if ch.isdigit():
        digits += ch
        c6 = yield from budget.read()
        if digits == "200" and c6 == ord("~"):
            return (yield from _decode_paste(config))
    return _escape_event()


def _decode_modified(prefix: str, budget: _Budget) -> Machine:
    """``ESC [ <prefix> ; <modifier> <final>`` with final A-D, H, F, P-S or ~."""
    param = ""
    while True:
        b = yield from budget.read()
        if b is None:
            return _escape_event()
        ch = chr(b)
        if not ch.isdigit():
            break
        param += ch
    if not param:
        return _escape_event()
    modifiers = parse_modifier_code(int(param))

    if ch == "~":
        table = NUMERIC_KEYS if len(prefix) == 1 else FUNCTION_KEYS
        code = table.get(prefix)
    else:
        code = ARROW_KEYS.get(ch) or VT100_FUNCTION_KEYS.get(ch)
        if code is None and ch in ("H", "F"):
            code = NAVIGATION_KEYS[ch]
    if code is None:
        return _escape_event()
    return _key(code, modifiers)


def _decode_x10(budget: _Budget) -> Machine:
    data = bytearray()
    for _ in range(3):
        b = yield from budget.read()
        if b is None:
            logger.debug("short X10 mouse report %s", data.hex())
            return Decoded(Event.unknown())
        data.append(b)
    if data[1] < X10_OFFSET or data[2] < X10_OFFSET:
        logger.debug("X10 mouse report off screen %s", data.hex())
        return Decoded(Event.unknown())
    return Decoded(Event.from_mouse(parse_mouse_x10(bytes(data))))


def _decode_sgr_mouse(budget: _Budget) -> Machine:
    """``ESC [ < button ; x ; y`` then ``M`` (press/drag) or ``m`` (release)."""
    body = ""
    while True:
        b = yield from budget.read()
        if b is None:
            logger.debug("unterminated SGR mouse report %r", body)
            return Decoded(Event.unknown())
        ch = chr(b)
        if ch in ("M", "m"):
            break
        if not (ch.isdigit() or ch == ";"):
            return Decoded(Event.unknown())
        body += ch
    parts = body.split(";")
    if len(parts) != 3 or not all(parts):
        return Decoded(Event.unknown())
    code, x, y = (int(p) for p in parts)
    if x < 1 or y < 1:
        logger.debug("SGR mouse report off screen %r", body)
        return Decoded(Event.unknown())
    return Decoded(Event.from_mouse(parse_mouse_sgr(code, x - 1, y - 1, ch == "m")))


def _decode_paste(config: DecoderConfig) -> Machine:
    """
    Collect bracketed paste text up to ``ESC [ 201 ~``.

    Text beyond ``max_paste_bytes`` is dropped. If input stops for
    ``paste_timeout`` before the end marker, what arrived is delivered.
    """
    limit = config.max_paste_bytes
    data = bytearray()
    window = bytearray()
    overflowed = False
    while True:
        b = yield config.paste_timeout
        if b is None:
            logger.debug("bracketed paste ended without terminator")
            break
        window.append(b)
        del window[: -len(PASTE_END)]
        if window == PASTE_END:
            if not overflowed:
                del data[-(len(PASTE_END) - 1):]
            break
        if len(data) < limit + len(PASTE_END):
            data.append(b)
        else:
            overflowed = True
    text = truncate_utf8(bytes(data), limit).decode("utf-8", errors="replace")
    return Decoded(Event.paste(text))


def classify(data: bytes, config: DecoderConfig | None = None) -> Event:
    """
    Decode the first event in a complete byte string.

    Running out of bytes counts as a timeout, so ``classify(b"\\x1b")``
    is a lone Escape.
    """
    if not data:
        raise ValueError("no input bytes")
    machine = decode_event(data[0], config or DecoderConfig())
    pos = 1
    try:
        next(machine)
        while True:
            b = data[pos] if pos < len(data) else None
            pos += 1
            machine.send(b)
    except StopIteration as stop:
        return stop.value.event
