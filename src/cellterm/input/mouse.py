"""X10 and SGR mouse report decoding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from cellterm.input.keys import KeyModifier

X10_OFFSET = 33

# Button byte layout
BUTTON_MASK = 0x03
SHIFT_BIT = 0x04
ALT_BIT = 0x08
CTRL_BIT = 0x10
MOTION_BIT = 0x20
WHEEL_BIT = 0x40


class MouseButton(Enum):
    LEFT = auto()
    RIGHT = auto()
    MIDDLE = auto()
    WHEEL_UP = auto()
    WHEEL_DOWN = auto()


class MouseEventKind(Enum):
    PRESS = auto()
    RELEASE = auto()
    MOVE = auto()
    DRAG = auto()


@dataclass(frozen=True, slots=True)
class MouseEvent:
    """A mouse report with zero-based cell coordinates."""
    kind: MouseEventKind
    button: MouseButton
    x: int
    y: int
    modifiers: KeyModifier = KeyModifier.NONE


_BUTTONS = (MouseButton.LEFT, MouseButton.MIDDLE, MouseButton.RIGHT)


def parse_mouse_modifiers(code: int) -> KeyModifier:
    modifiers = KeyModifier.NONE
    if code & SHIFT_BIT:
        modifiers |= KeyModifier.SHIFT
    if code & ALT_BIT:
        modifiers |= KeyModifier.ALT
    if code & CTRL_BIT:
        modifiers |= KeyModifier.CTRL
    return modifiers


def _button_and_kind(code: int, release: bool) -> tuple[MouseButton, MouseEventKind]:
    if code & WHEEL_BIT:
        return (MouseButton.WHEEL_DOWN if code & 0x01 else MouseButton.WHEEL_UP), MouseEventKind.PRESS
    info = code & BUTTON_MASK
    # Button value 3 means "no button": a release in X10, or plain motion
    button = _BUTTONS[info] if info < 3 else MouseButton.LEFT
    if release:
        return button, MouseEventKind.RELEASE
    if code & MOTION_BIT:
        return button, (MouseEventKind.MOVE if info == 3 else MouseEventKind.DRAG)
    return button, MouseEventKind.PRESS


def parse_mouse_x10(data: bytes) -> MouseEvent:
    """
    Decode the three bytes after ``ESC [ M``.

    Coordinates are sent as 1-based value + 32, i.e. 33 for column 0.
    """
    code, cx, cy = data[0], data[1], data[2]
    # X10 has no release flag: button value 3 without motion is a release
    release = code & (BUTTON_MASK | WHEEL_BIT | MOTION_BIT) == BUTTON_MASK
    button, kind = _button_and_kind(code, release)
    return MouseEvent(kind, button, cx - X10_OFFSET, cy - X10_OFFSET, parse_mouse_modifiers(code))


def parse_mouse_sgr(code: int, x: int, y: int, is_release: bool) -> MouseEvent:
    """
    Build an event from an SGR report's fields.

    ``x`` and ``y`` are taken as already zero-based; the decoder subtracts
    1 from the transmitted values. Release comes from the ``m``
    terminator, not from the button bits.
    """
    button, kind = _button_and_kind(code, is_release)
    return MouseEvent(kind, button, x, y, parse_mouse_modifiers(code))
