"""Decoded input events."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from cellterm.core.geometry import Size
from cellterm.input.keys import KeyCode, KeyEvent, KeyModifier
from cellterm.input.mouse import MouseEvent


class EventKind(Enum):
    KEY = auto()
    MOUSE = auto()
    RESIZE = auto()
    PASTE = auto()
    FOCUS_IN = auto()
    FOCUS_OUT = auto()
    QUIT = auto()
    UNKNOWN = auto()


@dataclass(frozen=True, slots=True)
class Event:
    """
    One input event.

    ``kind`` selects which payload is set: ``key`` for KEY, ``mouse``
    for MOUSE, ``size`` for RESIZE and ``text`` for PASTE. The other
    kinds carry nothing. Use the classmethods to build events.
    """
    kind: EventKind
    key: KeyEvent | None = None
    mouse: MouseEvent | None = None
    size: Size | None = None
    text: str = ""

    @classmethod
    def key_press(cls, code: KeyCode, char: str = "", modifiers: KeyModifier = KeyModifier.NONE) -> Event:
        return cls(EventKind.KEY, key=KeyEvent(code, char, modifiers))

    @classmethod
    def from_key(cls, key: KeyEvent) -> Event:
        return cls(EventKind.KEY, key=key)

    @classmethod
    def from_mouse(cls, mouse: MouseEvent) -> Event:
        return cls(EventKind.MOUSE, mouse=mouse)

    @classmethod
    def resize(cls, width: int, height: int) -> Event:
        return cls(EventKind.RESIZE, size=Size(width, height))

    @classmethod
    def paste(cls, text: str) -> Event:
        return cls(EventKind.PASTE, text=text)

    @classmethod
    def focus_in(cls) -> Event:
        return cls(EventKind.FOCUS_IN)

    @classmethod
    def focus_out(cls) -> Event:
        return cls(EventKind.FOCUS_OUT)

    @classmethod
    def quit(cls) -> Event:
        return cls(EventKind.QUIT)

    @classmethod
    def unknown(cls) -> Event:
        return cls(EventKind.UNKNOWN)

    @property
    def is_key(self) -> bool:
        return self.kind == EventKind.KEY

    def is_key_code(self, code: KeyCode) -> bool:
        return self.key is not None and self.key.code == code
