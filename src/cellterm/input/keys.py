"""Key codes, key events and the byte-to-key tables."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, Flag, auto


class KeyCode(Enum):
    """Named key constants; CHAR covers every printable character."""
    CHAR = auto()
    ENTER = auto()
    ESCAPE = auto()
    BACKSPACE = auto()
    TAB = auto()
    BACK_TAB = auto()
    SPACE = auto()
    ARROW_UP = auto()
    ARROW_DOWN = auto()
    ARROW_LEFT = auto()
    ARROW_RIGHT = auto()
    HOME = auto()
    END = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    INSERT = auto()
    DELETE = auto()
    F1 = auto()
    F2 = auto()
    F3 = auto()
    F4 = auto()
    F5 = auto()
    F6 = auto()
    F7 = auto()
    F8 = auto()
    F9 = auto()
    F10 = auto()
    F11 = auto()
    F12 = auto()


class KeyModifier(Flag):
    NONE = 0
    SHIFT = auto()
    ALT = auto()
    CTRL = auto()


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """
    A key press.

    ``char`` holds the typed text for CHAR keys and the literal byte for
    keys produced by a control character (Enter is "\\r", Escape is
    "\\x1b"); it is "" for keys that arrive as escape sequences.
    """
    code: KeyCode
    char: str = ""
    modifiers: KeyModifier = KeyModifier.NONE

    @property
    def is_char(self) -> bool:
        return self.code == KeyCode.CHAR

    def with_modifiers(self, modifiers: KeyModifier) -> KeyEvent:
        return replace(self, modifiers=modifiers)


ESCAPE_KEY = KeyEvent(KeyCode.ESCAPE, "\x1b")

# Bytes 0x01-0x1a that are not Ctrl+letter because they have their own key
_NOT_CTRL_LETTER = frozenset((0x03, 0x08, 0x09, 0x0A, 0x0D, 0x1B))

ARROW_KEYS: dict[str, KeyCode] = {
    "A": KeyCode.ARROW_UP,
    "B": KeyCode.ARROW_DOWN,
    "C": KeyCode.ARROW_RIGHT,
    "D": KeyCode.ARROW_LEFT,
}

NAVIGATION_KEYS: dict[str, KeyCode] = {
    "H": KeyCode.HOME,
    "F": KeyCode.END,
    "Z": KeyCode.BACK_TAB,
}

# ESC [ <n> ~
NUMERIC_KEYS: dict[str, KeyCode] = {
    "1": KeyCode.HOME,
    "2": KeyCode.INSERT,
    "3": KeyCode.DELETE,
    "4": KeyCode.END,
    "5": KeyCode.PAGE_UP,
    "6": KeyCode.PAGE_DOWN,
}

# ESC [ <nn> ~ (xterm/VT220; 16 and 22 are unassigned)
FUNCTION_KEYS: dict[str, KeyCode] = {
    "11": KeyCode.F1,
    "12": KeyCode.F2,
    "13": KeyCode.F3,
    "14": KeyCode.F4,
    "15": KeyCode.F5,
    "17": KeyCode.F6,
    "18": KeyCode.F7,
    "19": KeyCode.F8,
    "20": KeyCode.F9,
    "21": KeyCode.F10,
    "23": KeyCode.F11,
    "24": KeyCode.F12,
}

# ESC P..S, ESC O P..S and ESC [ 1 ; <mod> P..S
VT100_FUNCTION_KEYS: dict[str, KeyCode] = {
    "P": KeyCode.F1,
    "Q": KeyCode.F2,
    "R": KeyCode.F3,
    "S": KeyCode.F4,
}


def map_ctrl_letter(b: int) -> KeyEvent | None:
    """Ctrl+A..Ctrl+Z, except bytes that name their own key."""
    if 0x01 <= b <= 0x1A and b not in _NOT_CTRL_LETTER:
        return KeyEvent(KeyCode.CHAR, chr(b + ord("a") - 1), KeyModifier.CTRL)
    return None


def map_ctrl_number(b: int) -> KeyEvent | None:
    """Ctrl+Space (NUL) and Ctrl+4..Ctrl+7 (0x1c-0x1f)."""
    if b == 0x00:
        return KeyEvent(KeyCode.SPACE, " ", KeyModifier.CTRL)
    if 0x1C <= b <= 0x1F:
        return KeyEvent(KeyCode.CHAR, chr(b - 0x1C + ord("4")), KeyModifier.CTRL)
    return None


def map_basic_key(ch: str) -> KeyEvent:
    """Classify one decoded character."""
    if ch in ("\r", "\n"):
        return KeyEvent(KeyCode.ENTER, ch)
    if ch == "\t":
        return KeyEvent(KeyCode.TAB, ch)
    if ch == " ":
        return KeyEvent(KeyCode.SPACE, ch)
    if ch in ("\x08", "\x7f"):
        return KeyEvent(KeyCode.BACKSPACE, ch)
    if ch == "\x1b":
        return ESCAPE_KEY
    return KeyEvent(KeyCode.CHAR, ch)


def _lookup(table: dict[str, KeyCode], key: str) -> KeyEvent:
    code = table.get(key)
    return KeyEvent(code) if code is not None else ESCAPE_KEY


def map_arrow_key(ch: str) -> KeyEvent:
    return _lookup(ARROW_KEYS, ch)


def map_navigation_key(ch: str) -> KeyEvent:
    return _lookup(NAVIGATION_KEYS, ch)


def map_numeric_key(digit: str) -> KeyEvent:
    return _lookup(NUMERIC_KEYS, digit)


def map_function_key(digits: str) -> KeyEvent:
    return _lookup(FUNCTION_KEYS, digits)


def map_vt100_function_key(ch: str) -> KeyEvent:
    return _lookup(VT100_FUNCTION_KEYS, ch)


def parse_modifier_code(code: int) -> KeyModifier:
    """
    Decode the xterm modifier parameter: 1 + bitmask of
    Shift (1), Alt (2) and Ctrl (4). So 2 is Shift, 5 is Ctrl.
    """
    mask = code - 1
    modifiers = KeyModifier.NONE
    if mask <= 0:
        return modifiers
    if mask & 1:
        modifiers |= KeyModifier.SHIFT
    if mask & 2:
        modifiers |= KeyModifier.ALT
    if mask & 4:
        modifiers |= KeyModifier.CTRL
    return modifiers
