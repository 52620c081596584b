"""Replay terminal output into a Buffer (a minimal virtual terminal)."""

from __future__ import annotations

import re

from cellterm.core.buffer import Buffer
from cellterm.core.cell import Cell, glyph_width, graphemes
from cellterm.core.color import Color
from cellterm.core.cursor import CursorStyle
from cellterm.core.style import MODIFIER_CODES, DEFAULT_STYLE, Modifier, Style

# SGR codes that switch attributes off
_MODIFIER_OFF: dict[int, Modifier] = {
    22: Modifier.BOLD | Modifier.DIM,
    23: Modifier.ITALIC,
    24: Modifier.UNDERLINE,
    25: Modifier.SLOW_BLINK | Modifier.RAPID_BLINK,
    27: Modifier.REVERSED,
    28: Modifier.HIDDEN,
    29: Modifier.CROSSED,
}
_MODIFIER_ON: dict[int, Modifier] = {code: modifier for modifier, code in MODIFIER_CODES}


class AnsiParser:
    """
    Apply renderer output to a grid of cells.

    Understands what ``TerminalRenderer`` emits: cursor positioning,
    SGR (16, 256 and true color, modifiers), clear screen, OSC 8 links
    and cursor visibility/shape. Text never wraps; glyphs past the right
    edge are dropped.

    Explicit 39/49 parameters are read back as ``Color.RESET``, since
    the renderer leaves ``Color.DEFAULT`` implicit after a reset.
    """

    TOKEN_PATTERN = re.compile(
        r"\x1b\[(?P<private>\??)(?P<params>[0-9;]*)(?P<inter> ?)(?P<cmd>[A-Za-z])"
        r"|\x1b\]8;[^;\x1b]*;(?P<uri>[^\x1b]*)\x1b\\"
    )

    def __init__(self, width: int = 80, height: int = 24, initial: Buffer | None = None) -> None:
        self.buffer = initial.copy() if initial is not None else Buffer(width, height)
        self.cursor_x = 0
        self.cursor_y = 0
        self.style = DEFAULT_STYLE
        self.hyperlink = ""
        self.cursor_visible = True
        self.cursor_style = CursorStyle.DEFAULT

    def feed(self, text: str | bytes) -> None:
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        pos = 0
        for match in self.TOKEN_PATTERN.finditer(text):
            self._put_text(text[pos:match.start()])
            if match.group("cmd") is not None:
                self._handle_csi(match.group("private"), match.group("params"), match.group("inter"), match.group("cmd"))
            else:
                self.hyperlink = match.group("uri")
            pos = match.end()
        self._put_text(text[pos:])

    def _put_text(self, text: str) -> None:
        for ch in graphemes(text):
            width = glyph_width(ch)
            if width == 0:
                continue
            if self.buffer.is_valid_pos(self.cursor_x + width - 1, self.cursor_y):
                self.buffer.set(self.cursor_x, self.cursor_y, Cell(ch, self.style, self.hyperlink))
                if width == 2:
                    self.buffer.set(self.cursor_x + 1, self.cursor_y, Cell("", self.style, self.hyperlink))
            self.cursor_x += width

    def _handle_csi(self, private: str, params_str: str, inter: str, command: str) -> None:
        params = [int(p) if p else 0 for p in params_str.split(";")] if params_str else []

        if private:
            if params == [25] and command in ("h", "l"):
                self.cursor_visible = command == "h"
        elif inter and command == "q":
            self.cursor_style = CursorStyle(params[0] if params else 0)
        elif command == "m":
            self._handle_sgr(params or [0])
        elif command in ("H", "f"):
            row = params[0] if params else 1
            col = params[1] if len(params) > 1 else 1
            self.cursor_y = max(0, row - 1)
            self.cursor_x = max(0, col - 1)
        elif command == "J" and params == [2]:
            self.buffer.clear()

    def _handle_sgr(self, params: list[int]) -> None:
        fg, bg, modifiers = self.style.fg, self.style.bg, self.style.modifiers
        i = 0
        while i < len(params):
            p = params[i]
            if p == 0:
                fg, bg, modifiers = Color.DEFAULT, Color.DEFAULT, Modifier.NONE
            elif p in _MODIFIER_ON:
                modifiers |= _MODIFIER_ON[p]
            elif p in _MODIFIER_OFF:
                modifiers &= ~_MODIFIER_OFF[p]
            elif 30 <= p <= 37:
                fg = Color.indexed(p - 30)
            elif 90 <= p <= 97:
                fg = Color.indexed(p - 90 + 8)
            elif 40 <= p <= 47:
                bg = Color.indexed(p - 40)
            elif 100 <= p <= 107:
                bg = Color.indexed(p - 100 + 8)
            elif p == 39:
                fg = Color.RESET
            elif p == 49:
                bg = Color.RESET
            elif p in (38, 48):
                color, used = self._extended_color(params, i + 1)
                if color is not None:
                    if p == 38:
                        fg = color
                    else:
                        bg = color
                i += used
            i += 1
        self.style = Style(fg, bg, modifiers)

    @staticmethod
    def _extended_color(params: list[int], i: int) -> tuple[Color | None, int]:
        """Parse ``5;n`` or ``2;r;g;b``; returns the color and params used."""
        if i < len(params) and params[i] == 5 and i + 1 < len(params):
            return Color.from_256(params[i + 1]), 2
        if i < len(params) and params[i] == 2 and i + 3 < len(params):
            return Color.from_rgb(params[i + 1], params[i + 2], params[i + 3]), 4
        return None, 0

    def get_buffer(self) -> Buffer:
        return self.buffer
