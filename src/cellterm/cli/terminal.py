"""Terminal mode switching for the developer tools."""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from typing import Iterator

from cellterm.core import constants as seq
from cellterm.core.geometry import Size
from cellterm.errors import TerminalError


class Terminal:
    """Raw mode, alternate screen and input reporting modes on stdout/stdin."""

    @staticmethod
    def size() -> Size:
        """Current terminal dimensions (80x24 when unknown)."""
        try:
            size = os.get_terminal_size()
            return Size(size.columns, size.lines)
        except OSError:
            return Size(80, 24)

    @staticmethod
    def write(text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

    @staticmethod
    @contextmanager
    def raw_mode() -> Iterator[None]:
        """Put stdin into raw mode (POSIX only)."""
        if sys.platform == "win32":
            raise TerminalError("raw mode requires a POSIX terminal")
        import termios
        import tty

        fd = sys.stdin.fileno()
        try:
            old_settings = termios.tcgetattr(fd)
        except termios.error as exc:
            raise TerminalError(f"stdin is not a terminal: {exc}") from exc
        try:
            tty.setraw(fd)
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)

    @staticmethod
    @contextmanager
    def alternate_screen() -> Iterator[None]:
        """Use the alternate screen buffer (preserves scrollback)."""
        Terminal.write(seq.ALTERNATE_SCREEN_ON)
        try:
            yield
        finally:
            Terminal.write(seq.ALTERNATE_SCREEN_OFF)

    @staticmethod
    @contextmanager
    def reporting(mouse: bool = True, paste: bool = True, focus: bool = True) -> Iterator[None]:
        """Enable SGR mouse, bracketed paste and focus reports."""
        modes = (seq.MOUSE_BUTTON, seq.MOUSE_MOTION, seq.MOUSE_SGR) if mouse else ()
        on = seq.mouse_on(*modes)
        off = seq.mouse_off(*modes)
        if paste:
            on += seq.BRACKETED_PASTE_ON
            off = seq.BRACKETED_PASTE_OFF + off
        if focus:
            on += seq.FOCUS_EVENTS_ON
            off = seq.FOCUS_EVENTS_OFF + off
        Terminal.write(on)
        try:
            yield
        finally:
            Terminal.write(off)

    @staticmethod
    @contextmanager
    def managed_mode(mouse: bool = True) -> Iterator[None]:
        """Full TUI mode: alternate screen, raw input, input reporting."""
        with Terminal.alternate_screen():
            try:
                with Terminal.raw_mode(), Terminal.reporting(mouse=mouse):
                    yield
            finally:
                Terminal.write(seq.SHOW_CURSOR + seq.RESET)
