"""
cellterm: rendering and input core for character-cell terminals

Draw into a grid of styled cells, send only what changed, and turn raw
terminal input into typed events.

Quick Start:
    >>> from cellterm import Buffer, Color, Style, TerminalRenderer
    >>> old = Buffer(20, 2)
    >>> new = old.copy()
    >>> new.clear_dirty()
    >>> new.set_string(0, 0, "hi", Style(fg=Color.RED))
    2
    >>> TerminalRenderer().render_diff(old, new)
    '\\x1b[1;1H\\x1b[31mhi\\x1b[0m'

Features:
    - Buffer with dirty-region tracking and double-width glyph support
    - Frame diff that scans only the dirty region
    - ANSI renderer batching runs of equal style, with cursor shape
      and OSC 8 hyperlinks
    - Input decoder for UTF-8, CSI/SS3 keys, modified keys, X10 and SGR
      mouse, bracketed paste and focus events
    - Blocking and asyncio decoders sharing one state machine
"""

__version__ = "0.1.0"

# Core types
from cellterm.core.async_buffer import AsyncBuffer
from cellterm.core.buffer import Buffer
from cellterm.core.cell import Cell
from cellterm.core.color import Color, ColorMode
from cellterm.core.cursor import CursorManager, CursorState, CursorStyle
from cellterm.core.diff import Change, diff
from cellterm.core.geometry import Position, Rect, Size
from cellterm.core.style import Modifier, Style

# Rendering
from cellterm.render.screen import Screen
from cellterm.render.terminal import TerminalRenderer

# Input
from cellterm.config import DecoderConfig
from cellterm.errors import CellTermError, InputClosedError, InputError, TerminalError
from cellterm.input.async_decoder import AsyncInputDecoder, QueueByteSource
from cellterm.input.decoder import InputDecoder
from cellterm.input.events import Event, EventKind
from cellterm.input.keys import KeyCode, KeyEvent, KeyModifier
from cellterm.input.mouse import MouseButton, MouseEvent, MouseEventKind
from cellterm.input.source import BytesSource, FdByteSource

__all__ = [
    # Version
    "__version__",
    # Core types
    "AsyncBuffer",
    "Buffer",
    "Cell",
    "Color",
    "ColorMode",
    "CursorManager",
    "CursorState",
    "CursorStyle",
    "Change",
    "diff",
    "Position",
    "Rect",
    "Size",
    "Modifier",
    "Style",
    # Rendering
    "Screen",
    "TerminalRenderer",
    # Input
    "DecoderConfig",
    "CellTermError",
    "InputClosedError",
    "InputError",
    "TerminalError",
    "AsyncInputDecoder",
    "QueueByteSource",
    "InputDecoder",
    "Event",
    "EventKind",
    "KeyCode",
    "KeyEvent",
    "KeyModifier",
    "MouseButton",
    "MouseEvent",
    "MouseEventKind",
    "BytesSource",
    "FdByteSource",
]
