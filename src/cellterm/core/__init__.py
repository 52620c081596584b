"""Core data structures: cells, styles, buffers and frame diffs."""

from cellterm.core.async_buffer import AsyncBuffer
from cellterm.core.buffer import Buffer, DirtyRegion
from cellterm.core.cell import Cell
from cellterm.core.color import Color, ColorMode
from cellterm.core.cursor import CursorManager, CursorState, CursorStyle
from cellterm.core.diff import Change, diff
from cellterm.core.geometry import Position, Rect, Size
from cellterm.core.style import Modifier, Style

__all__ = [
    "AsyncBuffer",
    "Buffer",
    "DirtyRegion",
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
]
