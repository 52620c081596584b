"""Double-buffered presentation of frames to an output sink."""

from __future__ import annotations

import logging
import sys
from typing import Protocol

from cellterm.core.buffer import Buffer
from cellterm.core.cursor import CursorManager
from cellterm.core.geometry import Rect
from cellterm.render.terminal import TerminalRenderer

logger = logging.getLogger(__name__)


class OutputSink(Protocol):
    """Byte-oriented output, e.g. ``sys.stdout.buffer``."""

    def write(self, data: bytes) -> object: ...

    def flush(self) -> None: ...


class Screen:
    """
    Own a back buffer and present it.

    Draw into ``screen.buffer``, then call ``render()``: the changes
    since the last presented frame are written to the sink as a single
    write. The first render, and the first after ``resize`` or
    ``invalidate``, is a full repaint.
    """

    def __init__(
        self,
        width: int,
        height: int,
        sink: OutputSink | None = None,
        renderer: TerminalRenderer | None = None,
    ) -> None:
        self.buffer = Buffer(width, height)
        self.cursor = CursorManager()
        self.sink: OutputSink = sink if sink is not None else sys.stdout.buffer
        self.renderer = renderer or TerminalRenderer()
        self._last = Buffer(0, 0)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    def resize(self, width: int, height: int) -> None:
        """Resize the back buffer, keeping content; next render repaints."""
        self.buffer.resize(Rect(self.buffer.area.x, self.buffer.area.y, width, height))
        self.invalidate()

    def invalidate(self) -> None:
        """Forget what the terminal shows."""
        self._last = Buffer(0, 0)

    def render(self, force: bool = False) -> str:
        """Present the back buffer; returns the text that was written."""
        output = self.renderer.render_diff(self._last, self.buffer, self.cursor.state, force=force)
        self.sink.write(output.encode("utf-8"))
        self.sink.flush()
        logger.debug("wrote %d chars", len(output))
        self._last = self.buffer.copy()
        self.buffer.clear_dirty()
        return output
