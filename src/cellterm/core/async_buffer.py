"""Lock-guarded Buffer facade for asyncio applications."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable

from cellterm.core.buffer import Buffer
from cellterm.core.cell import BLANK, Cell
from cellterm.core.diff import Change, diff
from cellterm.core.geometry import Position, Rect
from cellterm.core.style import DEFAULT_STYLE, Style


class AsyncBuffer:
    """
    Share one Buffer between tasks.

    The plain methods touch the buffer directly and are meant for a
    single writer. The ``*_async`` methods first acquire an
    ``asyncio.Lock``; waiting for the lock is the only suspension point,
    the cell work itself runs synchronously while the lock is held.
    """

    def __init__(self, width: int = 0, height: int = 0, *, origin: Position = Position()) -> None:
        self._buffer = Buffer(width, height, origin=origin)
        self._lock = asyncio.Lock()

    @classmethod
    def from_area(cls, area: Rect) -> AsyncBuffer:
        return cls(area.width, area.height, origin=area.position)

    @classmethod
    def wrap(cls, buffer: Buffer) -> AsyncBuffer:
        """Adopt an existing buffer (not copied)."""
        inst = cls()
        inst._buffer = buffer
        return inst

    @property
    def area(self) -> Rect:
        return self._buffer.area

    @asynccontextmanager
    async def locked(self) -> AsyncIterator[Buffer]:
        """Hold the lock and expose the underlying buffer."""
        async with self._lock:
            yield self._buffer

    # Synchronous fast path

    def get(self, x: int, y: int) -> Cell:
        return self._buffer.get(x, y)

    def set(self, x: int, y: int, cell: Cell) -> None:
        self._buffer.set(x, y, cell)

    def set_string(self, x: int, y: int, text: str, style: Style = DEFAULT_STYLE, hyperlink: str = "") -> int:
        return self._buffer.set_string(x, y, text, style, hyperlink)

    def set_runes(
        self, x: int, y: int, runes: Iterable[str], style: Style = DEFAULT_STYLE, hyperlink: str = ""
    ) -> int:
        return self._buffer.set_runes(x, y, runes, style, hyperlink)

    def fill(self, rect: Rect, cell: Cell) -> None:
        self._buffer.fill(rect, cell)

    def clear(self, cell: Cell = BLANK) -> None:
        self._buffer.clear(cell)

    def resize(self, area: Rect) -> None:
        self._buffer.resize(area)

    def merge_area(self, src: Buffer, src_area: Rect, dest: Position) -> None:
        self._buffer.merge_area(src, src_area, dest)

    def merge(self, src: Buffer, dest: Position = Position()) -> None:
        self._buffer.merge(src, dest)

    def mark_dirty(self, x: int, y: int) -> None:
        self._buffer.mark_dirty(x, y)

    def mark_dirty_rect(self, rect: Rect) -> None:
        self._buffer.mark_dirty_rect(rect)

    def clear_dirty(self) -> None:
        self._buffer.clear_dirty()

    @property
    def is_dirty(self) -> bool:
        return self._buffer.is_dirty

    def dirty_region_size(self) -> int:
        return self._buffer.dirty_region_size()

    def snapshot(self) -> Buffer:
        """A copy of the current buffer."""
        return self._buffer.copy()

    def update_from(self, src: Buffer) -> None:
        """Replace contents with a copy of ``src``."""
        self._buffer = src.copy()

    # Lock-acquiring variants

    async def get_async(self, x: int, y: int) -> Cell:
        async with self._lock:
            return self._buffer.get(x, y)

    async def set_async(self, x: int, y: int, cell: Cell) -> None:
        async with self._lock:
            self._buffer.set(x, y, cell)

    async def set_string_async(
        self, x: int, y: int, text: str, style: Style = DEFAULT_STYLE, hyperlink: str = ""
    ) -> int:
        async with self._lock:
            return self._buffer.set_string(x, y, text, style, hyperlink)

    async def set_runes_async(
        self, x: int, y: int, runes: Iterable[str], style: Style = DEFAULT_STYLE, hyperlink: str = ""
    ) -> int:
        async with self._lock:
            return self._buffer.set_runes(x, y, runes, style, hyperlink)

    async def fill_async(self, rect: Rect, cell: Cell) -> None:
        async with self._lock:
            self._buffer.fill(rect, cell)

    async def clear_async(self, cell: Cell = BLANK) -> None:
        async with self._lock:
            self._buffer.clear(cell)

    async def resize_async(self, area: Rect) -> None:
        async with self._lock:
            self._buffer.resize(area)

    async def merge_area_async(self, src: Buffer, src_area: Rect, dest: Position) -> None:
        async with self._lock:
            self._buffer.merge_area(src, src_area, dest)

    async def merge_async(self, src: Buffer, dest: Position = Position()) -> None:
        async with self._lock:
            self._buffer.merge(src, dest)

    async def mark_dirty_async(self, x: int, y: int) -> None:
        async with self._lock:
            self._buffer.mark_dirty(x, y)

    async def mark_dirty_rect_async(self, rect: Rect) -> None:
        async with self._lock:
            self._buffer.mark_dirty_rect(rect)

    async def clear_dirty_async(self) -> None:
        async with self._lock:
            self._buffer.clear_dirty()

    async def is_dirty_async(self) -> bool:
        async with self._lock:
            return self._buffer.is_dirty

    async def dirty_region_size_async(self) -> int:
        async with self._lock:
            return self._buffer.dirty_region_size()

    async def snapshot_async(self) -> Buffer:
        async with self._lock:
            return self._buffer.copy()

    async def update_from_async(self, src: Buffer) -> None:
        async with self._lock:
            self._buffer = src.copy()

    async def to_strings_async(self) -> list[str]:
        async with self._lock:
            return self._buffer.to_strings()

    async def diff_async(self, old: Buffer) -> list[Change]:
        """Changes from ``old`` to the current contents."""
        async with self._lock:
            return diff(old, self._buffer)

    def __repr__(self) -> str:
        return f"AsyncBuffer({self._buffer!r})"
