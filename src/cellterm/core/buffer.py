"""Buffer - 2D grid of cells with dirty-region tracking."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from cellterm.core.cell import BLANK, Cell, graphemes
from cellterm.core.geometry import Position, Rect
from cellterm.core.style import DEFAULT_STYLE, Style

Coord = tuple[int, int] | Position


@dataclass(slots=True)
class DirtyRegion:
    """
    Bounding box, in buffer-local coordinates, of every cell mutated
    since the last ``clear()``. Bounds are inclusive.
    """
    is_dirty: bool = False
    min_x: int = 0
    min_y: int = 0
    max_x: int = 0
    max_y: int = 0

    def include(self, min_x: int, min_y: int, max_x: int, max_y: int) -> None:
        if not self.is_dirty:
            self.is_dirty = True
            self.min_x, self.min_y, self.max_x, self.max_y = min_x, min_y, max_x, max_y
            return
        self.min_x = min(self.min_x, min_x)
        self.min_y = min(self.min_y, min_y)
        self.max_x = max(self.max_x, max_x)
        self.max_y = max(self.max_y, max_y)

    def clear(self) -> None:
        self.is_dirty = False
        self.min_x = self.min_y = self.max_x = self.max_y = 0

    def size(self) -> int:
        """Number of cells inside the region (0 when clean)."""
        if not self.is_dirty:
            return 0
        return (self.max_x - self.min_x + 1) * (self.max_y - self.min_y + 1)

    def as_rect(self) -> Rect:
        """The region as a local-coordinate rectangle (empty when clean)."""
        if not self.is_dirty:
            return Rect()
        return Rect(self.min_x, self.min_y, self.max_x - self.min_x + 1, self.max_y - self.min_y + 1)


def _unpack(pos: Coord) -> tuple[int, int]:
    if isinstance(pos, Position):
        return pos.x, pos.y
    x, y = pos
    return x, y


class Buffer:
    """
    A rectangular grid of Cells.

    Cell access (``get``, ``set``, ``buffer[x, y]``, ``set_string``) uses
    buffer-local coordinates, so (0, 0) is always the top-left cell no
    matter where ``area`` places the buffer on screen. ``fill``, the
    ``src_area`` of ``merge_area`` and ``mark_dirty_rect`` take
    rectangles in the same coordinate space as ``area``.

    Access outside the grid never raises: reads return a blank cell and
    writes are ignored. A new buffer has never been shown, so its whole
    area starts dirty.
    """

    __slots__ = ("area", "_rows", "dirty")

    def __init__(self, width: int = 0, height: int = 0, *, origin: Position = Position()) -> None:
        self.area = Rect(origin.x, origin.y, width, height)
        self._rows: list[list[Cell]] = self._blank_rows(self.area.width, self.area.height)
        self.dirty = DirtyRegion()
        self.mark_dirty_rect(self.area)

    @classmethod
    def from_area(cls, area: Rect) -> Buffer:
        return cls(area.width, area.height, origin=area.position)

    @staticmethod
    def _blank_rows(width: int, height: int) -> list[list[Cell]]:
        return [[BLANK] * width for _ in range(height)]

    @property
    def width(self) -> int:
        return self.area.width

    @property
    def height(self) -> int:
        return self.area.height

    # Dirty tracking

    def mark_dirty(self, x: int, y: int) -> None:
        """Widen the dirty region to include local (x, y)."""
        if self.is_valid_pos(x, y):
            self.dirty.include(x, y, x, y)

    def mark_dirty_rect(self, rect: Rect) -> None:
        """Widen the dirty region to include ``rect`` (area coordinates)."""
        clipped = self.area.intersection(rect)
        if clipped.is_empty():
            return
        self.dirty.include(
            clipped.x - self.area.x,
            clipped.y - self.area.y,
            clipped.right - 1 - self.area.x,
            clipped.bottom - 1 - self.area.y,
        )

    def clear_dirty(self) -> None:
        """Reset tracking, typically after the buffer has been presented."""
        self.dirty.clear()

    @property
    def is_dirty(self) -> bool:
        return self.dirty.is_dirty

    def dirty_region_size(self) -> int:
        return self.dirty.size()

    # Cell access

    def is_valid_pos(self, x: int, y: int) -> bool:
        return 0 <= x < self.area.width and 0 <= y < self.area.height

    def get(self, x: int, y: int) -> Cell:
        """Get the cell at (x, y); blank when out of range."""
        if not self.is_valid_pos(x, y):
            return BLANK
        return self._rows[y][x]

    def set(self, x: int, y: int, cell: Cell) -> None:
        """Set the cell at (x, y); ignored when out of range."""
        if not self.is_valid_pos(x, y):
            return
        self._rows[y][x] = cell
        self.dirty.include(x, y, x, y)

    def __getitem__(self, pos: Coord) -> Cell:
        x, y = _unpack(pos)
        return self.get(x, y)

    def __setitem__(self, pos: Coord, cell: Cell) -> None:
        x, y = _unpack(pos)
        self.set(x, y, cell)

    def set_runes(
        self,
        x: int,
        y: int,
        runes: Iterable[str],
        style: Style = DEFAULT_STYLE,
        hyperlink: str = "",
    ) -> int:
        """
        Write glyphs left to right starting at (x, y).

        A double-width glyph fills two cells, the second an empty
        continuation cell carrying the same style and link. A glyph that
        takes no columns (a mark with nothing to combine with) is dropped.
        Writing stops at the right edge; a wide glyph that would straddle
        it is dropped.

        Returns the column after the last glyph written.
        """
        if not self.is_valid_pos(x, y):
            return x
        row = self._rows[y]
        current = x
        for rune in runes:
            cell = Cell(rune, style, hyperlink)
            width = cell.width
            if width == 0:
                continue
            if current + width > self.area.width:
                break
            row[current] = cell
            if width == 2:
                row[current + 1] = Cell("", style, hyperlink)
            current += width
        if current > x:
            self.dirty.include(x, y, current - 1, y)
        return current

    def set_string(
        self,
        x: int,
        y: int,
        text: str,
        style: Style = DEFAULT_STYLE,
        hyperlink: str = "",
    ) -> int:
        """Write ``text`` one grapheme per glyph; see ``set_runes``."""
        return self.set_runes(x, y, graphemes(text), style, hyperlink)

    def fill(self, rect: Rect, cell: Cell) -> None:
        """Fill the part of ``rect`` (area coordinates) inside the buffer."""
        clipped = self.area.intersection(rect)
        if clipped.is_empty():
            return
        left = clipped.x - self.area.x
        right = clipped.right - self.area.x
        for y in range(clipped.y - self.area.y, clipped.bottom - self.area.y):
            self._rows[y][left:right] = [cell] * (right - left)
        self.mark_dirty_rect(clipped)

    def clear(self, cell: Cell = BLANK) -> None:
        """Overwrite every cell."""
        self.fill(self.area, cell)

    def resize(self, area: Rect) -> None:
        """
        Reallocate to ``area``, keeping cells where old and new overlap.

        Overlap is computed in screen coordinates, so moving the origin
        shifts content accordingly. The whole new area becomes dirty.
        """
        old_rows, old_area = self._rows, self.area
        self.area = area
        self._rows = self._blank_rows(area.width, area.height)
        overlap = old_area.intersection(area)
        for sy in range(overlap.y, overlap.bottom):
            old_row = old_rows[sy - old_area.y]
            new_row = self._rows[sy - area.y]
            for sx in range(overlap.x, overlap.right):
                new_row[sx - area.x] = old_row[sx - old_area.x]
        self.dirty.clear()
        self.mark_dirty_rect(area)

    def merge_area(self, src: Buffer, src_area: Rect, dest: Position) -> None:
        """Copy ``src_area`` (in src's area coordinates) to local ``dest``."""
        clipped = src.area.intersection(src_area)
        for sy in range(clipped.y, clipped.bottom):
            dy = dest.y + sy - clipped.y
            for sx in range(clipped.x, clipped.right):
                self.set(dest.x + sx - clipped.x, dy, src.get(sx - src.area.x, sy - src.area.y))

    def merge(self, src: Buffer, dest: Position = Position()) -> None:
        """Copy all of ``src`` to local ``dest``, clipped to this buffer."""
        self.merge_area(src, src.area, dest)

    # Inspection

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Buffer):
            return NotImplemented
        return self.area == other.area and self._rows == other._rows

    __hash__ = None  # type: ignore[assignment]

    def copy(self) -> Buffer:
        """Copy cells, area and dirty state."""
        clone = Buffer.__new__(Buffer)
        clone.area = self.area
        clone._rows = [list(row) for row in self._rows]
        clone.dirty = DirtyRegion(
            self.dirty.is_dirty, self.dirty.min_x, self.dirty.min_y, self.dirty.max_x, self.dirty.max_y
        )
        return clone

    def rows(self) -> Iterator[list[Cell]]:
        """Iterate over rows (copies)."""
        for row in self._rows:
            yield list(row)

    def cells(self) -> Iterator[tuple[int, int, Cell]]:
        """Iterate over all cells with local coordinates, row-major."""
        for y, row in enumerate(self._rows):
            for x, cell in enumerate(row):
                yield x, y, cell

    def to_strings(self) -> list[str]:
        """Row symbols joined, one string per row."""
        return ["".join(cell.symbol for cell in row) for row in self._rows]

    def __repr__(self) -> str:
        return f"Buffer({self.area!r}, dirty={self.dirty.as_rect()!r})"
