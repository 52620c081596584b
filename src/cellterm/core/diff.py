"""Minimal change set between two frames."""

from __future__ import annotations

import logging
from typing import NamedTuple

from cellterm.core.buffer import Buffer
from cellterm.core.cell import Cell
from cellterm.core.geometry import Position

logger = logging.getLogger(__name__)


class Change(NamedTuple):
    """One cell to write, at buffer-local coordinates."""
    pos: Position
    cell: Cell


def diff(old: Buffer, new: Buffer) -> list[Change]:
    """
    Return the cell writes that turn ``old`` into ``new``, row-major.

    Buffers with different areas cannot be patched: every cell of
    ``new`` is returned. Otherwise only the dirty region of ``new`` is
    scanned, so the cost follows the size of the change rather than the
    size of the screen.
    """
    if old.area != new.area:
        logger.debug("area changed %r -> %r, full repaint", old.area, new.area)
        return [Change(Position(x, y), cell) for x, y, cell in new.cells()]

    if not new.is_dirty:
        return []

    region = new.dirty
    changes: list[Change] = []
    for y in range(region.min_y, region.max_y + 1):
        for x in range(region.min_x, region.max_x + 1):
            cell = new.get(x, y)
            if old.get(x, y) != cell:
                changes.append(Change(Position(x, y), cell))
    return changes
