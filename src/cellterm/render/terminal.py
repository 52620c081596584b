"""Render buffers and frame diffs to ANSI escape sequences."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from cellterm.core import constants as seq
from cellterm.core.buffer import Buffer
from cellterm.core.cell import Cell
from cellterm.core.cursor import CursorState
from cellterm.core.diff import Change, diff
from cellterm.core.style import DEFAULT_STYLE, Style

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Run:
    """Horizontally adjacent cells sharing one style and link."""
    x: int
    y: int
    style: Style
    hyperlink: str
    parts: list[str] = field(default_factory=list)
    width: int = 0

    @property
    def end(self) -> int:
        """Column the terminal cursor lands on after the run is written."""
        return self.x + self.width

    @property
    def text(self) -> str:
        return "".join(self.parts)


def group_runs(cells: Iterable[tuple[int, int, Cell]]) -> Iterator[Run]:
    """
    Batch row-major (x, y, cell) triples into runs.

    A cell joins the current run when it sits on the same row, starts
    where the previous glyph ended, and has the same style and link.
    Continuation cells are skipped: the wide glyph before them already
    covers their column.
    """
    run: Run | None = None
    for x, y, cell in cells:
        if cell.is_continuation():
            continue
        if (
            run is None
            or y != run.y
            or x != run.end
            or cell.style != run.style
            or cell.hyperlink != run.hyperlink
        ):
            if run is not None:
                yield run
            run = Run(x, y, cell.style, cell.hyperlink)
        run.parts.append(cell.symbol)
        run.width += cell.width
    if run is not None:
        yield run


def sgr_transition(active: Style, target: Style) -> str:
    """
    Return the SGR sequence that switches ``active`` to ``target``.

    Going back to the default style is a bare reset; leaving a
    non-default style folds the reset into the same sequence as the new
    attributes. Returns "" when nothing changes.
    """
    if active == target:
        return ""
    if target.is_default():
        return seq.RESET
    codes = ";".join(target.sgr_codes())
    if active.is_default():
        return seq.sgr(codes)
    return seq.sgr(f"0;{codes}")


class _Writer:
    """Per-call output state: what the terminal currently shows."""

    def __init__(self, hyperlinks: bool) -> None:
        self.out: list[str] = []
        self.style = DEFAULT_STYLE
        self.link = ""
        self.cursor: tuple[int, int] | None = None
        self.hyperlinks = hyperlinks

    def write_run(self, run: Run) -> None:
        if self.cursor != (run.x, run.y):
            self.out.append(seq.cursor_position(run.x, run.y))
        self.out.append(sgr_transition(self.style, run.style))
        self.style = run.style
        if self.hyperlinks and run.hyperlink != self.link:
            self.out.append(seq.hyperlink(run.hyperlink))
            self.link = run.hyperlink
        self.out.append(run.text)
        self.cursor = (run.end, run.y)

    def finish(self) -> None:
        if self.link:
            self.out.append(seq.hyperlink(""))
            self.link = ""
        if not self.style.is_default():
            self.out.append(seq.RESET)
            self.style = DEFAULT_STYLE

    def result(self) -> str:
        return "".join(self.out)


class TerminalRenderer:
    """
    Turn buffers or diffs into terminal output.

    The renderer keeps no state between calls. Every call starts by
    assuming the terminal's attributes are reset and ends by resetting
    them again, so outputs can be written back to back. The only state
    threaded through is the caller's ``CursorState``, whose
    ``last_style`` is updated when a cursor shape is emitted.

    Clear-to-end-of-line is never emitted: runs overwrite exactly the
    cells they cover.
    """

    def __init__(self, hyperlinks: bool = True) -> None:
        self.hyperlinks = hyperlinks

    def render_full(self, buffer: Buffer, cursor: CursorState | None = None) -> str:
        """Clear the screen and draw every row that is not entirely blank."""
        writer = _Writer(self.hyperlinks)
        writer.out.append(seq.CLEAR_SCREEN)
        for y, row in enumerate(buffer.rows()):
            last = len(row) - 1
            while last >= 0 and row[last].is_blank():
                last -= 1
            if last < 0:
                continue
            for run in group_runs((x, y, row[x]) for x in range(last + 1)):
                writer.write_run(run)
        writer.finish()
        if cursor is not None:
            writer.out.append(self.render_cursor(cursor))
        return writer.result()

    def render_changes(self, changes: Iterable[Change], cursor: CursorState | None = None) -> str:
        """Emit the cell writes in ``changes`` (row-major) as batched runs."""
        writer = _Writer(self.hyperlinks)
        for run in group_runs((c.pos.x, c.pos.y, c.cell) for c in changes):
            writer.write_run(run)
        writer.finish()
        if cursor is not None:
            writer.out.append(self.render_cursor(cursor))
        return writer.result()

    def render_diff(
        self,
        old: Buffer,
        new: Buffer,
        cursor: CursorState | None = None,
        force: bool = False,
    ) -> str:
        """Update a screen showing ``old`` so it shows ``new``."""
        if force or old.area != new.area:
            logger.debug("full render of %dx%d (force=%s)", new.width, new.height, force)
            return self.render_full(new, cursor)
        return self.render_changes(diff(old, new), cursor)

    def render_cursor(self, cursor: CursorState) -> str:
        """
        Cursor epilogue: shape (only when changed), then show and place
        it, or hide it when invisible or unset.
        """
        if not (cursor.visible and cursor.has_position()):
            return seq.HIDE_CURSOR
        out = []
        if cursor.style_changed():
            out.append(cursor.style.sequence())
            cursor.last_style = cursor.style
        out.append(seq.SHOW_CURSOR)
        out.append(seq.cursor_position(cursor.x, cursor.y))
        return "".join(out)
