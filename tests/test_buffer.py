"""Tests for Buffer and dirty-region tracking."""

import pytest

from cellterm.core.buffer import Buffer, DirtyRegion
from cellterm.core.cell import Cell
from cellterm.core.color import Color
from cellterm.core.geometry import Position, Rect
from cellterm.core.style import Style

RED = Style(fg=Color.RED)


@pytest.fixture
def clean() -> Buffer:
    buffer = Buffer(10, 4)
    buffer.clear_dirty()
    return buffer


class TestConstruction:

    def test_blank_cells(self) -> None:
        buffer = Buffer(3, 2)
        assert buffer.width == 3
        assert buffer.height == 2
        assert all(cell == Cell() for _, _, cell in buffer.cells())

    def test_from_area(self) -> None:
        buffer = Buffer.from_area(Rect(5, 6, 3, 2))
        assert buffer.area == Rect(5, 6, 3, 2)
        assert buffer[0, 0] == Cell()

    def test_new_buffer_is_dirty(self) -> None:
        buffer = Buffer(4, 3)
        assert buffer.is_dirty
        assert buffer.dirty_region_size() == 12

    def test_degenerate_size(self) -> None:
        buffer = Buffer(-1, 5)
        assert buffer.width == 0
        assert buffer.to_strings() == [""] * 5
        assert not buffer.is_dirty


class TestAccess:

    def test_get_set(self, clean: Buffer) -> None:
        clean.set(2, 1, Cell("A", RED))
        assert clean.get(2, 1) == Cell("A", RED)

    def test_indexing(self, clean: Buffer) -> None:
        clean[5, 3] = Cell("B")
        assert clean[5, 3].symbol == "B"
        clean[Position(1, 1)] = Cell("C")
        assert clean[Position(1, 1)].symbol == "C"

    def test_out_of_range_get_is_blank(self, clean: Buffer) -> None:
        assert clean.get(-1, 0) == Cell()
        assert clean.get(10, 0) == Cell()
        assert clean[0, 99] == Cell()

    def test_out_of_range_set_is_ignored(self, clean: Buffer) -> None:
        clean.set(10, 0, Cell("X"))
        clean.set(-1, -1, Cell("X"))
        assert not clean.is_dirty
        assert all(cell == Cell() for _, _, cell in clean.cells())

    def test_is_valid_pos(self, clean: Buffer) -> None:
        assert clean.is_valid_pos(0, 0)
        assert clean.is_valid_pos(9, 3)
        assert not clean.is_valid_pos(10, 3)


class TestSetString:

    def test_ascii(self, clean: Buffer) -> None:
        end = clean.set_string(1, 0, "abc", RED)
        assert end == 4
        assert clean.to_strings()[0] == " abc      "
        assert clean.get(2, 0).style == RED

    def test_clips_at_edge(self, clean: Buffer) -> None:
        clean.set_string(7, 0, "abcdef")
        assert clean.to_strings()[0] == "       abc"

    def test_wide_glyph_continuation(self, clean: Buffer) -> None:
        clean.set_string(0, 0, "世a", RED, "https://x.org")
        assert clean.get(0, 0) == Cell("世", RED, "https://x.org")
        assert clean.get(1, 0) == Cell("", RED, "https://x.org")
        assert clean.get(2, 0).symbol == "a"

    def test_wide_glyph_dropped_at_edge(self, clean: Buffer) -> None:
        end = clean.set_string(8, 0, "a世")
        assert end == 9
        assert clean.get(8, 0).symbol == "a"
        assert clean.get(9, 0) == Cell()

    def test_start_outside_is_noop(self, clean: Buffer) -> None:
        clean.set_string(20, 0, "abc")
        clean.set_string(0, -1, "abc")
        assert not clean.is_dirty

    def test_set_runes(self, clean: Buffer) -> None:
        clean.set_runes(0, 2, ["x", "y"])
        assert clean.to_strings()[2].startswith("xy")

    def test_combining_mark_shares_cell(self, clean: Buffer) -> None:
        end = clean.set_string(0, 0, "e\u0301x")
        assert end == 2
        assert clean.get(0, 0).symbol == "e\u0301"
        assert clean.get(1, 0).symbol == "x"

    def test_flag_is_one_wide_glyph(self, clean: Buffer) -> None:
        end = clean.set_string(0, 0, "\U0001F1FA\U0001F1F8a")
        assert end == 3
        assert clean.get(0, 0).symbol == "\U0001F1FA\U0001F1F8"
        assert clean.get(1, 0).is_continuation()
        assert clean.get(2, 0).symbol == "a"

    def test_lone_mark_is_dropped(self, clean: Buffer) -> None:
        assert clean.set_string(0, 0, "\u0301a") == 1
        assert clean.get(0, 0).symbol == "a"
        assert clean.set_runes(0, 1, ["\u200b"]) == 0
        assert clean.get(0, 1) == Cell()

    def test_dirty_span(self, clean: Buffer) -> None:
        clean.set_string(2, 1, "世z")
        assert clean.dirty == DirtyRegion(True, 2, 1, 4, 1)


class TestFillClearResize:

    def test_fill_clips(self, clean: Buffer) -> None:
        clean.fill(Rect(8, 2, 5, 5), Cell("#"))
        assert clean.to_strings() == ["          ", "          ", "        ##", "        ##"]
        assert clean.dirty == DirtyRegion(True, 8, 2, 9, 3)

    def test_fill_uses_area_coordinates(self) -> None:
        buffer = Buffer.from_area(Rect(10, 10, 4, 2))
        buffer.clear_dirty()
        buffer.fill(Rect(12, 10, 1, 1), Cell("#"))
        assert buffer.get(2, 0).symbol == "#"
        assert buffer.dirty == DirtyRegion(True, 2, 0, 2, 0)

    def test_clear(self, clean: Buffer) -> None:
        clean.clear(Cell(".", RED))
        assert clean.to_strings() == [".........."] * 4
        assert clean.dirty_region_size() == 40

    def test_resize_grow_keeps_content(self, clean: Buffer) -> None:
        clean.set_string(0, 0, "hello")
        clean.resize(Rect(0, 0, 12, 5))
        assert clean.area == Rect(0, 0, 12, 5)
        assert clean.to_strings()[0] == "hello       "
        assert clean.to_strings()[4] == " " * 12
        assert clean.dirty_region_size() == 60

    def test_resize_shrink_discards(self, clean: Buffer) -> None:
        clean.set_string(0, 0, "hello")
        clean.resize(Rect(0, 0, 3, 1))
        assert clean.to_strings() == ["hel"]

    def test_resize_degenerate(self, clean: Buffer) -> None:
        clean.resize(Rect(0, 0, -4, 2))
        assert clean.width == 0
        assert clean.get(0, 0) == Cell()


class TestMerge:

    def test_merge_whole(self, clean: Buffer) -> None:
        src = Buffer(3, 1)
        src.set_string(0, 0, "xyz")
        clean.merge(src, Position(8, 3))
        assert clean.to_strings()[3] == "        xy"
        assert clean.dirty == DirtyRegion(True, 8, 3, 9, 3)

    def test_merge_area(self, clean: Buffer) -> None:
        src = Buffer(4, 2)
        src.set_string(0, 0, "abcd")
        src.set_string(0, 1, "efgh")
        clean.merge_area(src, Rect(1, 0, 2, 2), Position(0, 0))
        assert clean.to_strings()[:2] == ["bc        ", "fg        "]


class TestDirtyAndEquality:

    def test_single_change_region(self) -> None:
        buffer = Buffer(300, 100)
        buffer.clear_dirty()
        buffer.set(150, 50, Cell("x"))
        assert buffer.dirty_region_size() == 1
        assert buffer.dirty_region_size() < 100

    def test_union_of_changes(self, clean: Buffer) -> None:
        clean.set(1, 1, Cell("a"))
        clean.set(4, 3, Cell("b"))
        assert clean.dirty == DirtyRegion(True, 1, 1, 4, 3)
        assert clean.dirty_region_size() == 12

    def test_mark_dirty(self, clean: Buffer) -> None:
        clean.mark_dirty(3, 2)
        clean.mark_dirty(99, 99)
        assert clean.dirty == DirtyRegion(True, 3, 2, 3, 2)
        clean.mark_dirty_rect(Rect(0, 0, 2, 1))
        assert clean.dirty.as_rect() == Rect(0, 0, 4, 3)

    def test_clear_dirty(self, clean: Buffer) -> None:
        clean.set(0, 0, Cell("a"))
        clean.clear_dirty()
        assert not clean.is_dirty
        assert clean.dirty_region_size() == 0

    def test_equality(self) -> None:
        a = Buffer(3, 2)
        b = Buffer(3, 2)
        assert a == b
        b.set(0, 0, Cell("x"))
        assert a != b

    def test_different_sizes_unequal(self) -> None:
        assert Buffer(3, 2) != Buffer(2, 3)

    def test_equality_ignores_dirty_state(self) -> None:
        a = Buffer(3, 2)
        b = Buffer(3, 2)
        b.clear_dirty()
        assert a == b

    def test_copy_is_independent(self, clean: Buffer) -> None:
        clone = clean.copy()
        clone.set(0, 0, Cell("z"))
        assert clean.get(0, 0) == Cell()
        assert not clean.is_dirty
