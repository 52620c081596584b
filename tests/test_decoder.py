"""Tests for the blocking and asyncio input decoders."""

import asyncio
import os

import pytest

from cellterm.config import DecoderConfig
from cellterm.core.async_buffer import AsyncBuffer
from cellterm.core.buffer import Buffer
from cellterm.core.cell import Cell
from cellterm.core.geometry import Position, Rect, Size
from cellterm.errors import InputClosedError
from cellterm.input.async_decoder import AsyncInputDecoder, FdReaderSource, QueueByteSource
from cellterm.input.decoder import InputDecoder, decode_all
from cellterm.input.events import Event, EventKind
from cellterm.input.keys import ESCAPE_KEY, KeyCode, KeyModifier
from cellterm.input.source import BytesSource, FdByteSource

ARROW_UP = Event.key_press(KeyCode.ARROW_UP)


class TestInputDecoder:

    def test_sequence_of_events(self, config: DecoderConfig) -> None:
        events = decode_all(b"a\x1b[A\x1b[<0;1;1M\r", config)
        assert [e.kind for e in events] == [EventKind.KEY, EventKind.KEY, EventKind.MOUSE, EventKind.KEY]
        assert events[1] == ARROW_UP
        assert events[3].key.code == KeyCode.ENTER

    def test_unused_bytes_are_replayed(self, config: DecoderConfig) -> None:
        assert decode_all(b"\x1bab", config) == [
            Event.from_key(ESCAPE_KEY),
            Event.key_press(KeyCode.CHAR, "a"),
            Event.key_press(KeyCode.CHAR, "b"),
        ]

    def test_invalid_utf8_continues(self, config: DecoderConfig) -> None:
        events = decode_all(b"\xe3xy", config)
        assert [e.key.char for e in events] == ["\xe3", "x", "y"]

    def test_close_inside_sequence(self, config: DecoderConfig) -> None:
        decoder = InputDecoder(BytesSource(b"\x1b["), config)
        assert decoder.read_event() == Event.from_key(ESCAPE_KEY)
        assert decoder.read_event() == Event.key_press(KeyCode.CHAR, "[")
        with pytest.raises(InputClosedError):
            decoder.read_event()

    def test_closed_source_raises(self, config: DecoderConfig) -> None:
        decoder = InputDecoder(BytesSource(b""), config)
        with pytest.raises(InputClosedError):
            decoder.read_event()
        with pytest.raises(EOFError):
            decoder.read_event()

    def test_timeout_returns_none(self, config: DecoderConfig) -> None:
        source = BytesSource(b"", eof=False)
        decoder = InputDecoder(source, config)
        assert decoder.read_event(timeout=0.01) is None
        source.feed(b"\x1b[B")
        assert decoder.read_event(timeout=0.01) == Event.key_press(KeyCode.ARROW_DOWN)

    def test_lone_escape_after_wait(self, config: DecoderConfig) -> None:
        decoder = InputDecoder(BytesSource(b"\x1b", eof=False), config)
        assert decoder.read_event() == Event.from_key(ESCAPE_KEY)

    def test_resize_is_queued(self, config: DecoderConfig) -> None:
        decoder = InputDecoder(BytesSource(b"x"), config)
        decoder.notify_resize(100, 40)
        event = decoder.read_event()
        assert event.kind == EventKind.RESIZE
        assert event.size == Size(100, 40)
        assert decoder.read_event().key.char == "x"

    def test_ctrl_c(self, config: DecoderConfig) -> None:
        assert decode_all(b"\x03", config) == [Event.quit()]
        no_quit = DecoderConfig(ctrl_c_quits=False)
        assert decode_all(b"\x03", no_quit)[0].key.modifiers == KeyModifier.CTRL

    def test_iteration_stops_at_eof(self, config: DecoderConfig) -> None:
        decoder = InputDecoder(BytesSource(b"ab"), config)
        assert len(list(decoder)) == 2

    def test_fd_source(self, config: DecoderConfig) -> None:
        read_fd, write_fd = os.pipe()
        try:
            decoder = InputDecoder(FdByteSource(read_fd), config)
            os.write(write_fd, b"\x1b[1;5Cz")
            assert decoder.read_event(timeout=1.0) == Event.key_press(
                KeyCode.ARROW_RIGHT, "", KeyModifier.CTRL
            )
            assert decoder.read_event(timeout=1.0).key.char == "z"
            assert decoder.read_event(timeout=0.01) is None
            os.close(write_fd)
            write_fd = -1
            with pytest.raises(InputClosedError):
                decoder.read_event(timeout=1.0)
        finally:
            os.close(read_fd)
            if write_fd >= 0:
                os.close(write_fd)


class TestAsyncInputDecoder:

    @pytest.mark.asyncio
    async def test_decodes(self, config: DecoderConfig) -> None:
        source = QueueByteSource()
        decoder = AsyncInputDecoder(source, config)
        source.feed(b"\x1b[Aq")
        assert await decoder.read_event() == ARROW_UP
        assert (await decoder.read_event()).key.char == "q"

    @pytest.mark.asyncio
    async def test_timeout(self, config: DecoderConfig) -> None:
        decoder = AsyncInputDecoder(QueueByteSource(), config)
        assert await decoder.read_event(timeout=0.01) is None

    @pytest.mark.asyncio
    async def test_lone_escape(self, config: DecoderConfig) -> None:
        source = QueueByteSource()
        decoder = AsyncInputDecoder(source, config)
        source.feed(b"\x1b")
        assert await decoder.read_event() == Event.from_key(ESCAPE_KEY)

    @pytest.mark.asyncio
    async def test_cancel_while_waiting_for_first_byte(self, config: DecoderConfig) -> None:
        source = QueueByteSource()
        decoder = AsyncInputDecoder(source, config)
        task = asyncio.ensure_future(decoder.read_event())
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        source.feed(b"x")
        assert (await decoder.read_event()).key.char == "x"

    @pytest.mark.asyncio
    async def test_cancel_inside_sequence_keeps_it(self) -> None:
        source = QueueByteSource()
        decoder = AsyncInputDecoder(source, DecoderConfig(escape_timeout=5.0))
        source.feed(b"\x1b[")
        task = asyncio.ensure_future(decoder.read_event())
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        source.feed(b"A")
        assert await asyncio.wait_for(decoder.read_event(), 1.0) == ARROW_UP

    @pytest.mark.asyncio
    async def test_close(self, config: DecoderConfig) -> None:
        source = QueueByteSource()
        decoder = AsyncInputDecoder(source, config)
        source.feed(b"ab")
        source.close()
        events = [event async for event in decoder]
        assert [e.key.char for e in events] == ["a", "b"]
        with pytest.raises(InputClosedError):
            await decoder.read_event()

    @pytest.mark.asyncio
    async def test_resize(self, config: DecoderConfig) -> None:
        decoder = AsyncInputDecoder(QueueByteSource(), config)
        decoder.notify_resize(120, 50)
        assert await decoder.read_event() == Event.resize(120, 50)

    @pytest.mark.asyncio
    async def test_fd_reader_source(self, config: DecoderConfig) -> None:
        read_fd, write_fd = os.pipe()
        source = FdReaderSource(read_fd)
        decoder = AsyncInputDecoder(source, config)
        try:
            os.write(write_fd, b"\x1b[3~")
            assert await asyncio.wait_for(decoder.read_event(), 1.0) == Event.key_press(KeyCode.DELETE)
            os.close(write_fd)
            write_fd = -1
            with pytest.raises(InputClosedError):
                await asyncio.wait_for(decoder.read_event(), 1.0)
        finally:
            source.detach()
            os.close(read_fd)
            if write_fd >= 0:
                os.close(write_fd)


class TestAsyncBuffer:

    @pytest.mark.asyncio
    async def test_async_operations(self) -> None:
        buffer = AsyncBuffer(6, 2)
        await buffer.set_async(0, 0, Cell("a"))
        await buffer.set_string_async(1, 0, "bc")
        assert (await buffer.get_async(2, 0)).symbol == "c"
        await buffer.fill_async(Rect(0, 1, 6, 1), Cell("-"))
        assert await buffer.to_strings_async() == ["abc   ", "------"]
        await buffer.clear_dirty_async()
        assert not await buffer.is_dirty_async()
        assert await buffer.dirty_region_size_async() == 0

    @pytest.mark.asyncio
    async def test_snapshot_and_diff(self) -> None:
        buffer = AsyncBuffer(4, 1)
        old = await buffer.snapshot_async()
        await buffer.clear_dirty_async()
        await buffer.set_async(3, 0, Cell("z"))
        changes = await buffer.diff_async(old)
        assert [c.pos for c in changes] == [Position(3, 0)]

    @pytest.mark.asyncio
    async def test_update_resize_merge(self) -> None:
        buffer = AsyncBuffer(3, 1)
        src = Buffer(3, 1)
        src.set_string(0, 0, "xyz")
        await buffer.update_from_async(src)
        assert buffer.snapshot() == src
        await buffer.resize_async(Rect(0, 0, 5, 1))
        await buffer.merge_async(src, Position(3, 0))
        assert await buffer.to_strings_async() == ["xyzxy"]
        await buffer.clear_async()
        assert buffer.snapshot().to_strings() == ["     "]

    @pytest.mark.asyncio
    async def test_runes_and_merge_area(self) -> None:
        buffer = AsyncBuffer(6, 2)
        assert await buffer.set_runes_async(0, 0, ["a", "世"]) == 3
        assert buffer.get(2, 0).is_continuation()
        assert buffer.set_runes(3, 0, ["b"]) == 4
        src = Buffer(4, 2)
        src.set_string(0, 0, "wxyz")
        src.set_string(0, 1, "1234")
        await buffer.merge_area_async(src, Rect(1, 0, 2, 2), Position(4, 0))
        assert await buffer.to_strings_async() == ["a世bxy", "    23"]
        buffer.merge_area(src, Rect(0, 1, 1, 1), Position(0, 1))
        assert buffer.get(0, 1).symbol == "1"

    @pytest.mark.asyncio
    async def test_mark_dirty(self) -> None:
        buffer = AsyncBuffer(6, 2)
        await buffer.clear_dirty_async()
        await buffer.mark_dirty_async(1, 1)
        assert await buffer.dirty_region_size_async() == 1
        buffer.clear_dirty()
        await buffer.mark_dirty_rect_async(Rect(0, 0, 2, 2))
        assert buffer.dirty_region_size() == 4
        buffer.mark_dirty(5, 1)
        assert buffer.dirty_region_size() == 12

    @pytest.mark.asyncio
    async def test_concurrent_writers(self) -> None:
        buffer = AsyncBuffer(10, 10)

        async def write_row(y: int) -> None:
            for x in range(10):
                await buffer.set_async(x, y, Cell(str(y)))
                await asyncio.sleep(0)

        await asyncio.gather(*(write_row(y) for y in range(10)))
        assert await buffer.to_strings_async() == [str(y) * 10 for y in range(10)]

    @pytest.mark.asyncio
    async def test_locked(self) -> None:
        buffer = AsyncBuffer(3, 1)
        async with buffer.locked() as inner:
            inner.set_string(0, 0, "abc")
        assert buffer.get(1, 0).symbol == "b"
