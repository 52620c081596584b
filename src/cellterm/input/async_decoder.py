"""asyncio input decoding."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from collections import deque
from typing import AsyncIterator, Protocol

from cellterm.config import DecoderConfig
from cellterm.errors import InputClosedError
from cellterm.input.escape import Decoded, decode_event
from cellterm.input.events import Event

logger = logging.getLogger(__name__)


class AsyncByteSource(Protocol):
    async def read_byte(self, timeout: float | None) -> int | None:
        """Next byte, None on timeout; raises InputClosedError at EOF."""
        ...


class QueueByteSource:
    """
    In-memory byte queue filled with ``feed``.

    Cancelling a pending ``read_byte`` never drops a byte: bytes are
    only taken from the queue after the wait has completed.
    """

    def __init__(self) -> None:
        self._data = bytearray()
        self._ready = asyncio.Event()
        self._closed = False

    def feed(self, data: bytes) -> None:
        if data:
            self._data.extend(data)
            self._ready.set()

    def close(self) -> None:
        self._closed = True
        self._ready.set()

    @property
    def closed(self) -> bool:
        return self._closed

    async def read_byte(self, timeout: float | None) -> int | None:
        if not self._data:
            if self._closed:
                raise InputClosedError("input closed")
            self._ready.clear()
            try:
                if timeout is None:
                    await self._ready.wait()
                else:
                    await asyncio.wait_for(self._ready.wait(), timeout)
            except asyncio.TimeoutError:
                return None
            if not self._data:
                if self._closed:
                    raise InputClosedError("input closed")
                return None
        b = self._data[0]
        del self._data[0]
        return b


class FdReaderSource(QueueByteSource):
    """
    Feed a QueueByteSource from a file descriptor using the event loop's
    reader callbacks. The reader is registered on first use; call
    ``detach`` to remove it.
    """

    def __init__(self, fd: int | None = None, chunk_size: int = 1024) -> None:
        super().__init__()
        self.fd = sys.stdin.fileno() if fd is None else fd
        self.chunk_size = chunk_size
        self._loop: asyncio.AbstractEventLoop | None = None

    def _on_readable(self) -> None:
        try:
            data = os.read(self.fd, self.chunk_size)
        except OSError as exc:
            logger.debug("read from fd %d failed: %s", self.fd, exc)
            data = b""
        if data:
            self.feed(data)
        else:
            self.detach()
            self.close()

    def attach(self) -> None:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
            self._loop.add_reader(self.fd, self._on_readable)

    def detach(self) -> None:
        if self._loop is not None:
            self._loop.remove_reader(self.fd)
            self._loop = None

    async def read_byte(self, timeout: float | None) -> int | None:
        if not self.closed:
            self.attach()
        return await super().read_byte(timeout)


class AsyncInputDecoder:
    """
    Decode events from an AsyncByteSource.

    Only the wait for an event's first byte can be cancelled. Once that
    byte is taken the rest of the event is decoded in a shielded task;
    if the caller is cancelled meanwhile, the task keeps running and
    the next ``read_event`` returns its event, so no partial sequence is
    left behind to be misread.
    """

    def __init__(self, source: AsyncByteSource, config: DecoderConfig | None = None) -> None:
        self.source = source
        self.config = config or DecoderConfig()
        self._pending: deque[int] = deque()
        self._queued: deque[Event] = deque()
        self._closed = False
        self._inflight: asyncio.Task[Event] | None = None

    def notify_resize(self, width: int, height: int) -> None:
        self._queued.append(Event.resize(width, height))

    async def _read(self, timeout: float | None, in_sequence: bool) -> int | None:
        if self._pending:
            return self._pending.popleft()
        if self._closed:
            if in_sequence:
                return None
            raise InputClosedError("input closed")
        try:
            return await self.source.read_byte(timeout)
        except InputClosedError:
            self._closed = True
            if in_sequence:
                return None
            raise

    async def _finish(self, first: int) -> Event:
        machine = decode_event(first, self.config)
        try:
            wait = next(machine)
            while True:
                wait = machine.send(await self._read(wait, in_sequence=True))
        except StopIteration as stop:
            decoded: Decoded = stop.value
        if decoded.unread:
            self._pending.extendleft(reversed(decoded.unread))
        return decoded.event

    async def read_event(self, timeout: float | None = None) -> Event | None:
        """Return the next event, or None if no input arrives in ``timeout``."""
        if self._inflight is None:
            if self._queued:
                return self._queued.popleft()
            first = await self._read(timeout, in_sequence=False)
            if first is None:
                return None
            self._inflight = asyncio.ensure_future(self._finish(first))
        task = self._inflight
        try:
            return await asyncio.shield(task)
        finally:
            if task.done():
                self._inflight = None

    def __aiter__(self) -> AsyncIterator[Event]:
        return self._events()

    async def _events(self) -> AsyncIterator[Event]:
        while True:
            try:
                event = await self.read_event()
            except InputClosedError:
                return
            if event is not None:
                yield event
