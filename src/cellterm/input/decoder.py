"""Blocking input decoder: bytes from a ByteSource in, Events out."""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterator

from cellterm.config import DecoderConfig
from cellterm.errors import InputClosedError
from cellterm.input.escape import Decoded, decode_event
from cellterm.input.events import Event
from cellterm.input.source import ByteSource, BytesSource

logger = logging.getLogger(__name__)


class InputDecoder:
    """
    Decode terminal input one event at a time.

    ``read_event`` blocks for the first byte of an event (up to
    ``timeout`` if given), then for at most ``config.escape_timeout``
    per further byte. It is not reentrant: one call at a time per source.

    A closed source raises InputClosedError. If the source closes in
    the middle of a sequence, that sequence is resolved as if it had
    timed out and the error is raised by the next call.
    """

    def __init__(self, source: ByteSource, config: DecoderConfig | None = None) -> None:
        self.source = source
        self.config = config or DecoderConfig()
        self._pending: deque[int] = deque()
        self._queued: deque[Event] = deque()
        self._closed = False

    def notify_resize(self, width: int, height: int) -> None:
        """Queue a Resize event, e.g. from a SIGWINCH handler."""
        self._queued.append(Event.resize(width, height))

    def _read(self, timeout: float | None, in_sequence: bool) -> int | None:
        if self._pending:
            return self._pending.popleft()
        if self._closed:
            if in_sequence:
                return None
            raise InputClosedError("input closed")
        try:
            return self.source.read_byte(timeout)
        except InputClosedError:
            self._closed = True
            if in_sequence:
                logger.debug("input closed inside a sequence")
                return None
            raise

    def read_event(self, timeout: float | None = None) -> Event | None:
        """Return the next event, or None if no input arrives in ``timeout``."""
        if self._queued:
            return self._queued.popleft()
        first = self._read(timeout, in_sequence=False)
        if first is None:
            return None
        machine = decode_event(first, self.config)
        try:
            wait = next(machine)
            while True:
                wait = machine.send(self._read(wait, in_sequence=True))
        except StopIteration as stop:
            decoded: Decoded = stop.value
        if decoded.unread:
            self._pending.extendleft(reversed(decoded.unread))
        return decoded.event

    def __iter__(self) -> Iterator[Event]:
        """Yield events until the source closes."""
        while True:
            try:
                event = self.read_event()
            except InputClosedError:
                return
            if event is not None:
                yield event


def decode_all(data: bytes, config: DecoderConfig | None = None) -> list[Event]:
    """Decode a complete byte string into events."""
    return list(InputDecoder(BytesSource(data), config))
