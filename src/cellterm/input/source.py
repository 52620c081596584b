"""Blocking byte sources for the input decoder."""

from __future__ import annotations

import os
import select
import sys
from typing import Protocol

from cellterm.errors import InputClosedError


class ByteSource(Protocol):
    def read_byte(self, timeout: float | None) -> int | None:
        """
        Return the next byte, or None if none arrives within ``timeout``
        seconds (None waits forever). Raises InputClosedError at EOF.
        """
        ...


class FdByteSource:
    """
    Read raw bytes from a file descriptor (stdin by default).

    Uses os.read() to bypass Python's I/O buffering; everything available
    is read at once and handed out one byte at a time, so an escape
    sequence that arrives as one burst is never split across waits.
    """

    def __init__(self, fd: int | None = None, chunk_size: int = 1024) -> None:
        self.fd = sys.stdin.fileno() if fd is None else fd
        self.chunk_size = chunk_size
        self._buffer = bytearray()
        self._closed = False

    def read_byte(self, timeout: float | None) -> int | None:
        if not self._buffer:
            if self._closed:
                raise InputClosedError("input closed")
            if not self._wait(timeout):
                return None
            self._fill()
        b = self._buffer[0]
        del self._buffer[0]
        return b

    def _wait(self, timeout: float | None) -> bool:
        try:
            ready, _, _ = select.select([self.fd], [], [], timeout)
        except (OSError, ValueError) as exc:
            self._closed = True
            raise InputClosedError(f"cannot poll fd {self.fd}: {exc}") from exc
        return bool(ready)

    def _fill(self) -> None:
        try:
            data = os.read(self.fd, self.chunk_size)
        except OSError as exc:
            self._closed = True
            raise InputClosedError(f"cannot read fd {self.fd}: {exc}") from exc
        if not data:
            self._closed = True
            raise InputClosedError("end of input")
        self._buffer.extend(data)


class BytesSource:
    """
    Replay a fixed byte string.

    Once the data is used up, reads either time out (``eof=False``) or
    raise InputClosedError (``eof=True``, the default).
    """

    def __init__(self, data: bytes = b"", eof: bool = True) -> None:
        self._data = bytearray(data)
        self.eof = eof

    def feed(self, data: bytes) -> None:
        self._data.extend(data)

    def read_byte(self, timeout: float | None) -> int | None:
        if not self._data:
            if self.eof:
                raise InputClosedError("end of input")
            return None
        b = self._data[0]
        del self._data[0]
        return b

    @property
    def remaining(self) -> bytes:
        return bytes(self._data)
