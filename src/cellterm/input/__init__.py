"""Terminal input decoding - raw bytes to typed events."""

from cellterm.input.async_decoder import AsyncInputDecoder, FdReaderSource, QueueByteSource
from cellterm.input.decoder import InputDecoder, decode_all
from cellterm.input.escape import classify
from cellterm.input.events import Event, EventKind
from cellterm.input.keys import KeyCode, KeyEvent, KeyModifier
from cellterm.input.mouse import MouseButton, MouseEvent, MouseEventKind
from cellterm.input.source import BytesSource, FdByteSource

__all__ = [
    "AsyncInputDecoder",
    "FdReaderSource",
    "QueueByteSource",
    "InputDecoder",
    "decode_all",
    "classify",
    "Event",
    "EventKind",
    "KeyCode",
    "KeyEvent",
    "KeyModifier",
    "MouseButton",
    "MouseEvent",
    "MouseEventKind",
    "BytesSource",
    "FdByteSource",
]
