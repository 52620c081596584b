"""Renderers turning buffers into terminal output."""

from cellterm.render.screen import OutputSink, Screen
from cellterm.render.terminal import TerminalRenderer

__all__ = ["OutputSink", "Screen", "TerminalRenderer"]
