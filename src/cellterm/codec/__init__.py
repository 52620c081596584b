"""Decoding of terminal output."""

from cellterm.codec.ansi_parser import AnsiParser

__all__ = ["AnsiParser"]
