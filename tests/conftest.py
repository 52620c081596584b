"""Shared fixtures and helpers."""

import random

import pytest

from cellterm.config import DecoderConfig
from cellterm.core.buffer import Buffer
from cellterm.core.cell import Cell
from cellterm.core.color import Color
from cellterm.core.style import Modifier, Style

PALETTE = [
    Style(),
    Style(fg=Color.RED),
    Style(bg=Color.BLUE),
    Style(fg=Color.WHITE, bg=Color.RED),
    Style(fg=Color.from_256(208), modifiers=Modifier.BOLD),
    Style(fg=Color.from_rgb(255, 0, 128), bg=Color.grayscale(4)),
    Style(fg=Color.RESET, modifiers=Modifier.UNDERLINE | Modifier.ITALIC),
]
SYMBOLS = "abcXYZ .#*"


def random_cell(rng: random.Random) -> Cell:
    link = rng.choice(["", "", "", "https://example.com"])
    return Cell(rng.choice(SYMBOLS), rng.choice(PALETTE), link)


def random_buffer(rng: random.Random, width: int, height: int, fill: float = 0.5) -> Buffer:
    """A buffer with roughly ``fill`` of its cells randomized, some wide glyphs included."""
    buffer = Buffer(width, height)
    for y in range(height):
        for x in range(width):
            if rng.random() < fill:
                buffer.set(x, y, random_cell(rng))
        if width >= 4 and rng.random() < 0.3:
            buffer.set_string(rng.randrange(width - 2), y, "世", rng.choice(PALETTE))
    return buffer


def mutate(rng: random.Random, buffer: Buffer, count: int) -> Buffer:
    """Copy ``buffer``, clear its dirty state, then change ``count`` random cells."""
    result = buffer.copy()
    result.clear_dirty()
    for _ in range(count):
        result.set(rng.randrange(result.width), rng.randrange(result.height), random_cell(rng))
    return result


@pytest.fixture
def rng() -> random.Random:
    return random.Random(20240613)


@pytest.fixture
def config() -> DecoderConfig:
    """Decoder config with a short escape wait so timeouts stay fast."""
    return DecoderConfig(escape_timeout=0.01, paste_timeout=0.05)
