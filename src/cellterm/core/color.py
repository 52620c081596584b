"""Color representation for terminal cells."""

from __future__ import annotations

import colorsys
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

RESET_INDEX = 16


class ColorMode(Enum):
    """Color mode for SGR sequences."""
    INDEXED = "16"          # 16-color palette (SGR 30-37, 40-47, 90-97, 100-107)
    INDEXED_256 = "256"     # 256-color palette (SGR 38;5;n, 48;5;n)
    RGB = "rgb"             # 24-bit true color (SGR 38;2;r;g;b, 48;2;r;g;b)
    DEFAULT = "default"     # Terminal's own default (SGR 39, 49)


def _clamp(value: int, low: int = 0, high: int = 255) -> int:
    return max(low, min(high, int(value)))


@dataclass(frozen=True, slots=True)
class Color:
    """
    A tagged color value.

    ``value`` is an ``int`` for the indexed modes, an ``(r, g, b)`` tuple
    for ``RGB`` and ``None`` for ``DEFAULT``. Equality is structural, so
    the indexed ``RESET`` entry is never equal to ``DEFAULT``: a style
    using ``RESET`` writes an explicit 39/49, while ``DEFAULT`` is left
    implicit after an SGR reset.
    """
    mode: ColorMode = ColorMode.DEFAULT
    value: int | tuple[int, int, int] | None = None

    BLACK: ClassVar[Color]
    RED: ClassVar[Color]
    GREEN: ClassVar[Color]
    YELLOW: ClassVar[Color]
    BLUE: ClassVar[Color]
    MAGENTA: ClassVar[Color]
    CYAN: ClassVar[Color]
    WHITE: ClassVar[Color]
    BRIGHT_BLACK: ClassVar[Color]
    BRIGHT_RED: ClassVar[Color]
    BRIGHT_GREEN: ClassVar[Color]
    BRIGHT_YELLOW: ClassVar[Color]
    BRIGHT_BLUE: ClassVar[Color]
    BRIGHT_MAGENTA: ClassVar[Color]
    BRIGHT_CYAN: ClassVar[Color]
    BRIGHT_WHITE: ClassVar[Color]
    RESET: ClassVar[Color]
    DEFAULT: ClassVar[Color]

    @classmethod
    def indexed(cls, index: int) -> Color:
        """Create a 16-color palette entry (16 is the reset entry)."""
        if not 0 <= index <= RESET_INDEX:
            raise ValueError(f"16-color index must be 0-16, got {index}")
        return cls(ColorMode.INDEXED, index)

    @classmethod
    def from_256(cls, index: int) -> Color:
        """Create a Color from a 256-color index, clamped to 0-255."""
        return cls(ColorMode.INDEXED_256, _clamp(index))

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> Color:
        """Create a true color value; components are clamped to 0-255."""
        return cls(ColorMode.RGB, (_clamp(r), _clamp(g), _clamp(b)))

    @classmethod
    def from_hex(cls, text: str) -> Color:
        """
        Parse ``#rrggbb`` (the ``#`` is optional).

        Malformed input yields black rather than raising.
        """
        digits = text.strip().lstrip("#")
        if len(digits) != 6:
            return cls.from_rgb(0, 0, 0)
        try:
            return cls.from_rgb(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
        except ValueError:
            return cls.from_rgb(0, 0, 0)

    @classmethod
    def from_hsv(cls, h: float, s: float, v: float) -> Color:
        """Create a true color from hue (degrees), saturation and value (0-1)."""
        r, g, b = colorsys.hsv_to_rgb((h % 360) / 360.0, max(0.0, min(1.0, s)), max(0.0, min(1.0, v)))
        return cls.from_rgb(round(r * 255), round(g * 255), round(b * 255))

    @classmethod
    def grayscale(cls, level: int) -> Color:
        """Grayscale ramp of the 256 palette, level 0-23."""
        return cls(ColorMode.INDEXED_256, 232 + _clamp(level, 0, 23))

    @classmethod
    def cube(cls, r: int, g: int, b: int) -> Color:
        """6x6x6 color cube of the 256 palette, components 0-5."""
        r, g, b = _clamp(r, 0, 5), _clamp(g, 0, 5), _clamp(b, 0, 5)
        return cls(ColorMode.INDEXED_256, 16 + 36 * r + 6 * g + b)

    def lerp(self, other: Color, t: float) -> Color:
        """
        Interpolate between two true colors.

        Non-RGB endpoints cannot be blended; the nearer endpoint is returned.
        """
        t = max(0.0, min(1.0, t))
        if self.mode != ColorMode.RGB or other.mode != ColorMode.RGB:
            return self if t < 0.5 else other
        assert isinstance(self.value, tuple) and isinstance(other.value, tuple)
        return Color.from_rgb(*(round(a + (b - a) * t) for a, b in zip(self.value, other.value)))

    @property
    def is_default(self) -> bool:
        return self.mode == ColorMode.DEFAULT

    def to_sgr_fg(self) -> str:
        """Return SGR codes for this color as foreground."""
        if self.mode == ColorMode.INDEXED:
            assert isinstance(self.value, int)
            if self.value == RESET_INDEX:
                return "39"
            if self.value < 8:
                return str(30 + self.value)
            return str(90 + self.value - 8)
        elif self.mode == ColorMode.INDEXED_256:
            return f"38;5;{self.value}"
        elif self.mode == ColorMode.RGB:
            assert isinstance(self.value, tuple)
            r, g, b = self.value
            return f"38;2;{r};{g};{b}"
        return "39"

    def to_sgr_bg(self) -> str:
        """Return SGR codes for this color as background."""
        if self.mode == ColorMode.INDEXED:
            assert isinstance(self.value, int)
            if self.value == RESET_INDEX:
                return "49"
            if self.value < 8:
                return str(40 + self.value)
            return str(100 + self.value - 8)
        elif self.mode == ColorMode.INDEXED_256:
            return f"48;5;{self.value}"
        elif self.mode == ColorMode.RGB:
            assert isinstance(self.value, tuple)
            r, g, b = self.value
            return f"48;2;{r};{g};{b}"
        return "49"


Color.BLACK = Color(ColorMode.INDEXED, 0)
Color.RED = Color(ColorMode.INDEXED, 1)
Color.GREEN = Color(ColorMode.INDEXED, 2)
Color.YELLOW = Color(ColorMode.INDEXED, 3)
Color.BLUE = Color(ColorMode.INDEXED, 4)
Color.MAGENTA = Color(ColorMode.INDEXED, 5)
Color.CYAN = Color(ColorMode.INDEXED, 6)
Color.WHITE = Color(ColorMode.INDEXED, 7)
Color.BRIGHT_BLACK = Color(ColorMode.INDEXED, 8)
Color.BRIGHT_RED = Color(ColorMode.INDEXED, 9)
Color.BRIGHT_GREEN = Color(ColorMode.INDEXED, 10)
Color.BRIGHT_YELLOW = Color(ColorMode.INDEXED, 11)
Color.BRIGHT_BLUE = Color(ColorMode.INDEXED, 12)
Color.BRIGHT_MAGENTA = Color(ColorMode.INDEXED, 13)
Color.BRIGHT_CYAN = Color(ColorMode.INDEXED, 14)
Color.BRIGHT_WHITE = Color(ColorMode.INDEXED, 15)
Color.RESET = Color(ColorMode.INDEXED, RESET_INDEX)
Color.DEFAULT = Color(ColorMode.DEFAULT, None)
