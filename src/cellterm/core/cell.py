"""Cell - atomic unit of the terminal grid."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field

import grapheme
import wcwidth as _wcwidth

from cellterm.core.style import DEFAULT_STYLE, Style


def graphemes(text: str) -> list[str]:
    """Split ``text`` into user-perceived characters, one per glyph."""
    return list(grapheme.graphemes(text))


def _is_zero_width(ch: str) -> bool:
    category = unicodedata.category(ch)
    return category.startswith("M") or category == "Cf"


def glyph_width(symbol: str) -> int:
    """
    Return the column width of one grapheme: 0, 1 or 2.

    Empty symbols are continuation slots and take no columns of their
    own. A mark or format character with no base character is drawn
    on top of the previous glyph, so it takes none either.
    """
    if not symbol:
        return 0
    cp = ord(symbol[0])
    if cp < 0x20 or 0x7F <= cp <= 0x9F:
        return 1
    if _is_zero_width(symbol[0]):
        return 0
    if len(symbol) > 1:
        for ch in symbol:
            cp = ord(ch)
            # VS16, ZWJ, skin tone modifiers, regional indicators
            if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
                return 2
    return 2 if _wcwidth.wcwidth(symbol[0]) == 2 else 1


@dataclass(frozen=True, slots=True)
class Cell:
    """
    A single position in the terminal grid.

    ``symbol`` is "" for the trailing half of a double-width glyph;
    ``hyperlink`` is "" when the cell carries no link.
    """
    symbol: str = " "
    style: Style = field(default_factory=lambda: DEFAULT_STYLE)
    hyperlink: str = ""

    @property
    def width(self) -> int:
        return glyph_width(self.symbol)

    @property
    def link(self) -> str | None:
        """The hyperlink target, or None."""
        return self.hyperlink or None

    def is_blank(self) -> bool:
        """Check if this is an unstyled space with no link."""
        return self.symbol == " " and self.style.is_default() and not self.hyperlink

    def is_continuation(self) -> bool:
        return self.symbol == ""


BLANK = Cell()
