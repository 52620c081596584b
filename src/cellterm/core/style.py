"""Text style: colors plus a modifier set."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Flag, auto

from cellterm.core.color import Color


class Modifier(Flag):
    """SGR text attributes."""
    NONE = 0
    BOLD = auto()
    DIM = auto()
    ITALIC = auto()
    UNDERLINE = auto()
    SLOW_BLINK = auto()
    RAPID_BLINK = auto()
    REVERSED = auto()
    HIDDEN = auto()
    CROSSED = auto()


# Emission order and SGR code of each modifier
MODIFIER_CODES: tuple[tuple[Modifier, int], ...] = (
    (Modifier.BOLD, 1),
    (Modifier.DIM, 2),
    (Modifier.ITALIC, 3),
    (Modifier.UNDERLINE, 4),
    (Modifier.SLOW_BLINK, 5),
    (Modifier.RAPID_BLINK, 6),
    (Modifier.REVERSED, 7),
    (Modifier.HIDDEN, 8),
    (Modifier.CROSSED, 9),
)


@dataclass(frozen=True, slots=True)
class Style:
    """Foreground, background and modifiers of a cell."""
    fg: Color = field(default_factory=lambda: Color.DEFAULT)
    bg: Color = field(default_factory=lambda: Color.DEFAULT)
    modifiers: Modifier = Modifier.NONE

    def with_fg(self, color: Color) -> Style:
        return replace(self, fg=color)

    def with_bg(self, color: Color) -> Style:
        return replace(self, bg=color)

    def add_modifier(self, modifier: Modifier) -> Style:
        return replace(self, modifiers=self.modifiers | modifier)

    def remove_modifier(self, modifier: Modifier) -> Style:
        return replace(self, modifiers=self.modifiers & ~modifier)

    def is_default(self) -> bool:
        """True when nothing differs from the terminal's reset state."""
        return self.fg.is_default and self.bg.is_default and not self.modifiers

    def sgr_codes(self) -> list[str]:
        """
        SGR parameters that draw this style on top of a reset terminal.

        ``DEFAULT`` colors are implied by the reset and are left out.
        """
        codes = [str(code) for modifier, code in MODIFIER_CODES if modifier in self.modifiers]
        if not self.fg.is_default:
            codes.append(self.fg.to_sgr_fg())
        if not self.bg.is_default:
            codes.append(self.bg.to_sgr_bg())
        return codes


DEFAULT_STYLE = Style()
