"""Terminal cursor state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from cellterm.core.constants import CSI
from cellterm.core.geometry import Position


class CursorStyle(Enum):
    """DECSCUSR cursor shapes; the value is the DECSCUSR parameter."""
    DEFAULT = 0
    BLINKING_BLOCK = 1
    STEADY_BLOCK = 2
    BLINKING_UNDERLINE = 3
    STEADY_UNDERLINE = 4
    BLINKING_BAR = 5
    STEADY_BAR = 6

    def sequence(self) -> str:
        return f"{CSI}{self.value} q"


@dataclass(slots=True)
class CursorState:
    """
    Where the cursor should be and how it looks.

    ``x``/``y`` of -1 mean the position is unset. ``last_style`` is the
    shape most recently written to the terminal; the renderer updates it
    so an unchanged shape is not sent again.
    """
    x: int = -1
    y: int = -1
    visible: bool = False
    style: CursorStyle = CursorStyle.DEFAULT
    last_style: CursorStyle = CursorStyle.DEFAULT

    @property
    def position(self) -> Position | None:
        if self.x < 0 or self.y < 0:
            return None
        return Position(self.x, self.y)

    def has_position(self) -> bool:
        return self.x >= 0 and self.y >= 0

    def style_changed(self) -> bool:
        return self.style != self.last_style


class CursorManager:
    """Mutating front end over a CursorState."""

    def __init__(self, state: CursorState | None = None) -> None:
        self.state = state if state is not None else CursorState()

    def set_position(self, x: int, y: int, visible: bool | None = None) -> None:
        self.state.x = x
        self.state.y = y
        if visible is not None:
            self.state.visible = visible

    def show_at(self, x: int, y: int) -> None:
        self.set_position(x, y, visible=True)

    def show(self) -> None:
        self.state.visible = True

    def hide(self) -> None:
        self.state.visible = False

    def set_style(self, style: CursorStyle) -> None:
        self.state.style = style

    @property
    def position(self) -> Position | None:
        return self.state.position

    @property
    def visible(self) -> bool:
        return self.state.visible

    @property
    def style(self) -> CursorStyle:
        return self.state.style

    def has_position(self) -> bool:
        return self.state.has_position()

    def style_changed(self) -> bool:
        return self.state.style_changed()

    def update_last_style(self) -> None:
        self.state.last_style = self.state.style

    def reset(self) -> None:
        """Forget position and shape; the cursor becomes hidden."""
        self.state.x = -1
        self.state.y = -1
        self.state.visible = False
        self.state.style = CursorStyle.DEFAULT
        self.state.last_style = CursorStyle.DEFAULT
