"""Typer CLI application: interactive tools for exercising the core."""

import logging
import signal
import sys
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from cellterm.config import DecoderConfig
from cellterm.core.buffer import Buffer
from cellterm.core.cell import Cell
from cellterm.core.color import Color
from cellterm.core.geometry import Rect
from cellterm.core.style import Modifier, Style
from cellterm.input.events import Event, EventKind
from cellterm.input.keys import KeyCode, KeyModifier
from cellterm.render.screen import Screen
from cellterm.render.terminal import TerminalRenderer

HEADER_STYLE = Style(fg=Color.BLACK, bg=Color.CYAN, modifiers=Modifier.BOLD)
EVENT_STYLE = Style(fg=Color.BRIGHT_WHITE)
HISTORY = 200


def _modifier_names(modifiers: KeyModifier) -> str:
    names = [m.name.capitalize() for m in (KeyModifier.CTRL, KeyModifier.ALT, KeyModifier.SHIFT) if m in modifiers]
    return "+".join(names)


def describe_event(event: Event) -> str:
    """One-line human readable description of an event."""
    if event.kind == EventKind.KEY and event.key is not None:
        key = event.key
        name = repr(key.char) if key.code == KeyCode.CHAR else key.code.name
        mods = _modifier_names(key.modifiers)
        return f"Key {mods + '+' if mods else ''}{name}"
    if event.kind == EventKind.MOUSE and event.mouse is not None:
        m = event.mouse
        mods = _modifier_names(m.modifiers)
        text = f"Mouse {m.kind.name} {m.button.name} at ({m.x}, {m.y})"
        return f"{text} [{mods}]" if mods else text
    if event.kind == EventKind.RESIZE and event.size is not None:
        return f"Resize {event.size.width}x{event.size.height}"
    if event.kind == EventKind.PASTE:
        preview = event.text if len(event.text) <= 40 else event.text[:37] + "..."
        return f"Paste {len(event.text)} chars {preview!r}"
    return event.kind.name.replace("_", " ").title()


def is_exit_event(event: Event) -> bool:
    if event.kind == EventKind.QUIT:
        return True
    return (
        event.key is not None
        and event.key.code == KeyCode.CHAR
        and event.key.char == "q"
        and not event.key.modifiers
    )


def draw_event_log(buffer: Buffer, lines: list[str]) -> None:
    """Header row plus the newest event descriptions, oldest first."""
    buffer.clear()
    buffer.fill(Rect(buffer.area.x, buffer.area.y, buffer.width, 1), Cell(" ", HEADER_STYLE))
    buffer.set_string(1, 0, "cellterm keys - press q or Ctrl-C to quit", HEADER_STYLE)
    visible = lines[-(buffer.height - 1):] if buffer.height > 1 else []
    for row, line in enumerate(visible, start=1):
        buffer.set_string(0, row, line, EVENT_STYLE)


def build_palette(width: int = 72) -> Buffer:
    """A frame showing the 16 named colors, the 256 cube and an RGB ramp."""
    buffer = Buffer(width, 12)
    names = [
        "BLACK", "RED", "GREEN", "YELLOW", "BLUE", "MAGENTA", "CYAN", "WHITE",
        "BRIGHT_BLACK", "BRIGHT_RED", "BRIGHT_GREEN", "BRIGHT_YELLOW",
        "BRIGHT_BLUE", "BRIGHT_MAGENTA", "BRIGHT_CYAN", "BRIGHT_WHITE",
    ]
    for i, name in enumerate(names):
        color = getattr(Color, name)
        fg = Color.BLACK if i in (7, 11, 14, 15) else Color.BRIGHT_WHITE
        buffer.set_string((i % 8) * 9, i // 8, f" {i:>2}".ljust(9), Style(fg=fg, bg=color))
    for g in range(6):
        for r in range(6):
            for b in range(6):
                x = r * 12 + b * 2
                if x + 1 < width:
                    buffer.set_string(x, 3 + g, "  ", Style(bg=Color.cube(r, g, b)))
    for x in range(min(width, 48)):
        buffer.set_string(x, 10, " ", Style(bg=Color.from_hsv(x * 360 / 48, 1.0, 1.0)))
    buffer.set_string(0, 11, "bold", Style(modifiers=Modifier.BOLD))
    buffer.set_string(6, 11, "italic", Style(modifiers=Modifier.ITALIC))
    buffer.set_string(14, 11, "underline", Style(modifiers=Modifier.UNDERLINE))
    buffer.set_string(25, 11, "reversed", Style(modifiers=Modifier.REVERSED))
    buffer.set_string(35, 11, "世界", Style(fg=Color.from_hex("#ff8800")))
    return buffer


def run_keys(config: DecoderConfig, mouse: bool) -> None:
    """Show decoded input events until q or Ctrl-C."""
    from cellterm.cli.terminal import Terminal
    from cellterm.input.decoder import InputDecoder
    from cellterm.input.source import FdByteSource

    size = Terminal.size()
    screen = Screen(size.width, size.height)
    decoder = InputDecoder(FdByteSource(), config)
    lines: list[str] = []

    def on_winch(signum: int, frame: object) -> None:
        new = Terminal.size()
        decoder.notify_resize(new.width, new.height)

    previous = signal.signal(signal.SIGWINCH, on_winch)
    try:
        with Terminal.managed_mode(mouse=mouse):
            draw_event_log(screen.buffer, lines)
            screen.render()
            while True:
                event = decoder.read_event(timeout=0.1)
                if event is None:
                    continue
                if is_exit_event(event):
                    break
                if event.kind == EventKind.RESIZE and event.size is not None:
                    screen.resize(event.size.width, event.size.height)
                lines.append(describe_event(event))
                del lines[:-HISTORY]
                draw_event_log(screen.buffer, lines)
                screen.render()
    finally:
        signal.signal(signal.SIGWINCH, previous)


def create_app() -> typer.Typer:
    """Create and configure the CLI application."""
    app = typer.Typer(
        name="cellterm",
        help="Inspect terminal input decoding and cell rendering.",
        no_args_is_help=True,
        rich_markup_mode="rich",
    )
    console = Console()

    @app.callback()
    def main(
        verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log decoder and renderer details")] = False,
    ) -> None:
        if verbose:
            logging.basicConfig(
                level=logging.DEBUG,
                format="%(message)s",
                handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
            )

    @app.command()
    def keys(
        mouse: Annotated[bool, typer.Option("--mouse/--no-mouse", help="Enable mouse reporting")] = True,
        escape_timeout_ms: Annotated[
            Optional[float], typer.Option("--escape-timeout-ms", help="Lone-ESC wait in milliseconds")
        ] = None,
    ) -> None:
        """Show decoded key, mouse, paste and focus events."""
        config = DecoderConfig.from_env()
        if escape_timeout_ms is not None:
            config = config.with_escape_timeout(escape_timeout_ms / 1000.0)
        if not sys.stdin.isatty():
            console.print("[red]keys needs an interactive terminal[/]")
            raise typer.Exit(1)
        run_keys(config, mouse)

    @app.command()
    def colors(
        width: Annotated[int, typer.Option("--width", "-w", help="Frame width in columns")] = 72,
    ) -> None:
        """Render a color palette frame to stdout."""
        output = TerminalRenderer().render_full(build_palette(width))
        sys.stdout.write(output + "\n")
        sys.stdout.flush()

    @app.command()
    def info() -> None:
        """Show the decoder configuration (including environment overrides)."""
        table = Table(title="Decoder configuration")
        table.add_column("Setting", style="bold")
        table.add_column("Value")
        for name, value in DecoderConfig.from_env().as_dict().items():
            table.add_row(name, str(value))
        console.print(table)

    return app
