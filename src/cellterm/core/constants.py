"""Shared escape sequences for terminal output."""

ESC = "\x1b"
CSI = f"{ESC}["
OSC = f"{ESC}]"
ST = f"{ESC}\\"

RESET = f"{CSI}0m"
CLEAR_SCREEN = f"{CSI}2J"
HIDE_CURSOR = f"{CSI}?25l"
SHOW_CURSOR = f"{CSI}?25h"

# Terminal modes (set with "h", reset with "l")
ALTERNATE_SCREEN_ON = f"{CSI}?1049h"
ALTERNATE_SCREEN_OFF = f"{CSI}?1049l"
BRACKETED_PASTE_ON = f"{CSI}?2004h"
BRACKETED_PASTE_OFF = f"{CSI}?2004l"
FOCUS_EVENTS_ON = f"{CSI}?1004h"
FOCUS_EVENTS_OFF = f"{CSI}?1004l"

# Mouse reporting modes
MOUSE_X10 = 9
MOUSE_BUTTON = 1000
MOUSE_MOTION = 1002
MOUSE_ALL = 1003
MOUSE_SGR = 1006


def cursor_position(x: int, y: int) -> str:
    """Return a CUP sequence for zero-based column x and row y."""
    return f"{CSI}{y + 1};{x + 1}H"


def sgr(codes: str) -> str:
    """Wrap SGR parameter codes into a complete sequence."""
    return f"{CSI}{codes}m"


def hyperlink(uri: str) -> str:
    """Return an OSC 8 sequence opening (or, for "", closing) a hyperlink."""
    return f"{OSC}8;;{uri}{ST}"


def mouse_on(*modes: int) -> str:
    return "".join(f"{CSI}?{mode}h" for mode in modes)


def mouse_off(*modes: int) -> str:
    return "".join(f"{CSI}?{mode}l" for mode in reversed(modes))
