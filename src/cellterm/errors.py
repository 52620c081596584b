"""Exception hierarchy.

Protocol-level oddities in the input stream never raise; they resolve to
Escape, Unknown or literal-character events. These exceptions cover the
resource failures a caller has to act on.
"""


class CellTermError(Exception):
    """Base class for all cellterm errors."""


class TerminalError(CellTermError):
    """The terminal could not be configured or written to."""


class InputError(CellTermError):
    """The input source failed."""


class InputClosedError(InputError, EOFError):
    """The input source reached end of file or was closed."""
