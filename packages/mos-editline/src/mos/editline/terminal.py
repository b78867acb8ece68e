"""Terminal abstraction for the monitor's byte-oriented display link.

Provides a ``Terminal`` protocol describing what the line editor needs from
the far end (raw output, geometry, an opportunistic cursor-column query and
text colour selection) and a concrete ``ProcessTerminal`` that drives a host
terminal through ``sys.stdout`` by translating the protocol's cursor-motion
bytes into ANSI escape sequences.
"""

from __future__ import annotations

import logging
import os
import re
import select
import sys
import termios
import tty
from typing import Literal, Protocol

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Protocol control bytes
# ---------------------------------------------------------------------------

BELL = "\x07"
CURSOR_LEFT = "\x08"
CURSOR_RIGHT = "\x09"
CURSOR_DOWN = "\x0a"
CURSOR_UP = "\x0b"
CARRIAGE_RETURN = "\x0d"
CRLF = "\r\n"

TextColor = Literal["normal", "primary", "secondary"]

# ---------------------------------------------------------------------------
# ANSI escape constants (host adapter only)
# ---------------------------------------------------------------------------

_ANSI_CURSOR_RIGHT = "\x1b[C"
_ANSI_CURSOR_UP = "\x1b[A"
_ANSI_QUERY_CURSOR = "\x1b[6n"
_ANSI_COLORS: dict[str, str] = {
    "normal": "\x1b[39m",
    "primary": "\x1b[33m",
    "secondary": "\x1b[36m",
}

_CURSOR_REPORT_RE = re.compile(r"\x1b\[(\d+);(\d+)R")

_PROTOCOL_TO_ANSI = str.maketrans(
    {
        CURSOR_RIGHT: _ANSI_CURSOR_RIGHT,
        CURSOR_UP: _ANSI_CURSOR_UP,
    }
)


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for the display end of the serial link."""

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    def query_cursor_column(self) -> int: ...

    def set_color(self, color: TextColor) -> None: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Host terminal backed by ``sys.stdin``/``sys.stdout``.

    Output is written in the monitor's protocol: ``0x08`` moves left,
    ``0x09`` right, ``0x0A`` down and ``0x0B`` up. Raw mode disables output
    post-processing, so backspace and line feed already behave as relative
    motions; cursor-right and cursor-up are rewritten to CSI sequences.
    """

    def __init__(self) -> None:
        self._original_termios: list | None = None
        self._column = 0

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).lines
        except (ValueError, OSError):
            return 24

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Put stdin into raw mode, remembering the previous attributes."""
        fd = sys.stdin.fileno()
        self._original_termios = termios.tcgetattr(fd)
        tty.setraw(fd)

    def stop(self) -> None:
        """Restore the terminal attributes saved by :meth:`start`."""
        if self._original_termios is not None:
            termios.tcsetattr(
                sys.stdin.fileno(), termios.TCSADRAIN, self._original_termios
            )
            self._original_termios = None

    def __enter__(self) -> ProcessTerminal:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write protocol output, translated for an ANSI terminal."""
        self._raw_write(self._wrap_rows(data).translate(_PROTOCOL_TO_ANSI))

    def set_color(self, color: TextColor) -> None:
        self._raw_write(_ANSI_COLORS[color])

    def query_cursor_column(self) -> int:
        """Ask the terminal where the cursor is (Device Status Report).

        Returns 0 when the terminal does not answer within a short timeout.
        """
        self._raw_write(_ANSI_QUERY_CURSOR)
        fd = sys.stdin.fileno()
        response = ""
        while not response.endswith("R"):
            ready, _, _ = select.select([fd], [], [], 0.2)
            if not ready:
                logger.debug("No cursor position report from terminal")
                return 0
            chunk = os.read(fd, 1)
            if not chunk:
                return 0
            response += chunk.decode("latin-1")
        match = _CURSOR_REPORT_RE.search(response)
        if match is None:
            return 0
        self._column = int(match.group(2)) - 1
        return self._column

    # -- private ------------------------------------------------------------

    def _wrap_rows(self, data: str) -> str:
        """Add a CRLF wherever printed output fills the last column.

        Host terminals hold the cursor on the last column until the next
        character arrives; the protocol wraps to the next row at once.
        """
        columns = self.columns
        out = []
        for ch in data:
            out.append(ch)
            if ch == CURSOR_LEFT:
                self._column = max(0, self._column - 1)
            elif ch == CURSOR_RIGHT:
                self._column = min(columns - 1, self._column + 1)
            elif ch == CARRIAGE_RETURN:
                self._column = 0
            elif ch >= " ":
                self._column += 1
                if self._column >= columns:
                    out.append(CRLF)
                    self._column = 0
        return "".join(out)

    def _raw_write(self, data: str) -> None:
        """Write directly to stdout, bypassing buffering."""
        try:
            sys.stdout.write(data)
            sys.stdout.flush()
        except OSError:
            pass
