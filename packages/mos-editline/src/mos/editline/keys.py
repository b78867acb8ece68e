"""Keyboard events for the line editor.

A key-down event carries an ASCII code (0 for keys without one) and a
virtual-key identity for the keys the editor treats specially. The
``ProcessKeyboard`` adapter decodes legacy xterm escape sequences read from
stdin into these events, using the same ASCII codes the monitor's own
keyboard produces for the arrow keys.
"""

from __future__ import annotations

import enum
import os
import select
import sys
from dataclasses import dataclass
from typing import Protocol

# ---------------------------------------------------------------------------
# ASCII codes the editor dispatches on
# ---------------------------------------------------------------------------

CTRL_A = 0x01
CTRL_B = 0x02
CTRL_E = 0x05
CTRL_F = 0x06
BACKSPACE = 0x08
TAB = 0x09
LINE_FEED = 0x0A
VERTICAL_TAB = 0x0B
ENTER = 0x0D
CTRL_N = 0x0E
CTRL_P = 0x10
CTRL_U = 0x15
CTRL_W = 0x17
ESCAPE = 0x1B
DELETE = 0x7F


class VirtualKey(enum.IntEnum):
    """Non-printable key identities."""

    NONE = 0
    LEFT = enum.auto()
    RIGHT = enum.auto()
    UP = enum.auto()
    DOWN = enum.auto()
    HOME = enum.auto()
    END = enum.auto()
    PAGE_UP = enum.auto()
    PAGE_DOWN = enum.auto()
    INSERT = enum.auto()
    DELETE = enum.auto()
    F1 = enum.auto()
    F2 = enum.auto()
    F3 = enum.auto()
    F4 = enum.auto()
    F5 = enum.auto()
    F6 = enum.auto()
    F7 = enum.auto()
    F8 = enum.auto()
    F9 = enum.auto()
    F10 = enum.auto()
    F11 = enum.auto()
    F12 = enum.auto()

    @property
    def function_index(self) -> int | None:
        """0-based slot for F1-F12, otherwise None."""
        if VirtualKey.F1 <= self <= VirtualKey.F12:
            return self - VirtualKey.F1
        return None


@dataclass(frozen=True)
class KeyEvent:
    """A single key-down event."""

    ascii: int = 0
    vkey: VirtualKey = VirtualKey.NONE

    @classmethod
    def char(cls, ch: str) -> KeyEvent:
        return cls(ascii=ord(ch))

    @classmethod
    def function(cls, number: int) -> KeyEvent:
        """Event for function key F<number> (1-12)."""
        return cls(vkey=VirtualKey(VirtualKey.F1 + number - 1))


class KeyboardSource(Protocol):
    """Blocking source of key-down events."""

    def wait_keydown(self) -> KeyEvent: ...


# ---------------------------------------------------------------------------
# Legacy terminal sequences
# ---------------------------------------------------------------------------

# Arrows carry the ASCII codes the monitor's keyboard sends alongside them.
LEGACY_KEY_SEQUENCES: dict[str, KeyEvent] = {
    "\x1b[A": KeyEvent(VERTICAL_TAB, VirtualKey.UP),
    "\x1b[B": KeyEvent(LINE_FEED, VirtualKey.DOWN),
    "\x1b[C": KeyEvent(CTRL_U, VirtualKey.RIGHT),
    "\x1b[D": KeyEvent(BACKSPACE, VirtualKey.LEFT),
    "\x1bOA": KeyEvent(VERTICAL_TAB, VirtualKey.UP),
    "\x1bOB": KeyEvent(LINE_FEED, VirtualKey.DOWN),
    "\x1bOC": KeyEvent(CTRL_U, VirtualKey.RIGHT),
    "\x1bOD": KeyEvent(BACKSPACE, VirtualKey.LEFT),
    "\x1b[H": KeyEvent(vkey=VirtualKey.HOME),
    "\x1b[F": KeyEvent(vkey=VirtualKey.END),
    "\x1bOH": KeyEvent(vkey=VirtualKey.HOME),
    "\x1bOF": KeyEvent(vkey=VirtualKey.END),
    "\x1b[1~": KeyEvent(vkey=VirtualKey.HOME),
    "\x1b[4~": KeyEvent(vkey=VirtualKey.END),
    "\x1b[7~": KeyEvent(vkey=VirtualKey.HOME),
    "\x1b[8~": KeyEvent(vkey=VirtualKey.END),
    "\x1b[2~": KeyEvent(vkey=VirtualKey.INSERT),
    "\x1b[3~": KeyEvent(vkey=VirtualKey.DELETE),
    "\x1b[5~": KeyEvent(vkey=VirtualKey.PAGE_UP),
    "\x1b[6~": KeyEvent(vkey=VirtualKey.PAGE_DOWN),
    "\x1bOP": KeyEvent.function(1),
    "\x1bOQ": KeyEvent.function(2),
    "\x1bOR": KeyEvent.function(3),
    "\x1bOS": KeyEvent.function(4),
    "\x1b[11~": KeyEvent.function(1),
    "\x1b[12~": KeyEvent.function(2),
    "\x1b[13~": KeyEvent.function(3),
    "\x1b[14~": KeyEvent.function(4),
    "\x1b[15~": KeyEvent.function(5),
    "\x1b[17~": KeyEvent.function(6),
    "\x1b[18~": KeyEvent.function(7),
    "\x1b[19~": KeyEvent.function(8),
    "\x1b[20~": KeyEvent.function(9),
    "\x1b[21~": KeyEvent.function(10),
    "\x1b[23~": KeyEvent.function(11),
    "\x1b[24~": KeyEvent.function(12),
}


def is_complete_sequence(data: str) -> bool:
    """Check whether *data* (starting with ESC) is a finished sequence."""
    if len(data) < 2:
        return False
    if data[1] == "[":
        return len(data) >= 3 and 0x40 <= ord(data[-1]) <= 0x7E
    if data[1] == "O":
        return len(data) >= 3
    return True


def parse_key(data: str) -> KeyEvent | None:
    """Decode one raw input unit into a key event.

    Returns None for escape sequences the editor has no use for.
    """
    if not data:
        return None
    if data.startswith("\x1b") and len(data) > 1:
        return LEGACY_KEY_SEQUENCES.get(data)
    code = ord(data[0])
    if code == DELETE:
        # Host terminals send DEL for the backspace key.
        return KeyEvent(DELETE)
    if code == LINE_FEED:
        # Raw mode delivers Ctrl-J as LF, which the editor treats as "down".
        return KeyEvent(LINE_FEED)
    return KeyEvent(code)


# ---------------------------------------------------------------------------
# ProcessKeyboard implementation
# ---------------------------------------------------------------------------


class ProcessKeyboard:
    """Reads key-down events from ``sys.stdin`` (expected in raw mode).

    A lone ESC is reported as the Escape key when no further bytes arrive
    within *escape_timeout* seconds.
    """

    def __init__(self, escape_timeout: float = 0.05) -> None:
        self._escape_timeout = escape_timeout
        self._pending = ""

    def wait_keydown(self) -> KeyEvent:
        while True:
            unit = self._read_unit()
            event = parse_key(unit)
            if event is not None:
                return event

    def _read_unit(self) -> str:
        first = self._read_char(None)
        if first != "\x1b":
            return first
        data = first
        while not is_complete_sequence(data):
            ch = self._read_char(self._escape_timeout)
            if ch == "":
                break
            data += ch
        return data

    def _read_char(self, timeout: float | None) -> str:
        if self._pending:
            ch, self._pending = self._pending[0], self._pending[1:]
            return ch
        fd = sys.stdin.fileno()
        if timeout is not None:
            ready, _, _ = select.select([fd], [], [], timeout)
            if not ready:
                return ""
        raw = os.read(fd, 64)
        if not raw:
            raise EOFError("keyboard input closed")
        text = raw.decode("latin-1")
        self._pending += text[1:]
        return text[0]
