"""Capacity-bounded line buffer and the cursor engine that mirrors it remotely.

The far end of the serial link cannot be asked where its cursor is while an
edit is in progress, and offers no absolute positioning: only one-cell
relative motions. ``LineEngine`` therefore keeps its own idea of the remote
cursor column, updated alongside every byte it sends, and computes the exact
compensating motions after each edit.
"""

from __future__ import annotations

import logging

from mos.editline.strings import is_single_byte, strbuf_insert
from mos.editline.terminal import (
    BELL,
    CARRIAGE_RETURN,
    CURSOR_DOWN,
    CURSOR_LEFT,
    CURSOR_RIGHT,
    CURSOR_UP,
    Terminal,
)

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 256


class LineBuffer:
    """Fixed-capacity character sequence.

    Holds at most ``capacity - 1`` characters (one cell is reserved for the
    terminator on the wire side). All mutation goes through bounds-checked
    methods.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, text: str = "") -> None:
        if capacity < 2:
            raise ValueError(f"capacity must be at least 2, got {capacity}")
        self._capacity = capacity
        self._chars: list[str] = []
        if text:
            self.set_text(text)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def text(self) -> str:
        return "".join(self._chars)

    @property
    def is_full(self) -> bool:
        return len(self._chars) >= self._capacity - 1

    def __len__(self) -> int:
        return len(self._chars)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"LineBuffer(capacity={self._capacity}, text={self.text!r})"

    def char_at(self, index: int) -> str:
        if not 0 <= index < len(self._chars):
            raise IndexError(f"index {index} outside line of length {len(self)}")
        return self._chars[index]

    def slice(self, start: int, end: int | None = None) -> str:
        return "".join(self._chars[start:end])

    def insert_at(self, index: int, ch: str) -> bool:
        """Insert a single character; False if the buffer is full."""
        if len(ch) != 1:
            raise ValueError("insert_at takes exactly one character")
        if not 0 <= index <= len(self._chars):
            raise IndexError(f"index {index} outside line of length {len(self)}")
        if self.is_full:
            return False
        self._chars.insert(index, ch)
        return True

    def remove_at(self, index: int) -> str:
        if not 0 <= index < len(self._chars):
            raise IndexError(f"index {index} outside line of length {len(self)}")
        return self._chars.pop(index)

    def insert_text(self, index: int, text: str) -> int:
        """Insert *text* at *index*, truncating to fit. Returns chars inserted."""
        if not 0 <= index <= len(self._chars):
            raise IndexError(f"index {index} outside line of length {len(self)}")
        if not is_single_byte(text):
            raise ValueError("line text must be single-byte characters")
        new_text, inserted = strbuf_insert(self.text, self._capacity, text, index)
        self._chars = list(new_text)
        return inserted

    def set_text(self, text: str) -> None:
        """Replace the contents, keeping at most ``capacity - 1`` characters."""
        if not is_single_byte(text):
            raise ValueError("line text must be single-byte characters")
        self._chars = list(text[: self._capacity - 1])

    def clear(self) -> None:
        self._chars.clear()


class LineEngine:
    """Edits a ``LineBuffer`` and keeps a remote terminal in step with it.

    ``pos`` is the insert position within the buffer; ``column`` is where the
    engine believes the remote cursor sits on its current row. Rows are only
    ever reached by counting columns traversed.
    """

    def __init__(
        self,
        terminal: Terminal,
        buffer: LineBuffer,
        *,
        columns: int,
        column: int = 0,
    ) -> None:
        if columns < 1:
            raise ValueError(f"terminal width must be positive, got {columns}")
        self.terminal = terminal
        self.buffer = buffer
        self.columns = columns
        self.column = column % columns
        self.row = 0
        self.pos = 0

    @property
    def length(self) -> int:
        return len(self.buffer)

    @property
    def text(self) -> str:
        return self.buffer.text

    # -- output and tracking ------------------------------------------------

    def emit(self, text: str) -> None:
        """Print characters that advance the cursor one cell each."""
        if not text:
            return
        self.terminal.write(text)
        self._advance(len(text))

    def carriage_return(self) -> None:
        self.terminal.write(CARRIAGE_RETURN)
        self.column = 0

    def newline(self) -> None:
        """Move to the start of a fresh row."""
        self.terminal.write("\r\n")
        self.column = 0
        self.row += 1

    def bell(self) -> None:
        self.terminal.write(BELL)

    def _advance(self, cells: int) -> None:
        total = self.column + cells
        self.row += total // self.columns
        self.column = total % self.columns

    # -- cursor primitives --------------------------------------------------

    def left(self) -> None:
        """Move the remote cursor one cell back, wrapping to the row above."""
        if self.column > 0:
            self.terminal.write(CURSOR_LEFT)
            self.column -= 1
        else:
            self.terminal.write(CURSOR_RIGHT * (self.columns - 1) + CURSOR_UP)
            self.column = self.columns - 1
            self.row -= 1

    def right(self) -> None:
        """Move the remote cursor one cell on, wrapping to the row below."""
        if self.column < self.columns - 1:
            self.terminal.write(CURSOR_RIGHT)
            self.column += 1
        else:
            self.terminal.write(CURSOR_LEFT * (self.columns - 1) + CURSOR_DOWN)
            self.column = 0
            self.row += 1

    def _left_by(self, count: int) -> None:
        for _ in range(count):
            self.left()

    # -- editing ------------------------------------------------------------

    def cursor_left(self) -> bool:
        if self.pos == 0:
            return False
        self.left()
        self.pos -= 1
        return True

    def cursor_right(self) -> bool:
        if self.pos >= self.length:
            return False
        self.right()
        self.pos += 1
        return True

    def insert(self, ch: str) -> bool:
        """Insert *ch* at the cursor and repaint the shifted tail.

        A full buffer is left untouched and False returned.
        """
        if not self.buffer.insert_at(self.pos, ch):
            return False
        tail = self.buffer.slice(self.pos)
        self.emit(tail)
        self._left_by(len(tail) - 1)
        self.pos += 1
        return True

    def delete(self) -> bool:
        """Remove the character before the cursor (backspace)."""
        if self.pos == 0:
            return False
        self.left()
        self.pos -= 1
        self.buffer.remove_at(self.pos)
        tail = self.buffer.slice(self.pos) + " "
        self.emit(tail)
        self._left_by(len(tail))
        return True

    def delete_word(self) -> int:
        """Delete trailing spaces, then one word, before the cursor."""
        deleted = 0
        while self.pos > 0 and self.buffer.char_at(self.pos - 1) == " ":
            self.delete()
            deleted += 1
        while self.pos > 0 and self.buffer.char_at(self.pos - 1) != " ":
            self.delete()
            deleted += 1
        return deleted

    def goto_start(self) -> None:
        while self.pos > 0:
            self.left()
            self.pos -= 1

    def goto_end(self) -> None:
        while self.pos < self.length:
            self.right()
            self.pos += 1

    def remove_line(self) -> None:
        """Blank the visible line and empty the buffer."""
        length = self.length
        self.goto_start()
        self.emit(" " * length)
        self.buffer.clear()
        self._left_by(length)

    def show(self) -> None:
        """Print the whole buffer from an empty line and park the cursor at its end."""
        self.emit(self.text)
        self.pos = self.length

    def replace_line(self, text: str) -> None:
        """Repaint the line with *text*, cursor at the end."""
        self.remove_line()
        self.buffer.set_text(text)
        self.show()

    def insert_text(self, text: str) -> int:
        """Bulk insert at the cursor, repainting any tail after it."""
        at_eol = self.pos == self.length
        inserted = self.buffer.insert_text(self.pos, text)
        self.emit(text[:inserted])
        self.pos += inserted
        if not at_eol:
            tail = self.buffer.slice(self.pos)
            self.emit(tail)
            self._left_by(len(tail))
        return inserted

    def redraw(self, prompt: str = "") -> None:
        """Repaint prompt and line on the current row, cursor at ``pos``."""
        self.carriage_return()
        if prompt:
            self.terminal.set_color("primary")
            self.emit(prompt)
            self.terminal.set_color("normal")
        self.emit(self.text)
        self._left_by(self.length - self.pos)

    def finish(self) -> None:
        """Advance past the end of the line so the caller's output starts clean."""
        remaining = self.length - self.pos
        while remaining >= self.columns:
            self.terminal.write(CURSOR_DOWN)
            self.row += 1
            remaining -= self.columns
        for _ in range(remaining):
            self.right()
        self.pos = self.length
