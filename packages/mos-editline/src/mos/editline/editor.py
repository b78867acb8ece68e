"""The line editor's session loop.

``LineEditor`` owns the long-lived pieces (terminal, keyboard, history,
hotkeys, completer). Each call to :meth:`LineEditor.edit_line` runs one
``EditSession`` until Enter or Escape, routing key events to the cursor
engine and to the history, hotkey and completion features, all of which
change the line only through the engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from mos.editline import keys
from mos.editline.completion import DEFAULT_CANDIDATE_LIMIT, TabCompleter
from mos.editline.history import HistoryRing
from mos.editline.hotkeys import HotkeyTable
from mos.editline.keys import KeyboardSource, KeyEvent, VirtualKey
from mos.editline.line_buffer import DEFAULT_CAPACITY, LineBuffer, LineEngine
from mos.editline.strings import is_single_byte
from mos.editline.terminal import Terminal

logger = logging.getLogger(__name__)

# Bits of the integer flag word accepted by ``EditLineOptions.from_flags``.
FLAG_CLEAR = 0x01
FLAG_TAB = 0x02
FLAG_NO_HOTKEYS = 0x04
FLAG_NO_HISTORY = 0x08


class EditLineOptions(BaseModel):
    """Per-session parameters.

    Defaults: clear on entry, tab completion off, hotkeys on, history on.
    """

    model_config = ConfigDict(frozen=True)

    capacity: int = Field(default=DEFAULT_CAPACITY, ge=2)
    clear: bool = True
    tab: bool = False
    hotkeys: bool = True
    history: bool = True
    candidate_limit: int = Field(default=DEFAULT_CANDIDATE_LIMIT, ge=0)

    @classmethod
    def from_flags(cls, flags: int, *, capacity: int = DEFAULT_CAPACITY) -> EditLineOptions:
        """Build options from the monitor's editline flag word."""
        return cls(
            capacity=capacity,
            clear=bool(flags & FLAG_CLEAR),
            tab=bool(flags & FLAG_TAB),
            hotkeys=not (flags & FLAG_NO_HOTKEYS),
            history=not (flags & FLAG_NO_HISTORY),
        )


@dataclass(frozen=True)
class EditResult:
    """Outcome of an edit: the key that ended it and the final line."""

    exit_key: int
    text: str

    @property
    def accepted(self) -> bool:
        return self.exit_key == keys.ENTER


class EditSession:
    """One line being edited: buffer, insert position and terminal width."""

    def __init__(self, engine: LineEngine) -> None:
        self.engine = engine
        self.exit_key: int | None = None

    @property
    def finished(self) -> bool:
        return self.exit_key is not None

    @property
    def text(self) -> str:
        return self.engine.text

    @property
    def insert_position(self) -> int:
        return self.engine.pos

    @property
    def terminal_width(self) -> int:
        return self.engine.columns


class LineEditor:
    """Reads edited lines from a keyboard, echoing to a terminal."""

    def __init__(
        self,
        terminal: Terminal,
        keyboard: KeyboardSource,
        *,
        history: HistoryRing | None = None,
        hotkeys: HotkeyTable | None = None,
        completer: TabCompleter | None = None,
    ) -> None:
        self.terminal = terminal
        self.keyboard = keyboard
        self.history = history if history is not None else HistoryRing()
        self.hotkeys = hotkeys if hotkeys is not None else HotkeyTable()
        self.completer = completer
        self.prompt = ""

    def edit_line(
        self,
        text: str = "",
        options: EditLineOptions | None = None,
        *,
        prompt: str = "",
    ) -> EditResult:
        """Edit a line until Enter or Escape.

        *text* is the initial contents, shown and kept unless
        ``options.clear`` is set. *prompt* is what the caller has already
        printed on this row; it is repainted after a completion listing.
        """
        options = options or EditLineOptions()
        if not is_single_byte(text):
            raise ValueError("initial text must be single-byte characters")
        if len(text) >= options.capacity:
            raise ValueError(
                f"initial text of {len(text)} characters does not fit capacity {options.capacity}"
            )

        self.prompt = prompt
        engine = LineEngine(
            self.terminal,
            LineBuffer(options.capacity),
            columns=self.terminal.columns,
            column=self.terminal.query_cursor_column(),
        )
        session = EditSession(engine)

        if not options.clear and text:
            engine.buffer.set_text(text)
            engine.show()

        self.history.reset_navigation()
        if self.completer is not None:
            self.completer.disarm()
            self.completer.candidate_limit = options.candidate_limit

        while not session.finished:
            event = self.keyboard.wait_keydown()
            self._handle_key(session, event, options)

        engine.finish()
        logger.debug("Edit finished with key 0x%02x: %r", session.exit_key, engine.text)
        return EditResult(exit_key=session.exit_key, text=engine.text)

    # -- dispatch -----------------------------------------------------------

    def _handle_key(
        self, session: EditSession, event: KeyEvent, options: EditLineOptions
    ) -> None:
        engine = session.engine
        key = event.ascii

        if key != keys.TAB and self.completer is not None:
            self.completer.disarm()

        vkey = event.vkey
        if vkey == VirtualKey.HOME:
            engine.goto_start()
            return
        if vkey == VirtualKey.END:
            engine.goto_end()
            return
        if vkey == VirtualKey.PAGE_UP:
            self._history_up(engine, options)
            return
        if vkey == VirtualKey.PAGE_DOWN:
            self._history_down(engine, options)
            return
        if vkey == VirtualKey.LEFT:
            engine.cursor_left()
            return
        if vkey == VirtualKey.RIGHT:
            engine.cursor_right()
            return
        slot = vkey.function_index
        if slot is not None:
            if not (options.hotkeys and self.hotkeys.expand(slot, engine)):
                return
            # The expanded line is submitted as if Enter had been pressed.
            key = keys.ENTER

        if key == 0:
            return
        if key >= 0x20 and key != keys.DELETE:
            engine.insert(chr(key))
            return

        if key == keys.CTRL_A:
            engine.goto_start()
        elif key == keys.CTRL_B:
            engine.cursor_left()
        elif key == keys.CTRL_E:
            engine.goto_end()
        elif key in (keys.CTRL_F, keys.CTRL_U):
            engine.cursor_right()
        elif key == keys.TAB:
            if options.tab and self.completer is not None:
                self.completer.complete(engine, prompt=self.prompt)
        elif key in (keys.LINE_FEED, keys.CTRL_N):
            self._history_down(engine, options)
        elif key in (keys.VERTICAL_TAB, keys.CTRL_P):
            self._history_up(engine, options)
        elif key == keys.ENTER:
            if options.history:
                self.history.push(engine.text)
            session.exit_key = key
        elif key == keys.CTRL_W:
            engine.delete_word()
        elif key == keys.ESCAPE:
            session.exit_key = key
        elif key in (keys.BACKSPACE, keys.DELETE):
            engine.delete()

    def _history_up(self, engine: LineEngine, options: EditLineOptions) -> None:
        if options.history:
            self.history.up(engine)

    def _history_down(self, engine: LineEngine, options: EditLineOptions) -> None:
        if options.history:
            self.history.down(engine)
