"""Function-key macros (F1-F12) and the HOTKEY command that edits them.

A macro may contain one ``%s`` marker. Pressing its key builds
``prefix + current line + suffix``; a macro without the marker replaces the
line outright.
"""

from __future__ import annotations

import logging

from mos.editline.errors import HotkeyError
from mos.editline.line_buffer import LineEngine
from mos.editline.strings import is_single_byte

logger = logging.getLogger(__name__)

HOTKEY_COUNT = 12
PLACEHOLDER = "%s"
MAX_MACRO_LENGTH = 256


class HotkeyTable:
    """Twelve optional macro strings, slot 0 bound to F1."""

    def __init__(self) -> None:
        self._slots: list[str | None] = [None] * HOTKEY_COUNT

    def __len__(self) -> int:
        return HOTKEY_COUNT

    def get(self, slot: int) -> str | None:
        self._check_slot(slot)
        return self._slots[slot]

    def set(self, slot: int, macro: str) -> None:
        """Assign *macro* to *slot*, replacing any previous one."""
        self._check_slot(slot)
        if not macro:
            raise HotkeyError("hotkey macro must not be empty")
        if not is_single_byte(macro):
            raise HotkeyError("hotkey macro must be single-byte characters")
        self._slots[slot] = macro[:MAX_MACRO_LENGTH]

    def clear(self, slot: int) -> bool:
        """Empty *slot*. Returns whether it held a macro."""
        self._check_slot(slot)
        had_macro = self._slots[slot] is not None
        self._slots[slot] = None
        return had_macro

    def drop(self) -> None:
        self._slots = [None] * HOTKEY_COUNT

    def expand(self, slot: int, engine: LineEngine) -> bool:
        """Apply the macro in *slot* to the line being edited.

        Returns False, leaving the line untouched, when the slot is empty,
        when the substituted line would not fit (after sounding the bell), or
        when the substituted line cannot be built.
        """
        macro = self.get(slot)
        if macro is None:
            return False

        marker = macro.find(PLACEHOLDER)
        if marker == -1:
            logger.debug("F%d replaces line with %r", slot + 1, macro)
            engine.replace_line(macro)
            return True

        prefix = macro[:marker]
        suffix = macro[marker + len(PLACEHOLDER) :]
        if len(prefix) + engine.length + len(suffix) + 1 >= engine.buffer.capacity:
            logger.warning("F%d expansion exceeds line capacity", slot + 1)
            engine.bell()
            return False

        try:
            result = _substitute(prefix, engine.text, suffix)
        except MemoryError:
            logger.warning("F%d expansion could not be allocated", slot + 1)
            return False

        logger.debug("F%d expands line to %r", slot + 1, result)
        engine.replace_line(result)
        return True

    def _check_slot(self, slot: int) -> None:
        if not 0 <= slot < HOTKEY_COUNT:
            raise HotkeyError(f"hotkey slot must be 0-{HOTKEY_COUNT - 1}, got {slot}")


def _substitute(prefix: str, line: str, suffix: str) -> str:
    return "".join((prefix, line, suffix))


def _list_assignments(table: HotkeyTable) -> str:
    lines = ["Hotkey assignments:", ""]
    for slot in range(HOTKEY_COUNT):
        macro = table.get(slot)
        lines.append(f"F{slot + 1}: {'N/A' if macro is None else macro}")
    lines.append("")
    return "\r\n".join(lines) + "\r\n"


def hotkey_command(table: HotkeyTable, args: str) -> str:
    """Run ``HOTKEY [<n> [<command string>]]`` and return its console output.

    Without a key number the assignments are listed. A key number alone clears
    that key. The command string may be wrapped in double quotes.
    """
    args = args.strip()
    if not args:
        return _list_assignments(table)

    number_text, _, rest = args.partition(" ")
    try:
        number = int(number_text, 0)
    except ValueError:
        return _list_assignments(table)
    if not 1 <= number <= HOTKEY_COUNT:
        return "Invalid FN-key number.\r\n"

    rest = rest.lstrip(" ")
    if not rest:
        if table.clear(number - 1):
            return f"F{number} cleared.\r\n"
        return f"F{number} already clear, no hotkey command provided.\r\n"

    if len(rest) >= 2 and rest.startswith('"') and rest.endswith('"'):
        rest = rest[1:-1]
    if not rest:
        # A quoted empty string is treated like clearing the key.
        table.clear(number - 1)
        return f"F{number} cleared.\r\n"
    table.set(number - 1, rest)
    return ""
