"""Bounded command history with up/down navigation."""

from __future__ import annotations

import logging

from mos.editline.line_buffer import LineEngine

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_DEPTH = 16


class HistoryRing:
    """Ordered log of previously submitted lines, oldest first.

    Holds at most *depth* entries; pushing onto a full ring evicts the oldest.
    ``index`` is the navigation position: ``index == size`` is the live,
    not-yet-submitted line.
    """

    def __init__(self, depth: int = DEFAULT_HISTORY_DEPTH) -> None:
        if depth < 1:
            raise ValueError(f"history depth must be at least 1, got {depth}")
        self._depth = depth
        self._entries: list[str] = []
        self.index = 0

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def size(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def reset_navigation(self) -> None:
        """Point navigation at the live line (start of every edit session)."""
        self.index = len(self._entries)

    def push(self, line: str) -> None:
        """Record a submitted line.

        Empty lines and repeats of the most recent entry are ignored.
        """
        if not line:
            return
        if self._entries and self._entries[-1] == line:
            return
        if len(self._entries) == self._depth:
            evicted = self._entries.pop(0)
            logger.debug("History full, evicted %r", evicted)
        self._entries.append(line)
        logger.debug("History push %r (%d/%d)", line, len(self._entries), self._depth)

    def up(self, engine: LineEngine) -> bool:
        """Show the previous entry.

        At the top of the list the oldest entry is shown again, so an edited
        copy of it can be restored.
        """
        if self.index > 0:
            target = self.index - 1
        elif self._entries:
            target = 0
        else:
            return False
        return self._show(engine, target)

    def down(self, engine: LineEngine) -> bool:
        """Show the next entry, or an empty live line past the newest one."""
        if self.index >= len(self._entries):
            return False
        if self.index == len(self._entries) - 1:
            engine.remove_line()
            self.index = len(self._entries)
            return True
        return self._show(engine, self.index + 1)

    def _show(self, engine: LineEngine, index: int) -> bool:
        if not 0 <= index < len(self._entries):
            return False
        engine.replace_line(self._entries[index])
        self.index = index
        return True
