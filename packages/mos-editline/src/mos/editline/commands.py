"""The monitor's internal command table, as seen by tab completion."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CommandEntry:
    """An internal command name and whether it has help text."""

    name: str
    has_help: bool = True


# Iterated in order; the order is also the order of HELP output.
MOS_COMMANDS: tuple[CommandEntry, ...] = (
    CommandEntry("CAT"),
    CommandEntry("CD"),
    CommandEntry("CDIR"),
    CommandEntry("CLS"),
    CommandEntry("COPY"),
    CommandEntry("CP"),
    CommandEntry("CREDITS"),
    CommandEntry("DELETE"),
    CommandEntry("DIR"),
    CommandEntry("DISC", has_help=False),
    CommandEntry("ECHO"),
    CommandEntry("ERASE"),
    CommandEntry("EXEC"),
    CommandEntry("FBMODE"),
    CommandEntry("HELP"),
    CommandEntry("JMP"),
    CommandEntry("LOAD"),
    CommandEntry("LS"),
    CommandEntry("HOTKEY"),
    CommandEntry("MEM"),
    CommandEntry("MEMDUMP"),
    CommandEntry("MKDIR"),
    CommandEntry("MOUNT"),
    CommandEntry("MOVE"),
    CommandEntry("MV"),
    CommandEntry("PRINTF"),
    CommandEntry("RENAME"),
    CommandEntry("RM"),
    CommandEntry("RUN"),
    CommandEntry("SAVE"),
    CommandEntry("SIDELOAD", has_help=False),
    CommandEntry("SET"),
    CommandEntry("TIME"),
    CommandEntry("TYPE"),
    CommandEntry("VDU"),
)
