"""mos-editline: the monitor's interactive line editor."""

# Completion
from mos.editline.commands import MOS_COMMANDS, CommandEntry
from mos.editline.completion import (
    Candidate,
    CandidateKind,
    Classification,
    CommandNameProvider,
    CompletionContext,
    CompletionProvider,
    ExecutableProvider,
    PathArgumentProvider,
    TabCompleter,
    classify,
)

# Session loop
from mos.editline.editor import EditLineOptions, EditResult, EditSession, LineEditor
from mos.editline.errors import EditLineError, HotkeyError
from mos.editline.filesystem import DirEntry, Filesystem, LocalFilesystem

# History and hotkeys
from mos.editline.history import HistoryRing
from mos.editline.hotkeys import HotkeyTable, hotkey_command

# Keyboard input
from mos.editline.keys import KeyboardSource, KeyEvent, ProcessKeyboard, VirtualKey, parse_key

# Line buffer and cursor engine
from mos.editline.line_buffer import LineBuffer, LineEngine
from mos.editline.shell import MonitorShell, monitor_input

# Terminal interface and implementations
from mos.editline.terminal import ProcessTerminal, Terminal

__all__ = [
    # Commands
    "MOS_COMMANDS",
    "CommandEntry",
    # Completion
    "Candidate",
    "CandidateKind",
    "Classification",
    "CommandNameProvider",
    "CompletionContext",
    "CompletionProvider",
    "ExecutableProvider",
    "PathArgumentProvider",
    "TabCompleter",
    "classify",
    # Session loop
    "EditLineOptions",
    "EditResult",
    "EditSession",
    "LineEditor",
    # Errors
    "EditLineError",
    "HotkeyError",
    # Filesystem
    "DirEntry",
    "Filesystem",
    "LocalFilesystem",
    # History and hotkeys
    "HistoryRing",
    "HotkeyTable",
    "hotkey_command",
    # Keys
    "KeyboardSource",
    "KeyEvent",
    "ProcessKeyboard",
    "VirtualKey",
    "parse_key",
    # Line buffer
    "LineBuffer",
    "LineEngine",
    # Shell
    "MonitorShell",
    "monitor_input",
    # Terminal
    "ProcessTerminal",
    "Terminal",
]
