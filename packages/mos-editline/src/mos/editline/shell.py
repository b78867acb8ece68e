"""Monitor prompt and a small interactive shell around the line editor."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from mos.editline import keys
from mos.editline.commands import MOS_COMMANDS, CommandEntry
from mos.editline.completion import EXECUTABLE_DIRECTORIES, EXECUTABLE_EXTENSION
from mos.editline.editor import FLAG_CLEAR, FLAG_TAB, EditLineOptions, EditResult, LineEditor
from mos.editline.filesystem import LocalFilesystem
from mos.editline.hotkeys import hotkey_command
from mos.editline.line_buffer import DEFAULT_CAPACITY
from mos.editline.strings import ascii_upper
from mos.editline.terminal import CRLF

logger = logging.getLogger(__name__)

PROMPT_CHAR = "*"


def format_prompt(cwd: str) -> str:
    return f"{cwd} {PROMPT_CHAR}"


def monitor_input(
    editor: LineEditor,
    cwd: str,
    *,
    capacity: int = DEFAULT_CAPACITY,
    tab: bool = True,
) -> EditResult:
    """Print the prompt, edit one fresh line, then move to the next row."""
    prompt = format_prompt(cwd)
    terminal = editor.terminal
    terminal.set_color("primary")
    terminal.write(prompt)
    terminal.set_color("normal")
    flags = FLAG_CLEAR | (FLAG_TAB if tab else 0)
    result = editor.edit_line(
        options=EditLineOptions.from_flags(flags, capacity=capacity), prompt=prompt
    )
    terminal.write(CRLF)
    return result


class MonitorShell:
    """Reads commands at the monitor prompt and runs the few it knows.

    Understands ``HOTKEY``, ``CD``/``CDIR``, ``HELP`` and ``EXIT``. Other
    words are looked up as ``.bin`` executables, which are reported rather
    than run.
    """

    def __init__(
        self,
        editor: LineEditor,
        filesystem: LocalFilesystem,
        *,
        commands: Sequence[CommandEntry] = MOS_COMMANDS,
        capacity: int = DEFAULT_CAPACITY,
        tab: bool = True,
    ) -> None:
        self.editor = editor
        self.filesystem = filesystem
        self.commands = commands
        self.capacity = capacity
        self.tab = tab
        self.running = False
        self._handlers: dict[str, Callable[[str], str]] = {
            "CD": self._cmd_cd,
            "CDIR": self._cmd_cd,
            "EXIT": self._cmd_exit,
            "HELP": self._cmd_help,
            "HOTKEY": self._cmd_hotkey,
        }

    def run(self) -> None:
        """Loop until EXIT, or Escape on an empty line."""
        self.running = True
        while self.running:
            result = monitor_input(
                self.editor,
                self.filesystem.cwd,
                capacity=self.capacity,
                tab=self.tab,
            )
            if result.exit_key == keys.ESCAPE:
                if not result.text:
                    break
                continue
            output = self.execute(result.text)
            if output:
                self.editor.terminal.write(output)

    def execute(self, line: str) -> str:
        """Run one command line and return what it prints."""
        name, _, args = line.strip().partition(" ")
        if not name:
            return ""
        handler = self._handlers.get(ascii_upper(name))
        if handler is not None:
            logger.debug("Running %s %r", name, args)
            return handler(args)
        executable = self._find_executable(name)
        if executable is not None:
            return f"Would run {executable}{CRLF}"
        return f"Invalid command{CRLF}"

    def _find_executable(self, name: str) -> str | None:
        filename = name + EXECUTABLE_EXTENSION
        for directory in ("",) + tuple(d + "/" for d in EXECUTABLE_DIRECTORIES):
            for entry in self.filesystem.find(directory, filename):
                if not entry.is_directory:
                    return self.filesystem.resolve(directory + entry.name)
        return None

    # -- commands -----------------------------------------------------------

    def _cmd_cd(self, args: str) -> str:
        try:
            self.filesystem.chdir(args.strip() or "/")
        except NotADirectoryError:
            return f"Could not find path{CRLF}"
        return ""

    def _cmd_exit(self, args: str) -> str:
        self.running = False
        return ""

    def _cmd_help(self, args: str) -> str:
        names = [c.name for c in self.commands if c.has_help]
        return " ".join(names) + CRLF

    def _cmd_hotkey(self, args: str) -> str:
        return hotkey_command(self.editor.hotkeys, args)
