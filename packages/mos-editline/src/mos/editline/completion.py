"""Tab completion for the monitor command line.

Completes internal command and executable names at the start of a line, and
file-system paths for arguments. Every candidate narrows a case-insensitive
common prefix; a Tab that adds nothing to an ambiguous prefix arms the
"show all" listing, which the next Tab prints.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Protocol, Sequence

from mos.editline.commands import MOS_COMMANDS, CommandEntry
from mos.editline.filesystem import Filesystem
from mos.editline.line_buffer import LineEngine
from mos.editline.strings import (
    ascii_upper,
    common_prefix_ci,
    is_single_byte,
    rfind_pathsep,
    startswith_ci,
    strbuf_append,
)

logger = logging.getLogger(__name__)

# Size of the scratch area the common prefix is accumulated in.
PREFIX_SCRATCH_SIZE = 128
SEARCH_TERM_SIZE = 128
PATH_SEARCH_SIZE = 256
EXECUTABLE_EXTENSION = ".bin"
EXECUTABLE_DIRECTORIES = ("/mos", "/bin")
DEFAULT_CANDIDATE_LIMIT = 64


class Classification(enum.Enum):
    """What the word before the cursor is."""

    COMMAND = "command"
    ARGUMENT = "argument"


class CandidateKind(enum.IntEnum):
    DIRECTORY = 0
    NORMAL = 1


@dataclass(frozen=True)
class Candidate:
    """A retained match, kept only for the "show all" listing."""

    kind: CandidateKind
    full_text: str
    insertion: str


def classify(line: str, pos: int) -> Classification:
    """Decide between command-name and path completion.

    A line whose first non-space character is ``.`` or ``/``, or that has a
    space before the cursor, completes a path argument.
    """
    first = line.lstrip(" ")[:1]
    if first in (".", "/") or " " in line[:pos]:
        return Classification.ARGUMENT
    return Classification.COMMAND


class CompletionContext:
    """State for a single Tab press.

    Use as a context manager: retained candidate text is released on exit,
    whichever way the block is left.
    """

    def __init__(
        self,
        line: str,
        pos: int,
        *,
        classification: Classification,
        show_all: bool = False,
        candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
        on_unbuffered: Callable[[str], None] | None = None,
    ) -> None:
        self.line = line
        self.pos = pos
        self.classification = classification
        self.show_all = show_all
        self.candidate_limit = candidate_limit
        self.candidates: list[Candidate] = []
        self.common_prefix = ""
        self.match_count = 0
        self._on_unbuffered = on_unbuffered

    def __enter__(self) -> CompletionContext:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.candidates.clear()

    @property
    def typed(self) -> str:
        """The text before the cursor."""
        return self.line[: self.pos]

    def add(self, kind: CandidateKind, full_text: str, insertion: str) -> None:
        """Record one match: *full_text* is its name, *insertion* what it adds."""
        if not is_single_byte(full_text):
            # The line cannot hold it, so it is not offered at all.
            logger.debug("Skipping candidate %r outside the single-byte range", full_text)
            return
        if self.show_all:
            self._retain(Candidate(kind, full_text, insertion))

        if self.match_count == 0:
            self.common_prefix = insertion[: PREFIX_SCRATCH_SIZE - 1]
        else:
            self.common_prefix = common_prefix_ci(self.common_prefix, insertion)
        self.match_count += 1

    def sorted_candidates(self) -> list[Candidate]:
        """Directories first, then case-insensitive by name."""
        return sorted(
            self.candidates,
            key=lambda c: (c.kind, ascii_upper(c.full_text)),
        )

    def _retain(self, candidate: Candidate) -> None:
        if len(self.candidates) < self.candidate_limit:
            try:
                self.candidates.append(candidate)
                return
            except MemoryError:
                pass
        logger.warning("Completion candidate %r not retained", candidate.full_text)
        if self._on_unbuffered is not None:
            self._on_unbuffered(candidate.full_text + " ")


class CompletionProvider(Protocol):
    """Contributes matches for the word before the cursor."""

    def collect(self, ctx: CompletionContext) -> None: ...


class CommandNameProvider:
    """Matches internal command names."""

    def __init__(self, commands: Sequence[CommandEntry] = MOS_COMMANDS) -> None:
        self._commands = commands

    def collect(self, ctx: CompletionContext) -> None:
        typed = ctx.typed
        for command in self._commands:
            if startswith_ci(command.name, typed):
                ctx.add(CandidateKind.NORMAL, command.name, command.name[len(typed) :])


class ExecutableProvider:
    """Matches ``.bin`` executables in the current and well-known directories."""

    def __init__(
        self,
        filesystem: Filesystem,
        *,
        extension: str = EXECUTABLE_EXTENSION,
        directories: Sequence[str] = EXECUTABLE_DIRECTORIES,
    ) -> None:
        self._fs = filesystem
        self._extension = extension
        self._directories = directories

    def collect(self, ctx: CompletionContext) -> None:
        typed = ctx.typed
        term = strbuf_append(typed[: SEARCH_TERM_SIZE - 1], SEARCH_TERM_SIZE, "*" + self._extension)
        search = [""] + [
            d + "/" for d in self._directories if self._fs.cwd != d
        ]
        cut = len(self._extension)
        for directory in search:
            for entry in self._fs.find(directory, term):
                name = entry.name
                ctx.add(CandidateKind.NORMAL, name[:-cut], name[len(typed) : -cut])


class PathArgumentProvider:
    """Matches files and directories for the word before the cursor."""

    def __init__(self, filesystem: Filesystem) -> None:
        self._fs = filesystem

    def collect(self, ctx: CompletionContext) -> None:
        typed = ctx.typed
        word = typed[typed.rfind(" ") + 1 :]

        # Arguments that already hold wildcards are left alone.
        if "*" in word or "?" in word:
            return

        search = strbuf_append(word, PATH_SEARCH_SIZE, "*")
        slash = rfind_pathsep(search)
        if slash > 0:
            directory, term = search[:slash], search[slash + 1 :]
        elif slash == 0:
            directory, term = "/", search[1:]
        else:
            directory, term = "", search

        if term == ".*":
            ctx.add(CandidateKind.DIRECTORY, "..", "./")
        if term == "..*":
            ctx.add(CandidateKind.DIRECTORY, "..", "/")

        matched = len(term) - 1
        for entry in self._fs.find(directory, term):
            insertion = entry.name[matched:][: PREFIX_SCRATCH_SIZE - 2]
            if entry.is_directory:
                insertion += "/"
                kind = CandidateKind.DIRECTORY
            else:
                kind = CandidateKind.NORMAL
            ctx.add(kind, entry.name, insertion)


class TabCompleter:
    """Runs a completion request against a line being edited."""

    def __init__(
        self,
        command_providers: Sequence[CompletionProvider],
        argument_providers: Sequence[CompletionProvider],
        *,
        candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
    ) -> None:
        self._providers: dict[Classification, Sequence[CompletionProvider]] = {
            Classification.COMMAND: command_providers,
            Classification.ARGUMENT: argument_providers,
        }
        self.candidate_limit = candidate_limit
        self.show_all = False

    @classmethod
    def for_filesystem(
        cls,
        filesystem: Filesystem,
        commands: Sequence[CommandEntry] = MOS_COMMANDS,
        *,
        candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
    ) -> TabCompleter:
        """Standard wiring: commands and executables, then path arguments."""
        return cls(
            [CommandNameProvider(commands), ExecutableProvider(filesystem)],
            [PathArgumentProvider(filesystem)],
            candidate_limit=candidate_limit,
        )

    def disarm(self) -> None:
        self.show_all = False

    def complete(self, engine: LineEngine, *, prompt: str = "") -> int:
        """Complete the word before the cursor. Returns characters added."""
        classification = classify(engine.text, engine.pos)
        with CompletionContext(
            engine.text,
            engine.pos,
            classification=classification,
            show_all=self.show_all,
            candidate_limit=self.candidate_limit,
            on_unbuffered=engine.emit,
        ) as ctx:
            for provider in self._providers[classification]:
                provider.collect(ctx)

            prefix = ctx.common_prefix
            added = len(prefix)
            logger.debug(
                "Completion %s for %r: %d match(es), prefix %r",
                classification.value,
                ctx.typed,
                ctx.match_count,
                prefix,
            )

            if ctx.match_count > 0 and self.show_all:
                print_candidates(engine, ctx.sorted_candidates())
                engine.redraw(prompt)

            if ctx.match_count > 1 and added == 0:
                self.show_all = True

            if added > 0 or ctx.match_count == 1:
                if ctx.match_count == 1 and not prefix.endswith("/"):
                    prefix = strbuf_append(prefix, PREFIX_SCRATCH_SIZE, " ")
                engine.insert_text(prefix)
        return added


def print_candidates(engine: LineEngine, candidates: Sequence[Candidate]) -> None:
    """Print candidates in columns on fresh lines below the command line."""
    longest = max((len(c.full_text) for c in candidates), default=0)
    width = min(engine.columns, longest + 1)
    max_cols = max(1, engine.columns // width)

    engine.newline()
    col = 0
    for candidate in candidates:
        if col == max_cols:
            col = 0
            engine.newline()
        field = width - 1 if col == max_cols - 1 else width
        if candidate.kind != CandidateKind.NORMAL:
            engine.terminal.set_color("secondary")
        engine.emit(candidate.full_text.ljust(field))
        engine.terminal.set_color("normal")
        col += 1
    engine.newline()
