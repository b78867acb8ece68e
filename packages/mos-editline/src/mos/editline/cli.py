"""CLI entry point for mos-editline. Uses Click for argument parsing."""

from __future__ import annotations

import logging

import click

from mos.editline.completion import TabCompleter
from mos.editline.editor import LineEditor
from mos.editline.filesystem import LocalFilesystem
from mos.editline.history import DEFAULT_HISTORY_DEPTH, HistoryRing
from mos.editline.hotkeys import HotkeyTable
from mos.editline.keys import ProcessKeyboard
from mos.editline.line_buffer import DEFAULT_CAPACITY
from mos.editline.shell import MonitorShell
from mos.editline.terminal import ProcessTerminal

logger = logging.getLogger(__name__)


def _configure_logging(level: str, log_file: str | None) -> None:
    # The terminal carries the editor's own output, so logs go to a file
    # whenever one is given.
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        filename=log_file,
    )


@click.group(invoke_without_command=True)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    help="Logging level",
)
@click.option("--log-file", default=None, help="Write logs to this file")
@click.pass_context
def main(ctx, log_level, log_file):
    """Monitor command-line editor with history, hotkeys and tab completion."""
    _configure_logging(log_level, log_file)
    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


@main.command()
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Host directory presented as the monitor's volume",
)
@click.option("--history-depth", type=click.IntRange(min=1), default=DEFAULT_HISTORY_DEPTH)
@click.option("--capacity", type=click.IntRange(min=2), default=DEFAULT_CAPACITY)
@click.option("--tab/--no-tab", default=True, help="Enable tab completion")
def shell(root, history_depth, capacity, tab):
    """Run an interactive monitor prompt."""
    filesystem = LocalFilesystem(root)
    terminal = ProcessTerminal()
    editor = LineEditor(
        terminal,
        ProcessKeyboard(),
        history=HistoryRing(history_depth),
        hotkeys=HotkeyTable(),
        completer=TabCompleter.for_filesystem(filesystem),
    )
    logger.info("Monitor shell on %s", filesystem.root)
    with terminal:
        try:
            MonitorShell(editor, filesystem, capacity=capacity, tab=tab).run()
        except (EOFError, KeyboardInterrupt):
            pass
    click.echo()


if __name__ == "__main__":
    main()
