"""Editor bootstrap: terminal setup, geometry, and fatal-error policy."""

from __future__ import annotations

import logging
import sys
from functools import partial
from pathlib import Path

from ..geometry import probe_geometry
from ..highlight import colorize_line
from ..state import EditorState, TextRow
from ..terminal import TerminalController, TerminalError
from .loop import run_main_loop

logger = logging.getLogger(__name__)


def run_editor(
    path: Path | None,
    row: TextRow | None,
    style: str,
    no_color: bool,
    stdin_fd: int | None = None,
    stdout_fd: int | None = None,
) -> int:
    """Run the viewer until Ctrl-Q and return the process exit status.

    Terminal-control failures clear the screen, restore the terminal mode,
    and surface as ``SystemExit`` carrying the ``perror``-style diagnostic.
    """
    if stdin_fd is None:
        stdin_fd = sys.stdin.fileno()
    if stdout_fd is None:
        stdout_fd = sys.stdout.fileno()

    highlight = None
    if row is not None and path is not None and not no_color:
        highlight = partial(colorize_line, path=path, style=style)

    terminal = TerminalController(stdin_fd, stdout_fd)
    try:
        with terminal.raw_mode():
            geometry = probe_geometry(terminal)
            state = EditorState(geometry=geometry, row=row)
            exit_reason = run_main_loop(state, terminal, stdin_fd, highlight=highlight)
    except TerminalError as exc:
        terminal.clear_screen()
        logger.error("fatal terminal error: %s", exc)
        raise SystemExit(str(exc)) from exc

    terminal.clear_screen()
    logger.debug("editor exited: %s", exit_reason.value)
    return 0
