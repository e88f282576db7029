"""Main interactive event loop for the viewer.

Each iteration draws one frame, waits for one key, and dispatches it.
The loop owns no terminal lifecycle; callers bracket it with raw mode.
"""

from __future__ import annotations

from collections.abc import Callable

from ..input import KeyEvent, read_key
from ..keymap import KeyComboRegistry, LoopExit, build_editor_keymap
from ..render import render_frame
from ..state import EditorState
from ..terminal import TerminalController


def run_main_loop(
    state: EditorState,
    terminal: TerminalController,
    stdin_fd: int,
    highlight: Callable[[str], str] | None = None,
    keymap: KeyComboRegistry | None = None,
    read: Callable[[int], KeyEvent] = read_key,
) -> LoopExit:
    """Render and dispatch keys until a binding asks to leave the loop."""
    registry = keymap if keymap is not None else build_editor_keymap(state)
    while True:
        render_frame(state, terminal, highlight)
        result = registry.dispatch(read(stdin_fd))
        if isinstance(result, LoopExit):
            return result
