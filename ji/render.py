"""Rendering engine for the editor viewport.

Composes each frame into a single buffer and hands it to the terminal in
one write, so the user never sees a half-drawn screen.
"""

from __future__ import annotations

from collections.abc import Callable

from . import __version__, ansi
from .state import EditorState
from .terminal import TerminalController

BANNER_CAPACITY = 79
EMPTY_LINE_MARKER = "~"


class FrameBuffer:
    """Append-only accumulator for one frame's output."""

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._length = 0

    def append(self, text: str) -> None:
        self._parts.append(text)
        self._length += len(text)

    def __len__(self) -> int:
        return self._length

    def getvalue(self) -> str:
        return "".join(self._parts)

    def to_bytes(self) -> bytes:
        return self.getvalue().encode("utf-8", errors="replace")


def banner_text(state: EditorState) -> str:
    text = f"JI Editor -- version {__version__}: col: {state.cursor_x}, row: {state.cursor_y}"
    return text[:BANNER_CAPACITY]


def _draw_banner(buf: FrameBuffer, state: EditorState) -> None:
    welcome = banner_text(state)[: state.screen_cols]
    padding = (state.screen_cols - len(welcome)) // 2
    if padding:
        buf.append(EMPTY_LINE_MARKER)
        padding -= 1
    buf.append(" " * padding)
    buf.append(welcome)


def draw_rows(
    buf: FrameBuffer,
    state: EditorState,
    highlight: Callable[[str], str] | None = None,
) -> None:
    """Append every screen line, ``0..rows`` inclusive, to ``buf``.

    Only lines before ``rows - 1`` get a CRLF so the last line never
    scrolls the screen.
    """
    rows = state.screen_rows
    for y in range(rows + 1):
        if y >= state.num_rows:
            if state.num_rows == 0 and y == rows // 3:
                _draw_banner(buf, state)
            else:
                buf.append(EMPTY_LINE_MARKER)
        else:
            assert state.row is not None
            text = state.row.chars[: state.screen_cols]
            if highlight is not None:
                text = highlight(text)
            buf.append(text)
            if "\033" in text:
                buf.append(ansi.RESET_SGR)

        buf.append(ansi.CLEAR_TO_EOL)
        if y < rows - 1:
            buf.append("\r\n")


def compose_frame(state: EditorState, highlight: Callable[[str], str] | None = None) -> FrameBuffer:
    buf = FrameBuffer()
    buf.append(ansi.HIDE_CURSOR)
    buf.append(ansi.CURSOR_HOME)
    draw_rows(buf, state, highlight)
    buf.append(ansi.cursor_position(state.cursor_y + 1, state.cursor_x + 1))
    buf.append(ansi.SHOW_CURSOR)
    return buf


def render_frame(
    state: EditorState,
    terminal: TerminalController,
    highlight: Callable[[str], str] | None = None,
) -> None:
    """Compose the frame for ``state`` and write it with a single call."""
    terminal.write(compose_frame(state, highlight).to_bytes())
