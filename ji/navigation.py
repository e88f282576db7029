"""Cursor movement inside the fixed viewport.

This module intentionally has no rendering or terminal concerns.
Every movement is clamped: the cursor never leaves the screen.
"""

from __future__ import annotations

from .input import Key, KeyEvent
from .state import EditorState


def _step(state: EditorState, key: Key) -> None:
    if key is Key.ARROW_LEFT:
        if state.cursor_x > 0:
            state.cursor_x -= 1
    elif key is Key.ARROW_RIGHT:
        if state.cursor_x < state.screen_cols - 1:
            state.cursor_x += 1
    elif key is Key.ARROW_UP:
        if state.cursor_y > 0:
            state.cursor_y -= 1
    elif key is Key.ARROW_DOWN:
        if state.cursor_y < state.screen_rows - 1:
            state.cursor_y += 1


def apply_movement(state: EditorState, event: KeyEvent) -> bool:
    """Move the cursor for ``event`` and return whether its position changed.

    Page keys repeat the vertical step once per screen row; non-movement
    events leave the state untouched.
    """
    before = (state.cursor_x, state.cursor_y)
    key = event.key
    if key in {Key.ARROW_LEFT, Key.ARROW_RIGHT, Key.ARROW_UP, Key.ARROW_DOWN}:
        _step(state, key)
    elif key is Key.HOME:
        state.cursor_x = 0
    elif key is Key.END:
        state.cursor_x = state.screen_cols - 1
    elif key in {Key.PAGE_UP, Key.PAGE_DOWN}:
        step_key = Key.ARROW_UP if key is Key.PAGE_UP else Key.ARROW_DOWN
        for _ in range(state.screen_rows):
            _step(state, step_key)
    return (state.cursor_x, state.cursor_y) != before
