"""VT100 escape sequences emitted by the renderer and geometry probe.

Every constant here is written to the terminal byte-for-byte.
"""

from __future__ import annotations

ESC = "\x1b"
CSI = ESC + "["

CLEAR_SCREEN = CSI + "2J"
CURSOR_HOME = CSI + "H"
HIDE_CURSOR = CSI + "?25l"
SHOW_CURSOR = CSI + "?25h"
CLEAR_TO_EOL = CSI + "K"
RESET_SGR = CSI + "0m"
REQUEST_CURSOR_POSITION = CSI + "6n"
# Terminals clamp oversized relative moves to the last row/column.
CURSOR_TO_BOTTOM_RIGHT = CSI + "999C" + CSI + "999B"


def cursor_position(row: int, col: int) -> str:
    """Return the 1-indexed absolute cursor move ``ESC [ row ; col H``."""
    return f"{CSI}{row};{col}H"
