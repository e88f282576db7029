"""Terminal size detection.

Asks the kernel for the window size first. Some contexts (piped output,
odd emulators) report nothing useful there, so the fallback parks the
cursor in the bottom-right corner and asks the terminal where it is.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass

from . import ansi
from .input import READ_TIMEOUT_MS, read_byte
from .terminal import TerminalController, TerminalError

logger = logging.getLogger(__name__)

# Reply capacity, including the slot a C string would spend on its terminator.
CURSOR_REPLY_CAPACITY = 32
_CURSOR_REPLY_RE = re.compile(rb"\s*([+-]?\d+);\s*([+-]?\d+)")


@dataclass(frozen=True)
class Geometry:
    rows: int
    cols: int


def read_cursor_reply(fd: int, timeout_ms: int = READ_TIMEOUT_MS) -> bytes:
    """Collect a cursor-position reply up to (not including) its ``R``.

    Stops at the terminator, when the bounded buffer is full, or when the
    terminal stops sending bytes.
    """
    reply = bytearray()
    while len(reply) < CURSOR_REPLY_CAPACITY - 1:
        ch = read_byte(fd, timeout_ms)
        if ch is None or ch == b"R":
            break
        reply += ch
    return bytes(reply)


def parse_cursor_reply(reply: bytes) -> Geometry | None:
    """Parse ``ESC [ rows ; cols`` into a geometry, or ``None`` when malformed."""
    if reply[:2] != b"\x1b[":
        return None
    match = _CURSOR_REPLY_RE.match(reply, 2)
    if match is None:
        return None
    rows, cols = int(match.group(1)), int(match.group(2))
    if rows <= 0 or cols <= 0:
        return None
    return Geometry(rows=rows, cols=cols)


def get_cursor_position(terminal: TerminalController, timeout_ms: int = READ_TIMEOUT_MS) -> Geometry | None:
    terminal.write(ansi.REQUEST_CURSOR_POSITION.encode("ascii"))
    return parse_cursor_reply(read_cursor_reply(terminal.stdin_fd, timeout_ms))


def query_window_size(fd: int) -> Geometry | None:
    """Return the ioctl-reported size of ``fd``, or ``None`` when unusable."""
    try:
        size = os.get_terminal_size(fd)
    except OSError as exc:
        logger.debug("window size ioctl failed on fd %d: %s", fd, exc)
        return None
    if size.columns == 0:
        return None
    return Geometry(rows=size.lines, cols=size.columns)


def probe_geometry(terminal: TerminalController, timeout_ms: int = READ_TIMEOUT_MS) -> Geometry:
    """Determine terminal rows/cols, falling back to a cursor-report round-trip."""
    geometry = query_window_size(terminal.stdout_fd)
    if geometry is not None and geometry.rows > 0:
        logger.debug("geometry from ioctl: %dx%d", geometry.rows, geometry.cols)
        return geometry

    try:
        terminal.write(ansi.CURSOR_TO_BOTTOM_RIGHT.encode("ascii"))
        geometry = get_cursor_position(terminal, timeout_ms)
    except TerminalError as exc:
        raise TerminalError("getWindowSize", exc.cause) from exc
    if geometry is None:
        raise TerminalError("getWindowSize", "no usable cursor position report")
    logger.debug("geometry from cursor report: %dx%d", geometry.rows, geometry.cols)
    return geometry
