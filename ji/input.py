"""Low-level terminal input decoding.

Reads raw bytes from the terminal and translates them into ``KeyEvent``s.
Handles ESC-sequence timing and the alternate encodings terminals use for
the same logical key. Unrecognized sequences degrade to ``Key.ESCAPE``.
"""

from __future__ import annotations

import errno
import os
import select
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .terminal import TerminalError

ESC_BYTE = 0x1B
# Matches the VTIME=1 read timeout configured for raw mode.
READ_TIMEOUT_MS = 100


class Key(Enum):
    CHAR = "CHAR"
    ARROW_UP = "UP"
    ARROW_DOWN = "DOWN"
    ARROW_LEFT = "LEFT"
    ARROW_RIGHT = "RIGHT"
    HOME = "HOME"
    END = "END"
    DELETE = "DELETE"
    PAGE_UP = "PAGE_UP"
    PAGE_DOWN = "PAGE_DOWN"
    ESCAPE = "ESC"


@dataclass(frozen=True)
class KeyEvent:
    """One decoded key: either a literal byte (``Key.CHAR``) or a named key."""

    key: Key
    byte: int | None = None

    @classmethod
    def char(cls, byte: int) -> KeyEvent:
        return cls(Key.CHAR, byte & 0xFF)

    @classmethod
    def named(cls, key: Key) -> KeyEvent:
        if key is Key.CHAR:
            raise ValueError("Key.CHAR events must carry a byte; use KeyEvent.char()")
        return cls(key)


def ctrl_key(letter: str) -> int:
    """Return the control byte produced by Ctrl+``letter`` (low five bits)."""
    return ord(letter) & 0x1F


# ESC [ <digit> ~
_TILDE_KEYS: dict[bytes, Key] = {
    b"1": Key.HOME,
    b"7": Key.HOME,
    b"4": Key.END,
    b"8": Key.END,
    b"3": Key.DELETE,
    b"5": Key.PAGE_UP,
    b"6": Key.PAGE_DOWN,
}
# ESC [ <letter>
_CSI_KEYS: dict[bytes, Key] = {
    b"A": Key.ARROW_UP,
    b"B": Key.ARROW_DOWN,
    b"C": Key.ARROW_RIGHT,
    b"D": Key.ARROW_LEFT,
    b"H": Key.HOME,
    b"F": Key.END,
}
# ESC O <letter>
_SS3_KEYS: dict[bytes, Key] = {b"H": Key.HOME, b"F": Key.END}

ESCAPE_EVENT = KeyEvent(Key.ESCAPE)


def read_byte(fd: int, timeout_ms: int = READ_TIMEOUT_MS) -> bytes | None:
    """Read one byte from ``fd``, or return ``None`` when none arrived in time.

    End of input is reported as a timeout, matching a raw-mode read that
    returns zero bytes.
    """
    try:
        ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return None
        ch = os.read(fd, 1)
    except InterruptedError:
        return None
    except OSError as exc:
        if exc.errno == errno.EAGAIN:
            return None
        raise TerminalError("read", exc) from exc
    if not ch:
        return None
    return ch


def decode_key(first: bytes, next_byte: Callable[[], bytes | None]) -> KeyEvent:
    """Decode one key starting at ``first``, pulling follow-up bytes on demand.

    ``next_byte`` returns ``None`` when no further byte arrived; bytes
    already consumed for an incomplete sequence are dropped.
    """
    if first[0] != ESC_BYTE:
        return KeyEvent.char(first[0])

    seq0 = next_byte()
    if seq0 is None:
        return ESCAPE_EVENT
    seq1 = next_byte()
    if seq1 is None:
        return ESCAPE_EVENT

    if seq0 == b"[":
        if seq1.isdigit():
            seq2 = next_byte()
            if seq2 is None:
                return ESCAPE_EVENT
            if seq2 == b"~" and seq1 in _TILDE_KEYS:
                return KeyEvent.named(_TILDE_KEYS[seq1])
            return ESCAPE_EVENT
        key = _CSI_KEYS.get(seq1)
        return KeyEvent.named(key) if key is not None else ESCAPE_EVENT
    if seq0 == b"O":
        key = _SS3_KEYS.get(seq1)
        return KeyEvent.named(key) if key is not None else ESCAPE_EVENT
    return ESCAPE_EVENT


def read_key(fd: int, timeout_ms: int = READ_TIMEOUT_MS) -> KeyEvent:
    """Block until one logical key is available on ``fd`` and decode it."""
    while True:
        first = read_byte(fd, timeout_ms)
        if first is not None:
            break
    return decode_key(first, lambda: read_byte(fd, timeout_ms))


def decode_bytes(data: bytes) -> list[KeyEvent]:
    """Decode every key in ``data``; running out of bytes acts like a timeout."""
    pos = 0
    events: list[KeyEvent] = []

    def next_byte() -> bytes | None:
        nonlocal pos
        if pos >= len(data):
            return None
        ch = data[pos : pos + 1]
        pos += 1
        return ch

    while pos < len(data):
        first = next_byte()
        assert first is not None
        events.append(decode_key(first, next_byte))
    return events
