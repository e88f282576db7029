"""File loading for the single viewed row.

Only the first line of a file is read and decoded. Terminal control bytes
are escaped so a stray ESC in the file cannot move the cursor or recolour
the screen.
"""

from __future__ import annotations

import re
from pathlib import Path

from .state import TextRow

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def decode_line(raw: bytes) -> str:
    """Decode one line, dropping a UTF-8 BOM and falling back to latin-1."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch == "\t":
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def read_first_line(path: Path) -> bytes | None:
    """Return the raw first line of ``path`` without its line terminator."""
    with path.open("rb") as fh:
        raw = fh.readline()
    if not raw:
        return None
    return raw.rstrip(b"\r\n")


def load_row(path: Path) -> TextRow | None:
    """Load the first line of ``path``; an empty file yields no row."""
    raw = read_first_line(path)
    if raw is None:
        return None
    return TextRow(sanitize_terminal_text(decode_line(raw)))
