"""Syntax colouring for the loaded row.

Uses Pygments' terminal formatter with a lexer chosen from the file name.
Unknown style names fall back to ``monokai`` instead of failing.
"""

from __future__ import annotations

from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_FORMATTERS: dict[str, TerminalFormatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()


def normalize_style(style: str) -> str:
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> TerminalFormatter:
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    formatter = TerminalFormatter(style=style)
    _FORMATTERS[style] = formatter
    return formatter


def colorize_line(text: str, path: Path, style: str = DEFAULT_STYLE) -> str:
    """Return ``text`` with ANSI colours for the language ``path`` suggests."""
    if not text:
        return text
    formatter = _formatter_for_style(normalize_style(style))
    try:
        lexer = get_lexer_for_filename(path.name, text)
    except ClassNotFound:
        lexer = TextLexer()
    rendered = pygments_highlight(text, lexer, formatter)
    # Lexers always terminate their output with a newline.
    return rendered.rstrip("\r\n")
