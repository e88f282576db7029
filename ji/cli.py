"""Command-line front door for ji.

Parses CLI options, resolves the target path, and loads its first line.
Then dispatches into the interactive editor runtime.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from . import __version__
from .config import load_no_color, load_style_name, save_style_name
from .highlight import DEFAULT_STYLE
from .runtime import run_editor
from .source import load_row

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(log_file: str | None, verbose: bool) -> None:
    """Send logs to ``log_file``; the terminal itself is busy drawing frames."""
    if log_file is None:
        return
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ji",
        description="View the first line of a file in a raw-mode terminal editor.",
    )
    parser.add_argument("path", nargs="?", default=None, help="File to open. Omit for the welcome screen.")
    parser.add_argument("--style", default=None, help="Pygments style name for the loaded line (remembered).")
    parser.add_argument("--no-color", action="store_true", help="Disable syntax colouring.")
    parser.add_argument("--log-file", metavar="PATH", default=None, help="Write diagnostic logs to PATH.")
    parser.add_argument("--verbose", action="store_true", help="Log debug detail (with --log-file).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and launch the editor.

    A path that does not exist or is a directory is rejected before the
    terminal is touched, so the error prints on a cooked-mode terminal.
    """
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_file, args.verbose)

    path: Path | None = None
    row = None
    if args.path is not None:
        path = Path(args.path)
        if not path.exists():
            raise SystemExit(f"Path not found: {path}")
        if path.is_dir():
            raise SystemExit(f"Not a file: {path}")
        try:
            row = load_row(path)
        except OSError as exc:
            raise SystemExit(f"fopen: {exc.strerror or exc}") from exc

    if args.style is not None:
        style = args.style
        save_style_name(style)
    else:
        style = load_style_name() or DEFAULT_STYLE
    no_color = args.no_color or load_no_color()

    return run_editor(path, row, style, no_color)


if __name__ == "__main__":
    raise SystemExit(main())
