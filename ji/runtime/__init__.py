"""Public runtime orchestration entry points.

This package groups the editor bootstrap (`run_editor`) and the
lower-level event loop used by tests and composition code.
"""

from __future__ import annotations


def run_editor(*args, **kwargs):
    """Lazily import editor entrypoint to avoid bootstrap work on import."""
    from .app import run_editor as _run_editor

    return _run_editor(*args, **kwargs)


def run_main_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_main_loop as _run_main_loop

    return _run_main_loop(*args, **kwargs)


__all__ = [
    "run_editor",
    "run_main_loop",
]
