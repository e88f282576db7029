"""Public package surface for ji.

Exports ``main`` for programmatic CLI invocation.
Most implementation lives in submodules under ``ji``.
"""

from __future__ import annotations

import logging

__version__ = "0.0.1dev"

logging.getLogger(__name__).addHandler(logging.NullHandler())


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main", "__version__"]
