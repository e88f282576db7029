"""Editor state: viewport geometry, cursor position, and the loaded row.

Mutated only by cursor movement; the row is fixed once loaded.
"""

from __future__ import annotations

from dataclasses import dataclass

from .geometry import Geometry


@dataclass(frozen=True)
class TextRow:
    chars: str

    @property
    def size(self) -> int:
        return len(self.chars)


@dataclass
class EditorState:
    geometry: Geometry
    cursor_x: int = 0
    cursor_y: int = 0
    row: TextRow | None = None

    @property
    def screen_rows(self) -> int:
        return self.geometry.rows

    @property
    def screen_cols(self) -> int:
        return self.geometry.cols

    @property
    def num_rows(self) -> int:
        return 0 if self.row is None else 1
