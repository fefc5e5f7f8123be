"""One piece of the partitioned source image."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, eq=False)
class Tile:
    """A piece of the picture tagged with the slot it belongs to when solved.

    ``content`` is whatever the renderer draws (a ``pygame.Surface`` for the
    bundled frontends).  Equality is identity: two tiles cut from identical
    pixels are still different tiles.
    """

    content: Any
    home_row: int
    home_col: int

    @property
    def home(self) -> tuple[int, int]:
        return (self.home_row, self.home_col)
