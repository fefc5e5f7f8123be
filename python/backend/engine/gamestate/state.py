"""Tracks the mutable state of a puzzle in progress."""

from __future__ import annotations

import enum
from typing import Any

from backend.models.grid import Grid


class PuzzleStatus(enum.Enum):
    UNINITIALIZED = "uninitialized"
    SHUFFLED = "shuffled"
    SOLVED = "solved"


class GameState:
    """Holds the current grid, its status and the hidden final piece."""

    def __init__(self) -> None:
        self.grid: Grid | None = None
        self.status = PuzzleStatus.UNINITIALIZED
        # Content of the bottom-right partition piece, never placed in the grid.
        self.final_piece: Any = None
        self.revealed: bool = False

    # -- transitions ----------------------------------------------------------

    def mark_shuffled(self) -> None:
        self.status = PuzzleStatus.SHUFFLED
        self.revealed = False

    def mark_solved(self) -> None:
        self.status = PuzzleStatus.SOLVED

    # -- queries --------------------------------------------------------------

    @property
    def is_solved(self) -> bool:
        return self.status is PuzzleStatus.SOLVED

    @property
    def revealed_piece(self) -> Any:
        """The final piece once revealed, else ``None``."""
        return self.final_piece if self.revealed else None
