"""Core gameplay logic — builds the puzzle, processes moves, checks the win."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Any

from loguru import logger

from backend.config import ShuffleMode
from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamestate import GameState, PuzzleStatus
from backend.models.grid import Grid

log = logger.bind(component="engine")


class GamePlay:
    """Owns the grid of a single puzzle and is the only thing that mutates it."""

    def __init__(
        self,
        shuffle_mode: ShuffleMode = ShuffleMode.WALK,
        rng: random.Random | None = None,
        walk_factor: int = 100,
    ) -> None:
        self.shuffle_mode = shuffle_mode
        self.walk_factor = walk_factor
        self._rng = rng or random.Random()
        self.state = GameState()

    # -- lifecycle ------------------------------------------------------------

    def initialize(self, tile_contents: Sequence[Any], size: int) -> None:
        """Build the solved grid from row-major contents, then shuffle it.

        Replaces any previous puzzle.  The last content is held back as the
        final piece shown once the puzzle is solved.
        """
        grid = GameGenerator.solved(size, tile_contents)
        self.state = GameState()
        self.state.grid = grid
        self.state.final_piece = tile_contents[-1]
        self.shuffle()

    def shuffle(self) -> None:
        """Reshuffle the current tiles; the empty slot ends in the corner."""
        grid = self._require_grid()
        GameGenerator.shuffle(
            grid, self.shuffle_mode, self._rng, walk_factor=self.walk_factor
        )
        self.state.mark_shuffled()

    def auto_complete(self, tile_contents: Sequence[Any]) -> None:
        """Put every tile on its home slot, skipping normal play.

        *tile_contents* is a fresh partition of the current level; the grid
        size is kept.
        """
        grid = self._require_grid()
        self.state.grid = GameGenerator.solved(grid.size, tile_contents)
        self.state.final_piece = tile_contents[-1]
        self.state.mark_solved()
        self.reveal_on_solve()
        log.info("puzzle auto-completed ({}×{})", grid.size, grid.size)

    # -- movement -------------------------------------------------------------

    def request_move(self, row: int, col: int) -> bool:
        """Slide the tile at (row, col) into the adjacent empty slot.

        Returns True if the tile was orthogonally adjacent to the empty slot
        and the move was applied.  Anything else is ignored.
        """
        grid = self.state.grid
        if grid is None or self.state.status is not PuzzleStatus.SHUFFLED:
            return False
        if not grid.is_adjacent_to_empty(row, col):
            return False

        grid.slide((row, col))
        if grid.is_solved():
            self.state.mark_solved()
            self.reveal_on_solve()
            log.info("puzzle solved ({}×{})", grid.size, grid.size)
        return True

    def reveal_on_solve(self) -> None:
        """Show the held-back final piece in the empty corner."""
        if self.state.is_solved:
            self.state.revealed = True

    # -- queries --------------------------------------------------------------

    def is_solved(self) -> bool:
        grid = self.state.grid
        return grid is not None and grid.is_solved()

    @property
    def is_won(self) -> bool:
        return self.state.is_solved

    @property
    def grid(self) -> Grid | None:
        return self.state.grid

    @property
    def status(self) -> PuzzleStatus:
        return self.state.status

    @property
    def size(self) -> int | None:
        return self.state.grid.size if self.state.grid is not None else None

    @property
    def revealed_piece(self) -> Any:
        return self.state.revealed_piece

    # -- helpers --------------------------------------------------------------

    def _require_grid(self) -> Grid:
        if self.state.grid is None:
            raise RuntimeError("Puzzle has not been initialized.")
        return self.state.grid
