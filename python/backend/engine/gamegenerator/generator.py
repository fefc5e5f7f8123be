"""Builds and shuffles picture puzzle grids."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Any

from loguru import logger

from backend.config import ShuffleMode
from backend.models.grid import Grid

log = logger.bind(component="engine")


class GameGenerator:
    """Creates solved grids and shuffles them in place."""

    @staticmethod
    def solved(size: int, contents: Sequence[Any]) -> Grid:
        """Return the goal-state grid (tiles on their homes, corner empty)."""
        return Grid.solved(size, contents)

    @staticmethod
    def permute(grid: Grid, rng: random.Random) -> None:
        """Uniformly permute the tiles and refill every slot but the corner.

        The tiles' current positions are ignored.  No solvability check is
        made: roughly half of the results cannot be solved by sliding.
        """
        tiles = list(grid.tiles())
        rng.shuffle(tiles)
        it = iter(tiles)
        for r in range(grid.size):
            for c in range(grid.size):
                grid.slots[r][c] = None if (r, c) == grid.corner else next(it)
        grid.empty_pos = grid.corner

    @staticmethod
    def scramble(grid: Grid, rng: random.Random, walk_factor: int = 100) -> None:
        """Scramble *grid* in place using random legal slides.

        The walk always starts from the solved arrangement, whatever the
        grid held before.  The empty slot is walked back to the corner
        afterwards, so the result keeps the empty corner of a freshly
        shuffled puzzle.
        """
        grid.reset()
        num_shuffles = grid.size * grid.size * walk_factor
        prev_pos: tuple[int, int] | None = None

        for _ in range(num_shuffles):
            neighbors = grid.neighbors()
            if prev_pos in neighbors and len(neighbors) > 1:
                neighbors.remove(prev_pos)
            target = rng.choice(neighbors)
            prev_pos = grid.empty_pos
            grid.slide(target)

        GameGenerator._return_empty_to_corner(grid)

    @staticmethod
    def shuffle(
        grid: Grid,
        mode: ShuffleMode = ShuffleMode.WALK,
        rng: random.Random | None = None,
        walk_factor: int = 100,
    ) -> None:
        """Shuffle *grid* in place until it is no longer solved."""
        rng = rng or random.Random()
        while True:
            if mode is ShuffleMode.PERMUTATION:
                GameGenerator.permute(grid, rng)
            else:
                GameGenerator.scramble(grid, rng, walk_factor)
            if not grid.is_solved():
                break
        log.debug(
            "shuffled {}×{} grid ({}), solvable={}",
            grid.size,
            grid.size,
            mode.value,
            GameGenerator.is_solvable(grid),
        )

    @staticmethod
    def is_solvable(grid: Grid) -> bool:
        """Return True if *grid* can reach the goal state by legal slides.

        Uses the permutation parity of the tiles (by home index) together
        with the empty slot's distance from the corner.
        """
        order = [t.home_row * grid.size + t.home_col for t in grid.tiles()]
        inversions = 0
        for i, a in enumerate(order):
            for b in order[i + 1 :]:
                if a > b:
                    inversions += 1
        er, ec = grid.empty_pos
        taxicab = (grid.size - 1 - er) + (grid.size - 1 - ec)
        # Each slide flips the parity of the full permutation (blank included)
        # and moves the blank by one, so the two parities stay in lockstep.
        return (inversions + _blank_inversions(grid) + taxicab) % 2 == 0

    # -- helpers --------------------------------------------------------------

    @staticmethod
    def _return_empty_to_corner(grid: Grid) -> None:
        last = grid.size - 1
        while grid.empty_pos[1] < last:
            er, ec = grid.empty_pos
            grid.slide((er, ec + 1))
        while grid.empty_pos[0] < last:
            er, ec = grid.empty_pos
            grid.slide((er + 1, ec))


def _blank_inversions(grid: Grid) -> int:
    # The blank counts as the highest index; it is inverted with every tile
    # that comes after it in row-major order.
    er, ec = grid.empty_pos
    return grid.size * grid.size - 1 - (er * grid.size + ec)
