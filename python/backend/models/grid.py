"""Grid model for the picture slide puzzle."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from backend.models.tile import Tile


@dataclass
class Grid:
    """Represents the N×N slot grid.

    Slots are stored as a 2D list.  ``None`` marks the single empty slot,
    whose coordinates are mirrored in ``empty_pos``.
    """

    size: int
    slots: list[list[Tile | None]]
    empty_pos: tuple[int, int]

    # -- construction helpers -------------------------------------------------

    @classmethod
    def solved(cls, size: int, contents: Sequence[Any]) -> Grid:
        """Create the goal-state grid from row-major tile contents.

        Content ``i`` becomes the tile whose home is ``(i // size, i % size)``.
        Only the first ``size * size - 1`` contents are placed; the
        bottom-right slot is left empty.

        Example::

            Grid.solved(2, ["a", "b", "c", "d"])   # "d" is left out
        """
        if size < 2:
            raise ValueError(f"Grid size must be at least 2, got {size}.")
        if len(contents) != size * size:
            raise ValueError(
                f"Expected {size * size} tile contents for a {size}×{size} "
                f"grid, got {len(contents)}."
            )
        slots: list[list[Tile | None]] = []
        for r in range(size):
            row: list[Tile | None] = []
            for c in range(size):
                if r == size - 1 and c == size - 1:
                    row.append(None)
                else:
                    row.append(Tile(contents[r * size + c], r, c))
            slots.append(row)
        return cls(size=size, slots=slots, empty_pos=(size - 1, size - 1))

    @property
    def corner(self) -> tuple[int, int]:
        """The slot that is empty in the solved arrangement."""
        return (self.size - 1, self.size - 1)

    # -- queries --------------------------------------------------------------

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def get_tile(self, row: int, col: int) -> Tile | None:
        return self.slots[row][col]

    def tiles(self) -> Iterator[Tile]:
        """Yield every tile in row-major slot order, skipping the empty slot."""
        for row in self.slots:
            for tile in row:
                if tile is not None:
                    yield tile

    def neighbors(self) -> list[tuple[int, int]]:
        """Return the in-bounds slots orthogonally adjacent to the empty slot."""
        er, ec = self.empty_pos
        result: list[tuple[int, int]] = []
        for dr, dc in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            nr, nc = er + dr, ec + dc
            if self.in_bounds(nr, nc):
                result.append((nr, nc))
        return result

    def is_adjacent_to_empty(self, row: int, col: int) -> bool:
        if not self.in_bounds(row, col):
            return False
        er, ec = self.empty_pos
        return abs(row - er) + abs(col - ec) == 1

    def is_solved(self) -> bool:
        """Check if every tile sits on its home slot and the corner is empty."""
        return all(
            self.is_tile_correct(r, c)
            for r in range(self.size)
            for c in range(self.size)
        )

    def is_tile_correct(self, row: int, col: int) -> bool:
        """Check if a specific slot holds its goal occupant."""
        tile = self.slots[row][col]
        if tile is None:
            return (row, col) == self.corner
        return tile.home == (row, col)

    # -- mutation -------------------------------------------------------------

    def slide(self, target: tuple[int, int]) -> None:
        """Move the tile at *target* into the empty slot.

        The caller guarantees *target* is adjacent to the empty slot.
        """
        er, ec = self.empty_pos
        tr, tc = target
        self.slots[er][ec], self.slots[tr][tc] = (
            self.slots[tr][tc],
            self.slots[er][ec],
        )
        self.empty_pos = (tr, tc)

    def reset(self) -> None:
        """Put every tile back on its home slot and empty the corner."""
        tiles = list(self.tiles())
        slots: list[list[Tile | None]] = [[None] * self.size for _ in range(self.size)]
        for tile in tiles:
            slots[tile.home_row][tile.home_col] = tile
        self.slots = slots
        self.empty_pos = self.corner
