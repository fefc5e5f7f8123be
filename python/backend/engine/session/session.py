"""Puzzle session: level and size selection, generation-tagged regeneration.

The session is what the frontends talk to.  It owns the ``GamePlay`` engine,
turns presentation intents (pick a level, change the grid size, reset,
auto-complete, activate a cell) into engine calls, and hands out immutable
``SessionView`` snapshots for rendering.

Image decoding is the only slow step.  ``submit`` runs it on an executor and
``poll`` applies the result on the caller's thread; every request carries a
generation number and only the newest one is ever applied, so a slow decode
that finishes late cannot overwrite a newer puzzle.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from concurrent.futures import Executor, Future
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from loguru import logger

from backend.config import PuzzleConfig
from backend.engine.gameplay import GamePlay
from backend.engine.gamestate import PuzzleStatus
from backend.engine.partitioner import ImageLoadError, Partition, load_and_partition
from backend.models.tile import Tile

log = logger.bind(component="session")

Loader = Callable[[Path, int], Partition]


@dataclass(frozen=True)
class LoadTicket:
    """Identifies one regeneration request."""

    generation: int
    level_index: int
    grid_size: int
    source: Path


@dataclass(frozen=True)
class SessionView:
    """Read-only snapshot handed to the presentation layer."""

    slots: tuple[tuple[Tile | None, ...], ...]
    grid_size: int
    tile_width: float
    tile_height: float
    solved: bool
    ready: bool
    loading: bool
    level_index: int
    level_count: int
    level_path: Path
    show_reference: bool
    revealed_piece: Any
    last_error: str | None
    generation: int


class PuzzleSession:
    def __init__(
        self,
        levels: Sequence[Path],
        config: PuzzleConfig | None = None,
        loader: Loader = load_and_partition,
        rng: random.Random | None = None,
    ) -> None:
        if not levels:
            raise ValueError("At least one level image is required.")
        self.levels = list(levels)
        self.config = config or PuzzleConfig()
        self._loader = loader
        self.engine = GamePlay(
            self.config.shuffle_mode, rng, walk_factor=self.config.walk_factor
        )

        self.level_index = 0
        self.grid_size = self.config.grid_size
        self.show_reference = False
        self.tile_width = 0.0
        self.tile_height = 0.0
        self.last_error: str | None = None

        self._generation = 0
        self._pending: list[tuple[LoadTicket, Future[Partition]]] = []
        self._current: LoadTicket | None = None

    # -- intents --------------------------------------------------------------

    def select_level(self, index: int) -> None:
        if not 0 <= index < len(self.levels):
            raise ValueError(
                f"Level index must be between 0 and {len(self.levels) - 1}, "
                f"got {index}."
            )
        self.level_index = index

    def next_level(self) -> None:
        """Advance to the next level, looping back to the first."""
        self.level_index = (self.level_index + 1) % len(self.levels)

    def set_grid_size(self, size: int) -> None:
        self.config.check_grid_size(size)
        self.grid_size = size

    def toggle_reference(self) -> None:
        self.show_reference = not self.show_reference

    def request_move(self, row: int, col: int) -> bool:
        return self.engine.request_move(row, col)

    # -- regeneration ---------------------------------------------------------

    def _next_ticket(self) -> LoadTicket:
        self._generation += 1
        return LoadTicket(
            generation=self._generation,
            level_index=self.level_index,
            grid_size=self.grid_size,
            source=self.levels[self.level_index],
        )

    def _load(self, ticket: LoadTicket) -> Partition:
        try:
            return self._loader(ticket.source, ticket.grid_size)
        except ImageLoadError as exc:
            log.error("regeneration {} aborted: {}", ticket.generation, exc)
            self.last_error = str(exc)
            raise

    def _apply(self, ticket: LoadTicket, part: Partition) -> None:
        self.engine.initialize(part.tiles, ticket.grid_size)
        self._current = ticket
        self.tile_width = part.tile_width
        self.tile_height = part.tile_height
        self.show_reference = False
        self.last_error = None
        log.info(
            "level {} ready as {}×{} (generation {})",
            ticket.level_index,
            ticket.grid_size,
            ticket.grid_size,
            ticket.generation,
        )

    def regenerate(self) -> None:
        """Load the current level and start a fresh shuffled puzzle.

        Raises ``ImageLoadError`` if the image cannot be decoded; the
        previous puzzle, if any, is left untouched.
        """
        ticket = self._next_ticket()
        self._apply(ticket, self._load(ticket))

    reset = regenerate

    def submit(self, executor: Executor) -> LoadTicket:
        """Start loading the current level on *executor*.

        Supersedes every earlier request; call ``poll`` to apply the result.
        """
        ticket = self._next_ticket()
        future = executor.submit(self._loader, ticket.source, ticket.grid_size)
        self._pending.append((ticket, future))
        log.debug("submitted generation {} ({})", ticket.generation, ticket.source)
        return ticket

    def poll(self) -> bool:
        """Apply a finished load for the current generation.

        Stale completions are dropped.  Returns True if a new puzzle was
        applied.
        """
        finished: list[tuple[LoadTicket, Future[Partition]]] = []
        still_pending: list[tuple[LoadTicket, Future[Partition]]] = []
        for ticket, future in self._pending:
            if ticket.generation != self._generation:
                future.cancel()
                log.debug("discarded stale generation {}", ticket.generation)
            elif future.done():
                finished.append((ticket, future))
            else:
                still_pending.append((ticket, future))
        self._pending = still_pending

        applied = False
        for ticket, future in finished:
            exc = future.exception()
            if exc is None:
                self._apply(ticket, future.result())
                applied = True
            elif isinstance(exc, ImageLoadError):
                log.error("regeneration {} aborted: {}", ticket.generation, exc)
                self.last_error = str(exc)
            else:
                raise exc
        return applied

    @property
    def loading(self) -> bool:
        return any(t.generation == self._generation for t, _ in self._pending)

    def auto_complete(self) -> None:
        """Re-cut the current puzzle's image and show it solved.

        Also supersedes any pending regeneration.
        """
        current = self._current
        if current is None or not self.ready:
            raise RuntimeError("No puzzle to complete yet.")
        part = self._load(current)
        self._generation += 1
        self._current = replace(current, generation=self._generation)
        self.engine.auto_complete(part.tiles)
        self.last_error = None

    # -- queries --------------------------------------------------------------

    @property
    def ready(self) -> bool:
        return self.engine.status is not PuzzleStatus.UNINITIALIZED

    @property
    def solved(self) -> bool:
        return self.engine.is_won

    @property
    def generation(self) -> int:
        return self._generation

    def view(self) -> SessionView:
        grid = self.engine.grid
        if grid is None:
            slots: tuple[tuple[Tile | None, ...], ...] = ()
            size = self.grid_size
        else:
            slots = tuple(tuple(row) for row in grid.slots)
            size = grid.size
        return SessionView(
            slots=slots,
            grid_size=size,
            tile_width=self.tile_width,
            tile_height=self.tile_height,
            solved=self.solved,
            ready=self.ready,
            loading=self.loading,
            level_index=self.level_index,
            level_count=len(self.levels),
            level_path=self.levels[self.level_index],
            show_reference=self.show_reference,
            revealed_piece=self.engine.revealed_piece,
            last_error=self.last_error,
            generation=self._generation,
        )
