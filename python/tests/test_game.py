"""Puzzle engine tests: initialize, legal moves, solved state, auto-complete.

Tile contents are plain strings here; the engine never looks inside them.
"""

from __future__ import annotations

import random
from collections import deque

import pytest

from backend.config import ShuffleMode
from backend.engine.gameplay import GamePlay
from backend.engine.gamestate import PuzzleStatus
from backend.models.grid import Grid


def _contents(size: int) -> list[str]:
    return [f"piece-{i}" for i in range(size * size)]


def _snapshot(game: GamePlay) -> tuple:
    grid = game.grid
    assert grid is not None
    return (tuple(tuple(row) for row in grid.slots), grid.empty_pos, game.status)


def _assert_invariants(game: GamePlay, contents: list[str]) -> None:
    grid = game.grid
    assert grid is not None
    empties = [
        (r, c)
        for r in range(grid.size)
        for c in range(grid.size)
        if grid.slots[r][c] is None
    ]
    assert empties == [grid.empty_pos]
    assert sorted(t.content for t in grid.tiles()) == sorted(contents[:-1])


def _clone(grid: Grid) -> Grid:
    return Grid(grid.size, [row[:] for row in grid.slots], grid.empty_pos)


def _solution(grid: Grid) -> list[tuple[int, int]]:
    """Breadth-first search for the cells to activate (small grids only)."""
    start = _clone(grid)
    seen = {_key(start)}
    queue: deque[tuple[Grid, list[tuple[int, int]]]] = deque([(start, [])])
    while queue:
        current, path = queue.popleft()
        if current.is_solved():
            return path
        for target in current.neighbors():
            nxt = _clone(current)
            nxt.slide(target)
            key = _key(nxt)
            if key not in seen:
                seen.add(key)
                queue.append((nxt, path + [target]))
    raise AssertionError("grid is not solvable")


def _key(grid: Grid) -> tuple:
    return tuple(None if t is None else t.home for row in grid.slots for t in row)


def _shuffled_3x3() -> GamePlay:
    """A 3×3 game whose tiles were moved off home by a known slide cycle."""
    game = GamePlay(rng=random.Random(0))
    game.initialize(_contents(3), 3)
    grid = Grid.solved(3, _contents(3))
    for target in [(2, 1), (1, 1), (1, 2), (2, 2)]:
        grid.slide(target)
    game.state.grid = grid
    return game


# -- initialize ---------------------------------------------------------------


@pytest.mark.parametrize("mode", list(ShuffleMode))
@pytest.mark.parametrize("size", [2, 3, 4])
def test_initialize_shuffles_with_empty_corner(mode: ShuffleMode, size: int) -> None:
    contents = _contents(size)
    game = GamePlay(mode, random.Random(7))

    assert game.status is PuzzleStatus.UNINITIALIZED
    game.initialize(contents, size)

    assert game.status is PuzzleStatus.SHUFFLED
    assert game.size == size
    assert game.grid is not None
    assert game.grid.empty_pos == (size - 1, size - 1)
    assert not game.is_solved()
    assert not game.is_won
    assert game.revealed_piece is None
    _assert_invariants(game, contents)


def test_initialize_replaces_previous_puzzle() -> None:
    game = GamePlay(rng=random.Random(1))
    game.initialize(_contents(3), 3)
    game.initialize(_contents(4), 4)

    assert game.size == 4
    _assert_invariants(game, _contents(4))


def test_initialize_rejects_wrong_content_count() -> None:
    game = GamePlay()
    game.initialize(_contents(3), 3)
    before = _snapshot(game)

    with pytest.raises(ValueError):
        game.initialize(_contents(3), 4)
    assert _snapshot(game) == before


def test_shuffle_before_initialize_is_an_error() -> None:
    with pytest.raises(RuntimeError):
        GamePlay().shuffle()


# -- moves ----------------------------------------------------------------------


def test_concrete_3x3_moves() -> None:
    game = GamePlay(rng=random.Random(3))
    game.initialize(_contents(3), 3)
    grid = game.grid
    assert grid is not None
    tile = grid.get_tile(2, 1)

    assert game.request_move(2, 1)
    assert grid.empty_pos == (2, 1)
    assert grid.get_tile(2, 2) is tile
    assert grid.get_tile(2, 1) is None

    before = _snapshot(game)
    assert not game.request_move(0, 0)
    assert _snapshot(game) == before


@pytest.mark.parametrize(
    "row, col",
    [(2, 2), (1, 1), (0, 0), (0, 2), (3, 2), (2, 3), (-1, 2), (2, -1), (9, 9)],
)
def test_illegal_moves_are_ignored(row: int, col: int) -> None:
    game = GamePlay(rng=random.Random(5))
    game.initialize(_contents(3), 3)
    before = _snapshot(game)

    assert game.request_move(row, col) is False
    assert _snapshot(game) == before


def test_every_adjacent_move_swaps_exactly_two_slots() -> None:
    contents = _contents(4)
    game = GamePlay(rng=random.Random(11))
    game.initialize(contents, 4)
    rng = random.Random(99)

    for _ in range(200):
        grid = game.grid
        assert grid is not None
        old_empty = grid.empty_pos
        target = rng.choice(grid.neighbors())
        before = [row[:] for row in grid.slots]

        assert game.request_move(*target)
        if game.is_won:
            break
        assert grid.empty_pos == target
        assert grid.slots[old_empty[0]][old_empty[1]] is before[target[0]][target[1]]
        changed = [
            (r, c)
            for r in range(4)
            for c in range(4)
            if grid.slots[r][c] is not before[r][c]
        ]
        assert sorted(changed) == sorted([old_empty, target])
        _assert_invariants(game, contents)


# -- solving ----------------------------------------------------------------------


def test_undoing_the_shuffle_solves_the_puzzle() -> None:
    game = _shuffled_3x3()
    assert not game.is_solved()

    for target in [(1, 2), (1, 1), (2, 1)]:
        assert game.request_move(*target)
        assert game.status is PuzzleStatus.SHUFFLED
    assert game.request_move(2, 2)

    assert game.is_solved()
    assert game.is_won
    assert game.status is PuzzleStatus.SOLVED


@pytest.mark.parametrize("seed", range(5))
def test_walk_shuffled_2x2_is_solved_by_legal_moves(seed: int) -> None:
    game = GamePlay(ShuffleMode.WALK, random.Random(seed))
    game.initialize(_contents(2), 2)
    assert game.grid is not None

    for target in _solution(game.grid):
        assert game.request_move(*target)

    assert game.is_won


def test_solving_reveals_the_final_piece() -> None:
    game = _shuffled_3x3()
    for target in [(1, 2), (1, 1), (2, 1), (2, 2)]:
        game.request_move(*target)

    assert game.revealed_piece == "piece-8"
    # The reveal is cosmetic; the corner slot stays empty.
    assert game.grid is not None
    assert game.grid.get_tile(2, 2) is None
    assert game.is_solved()


def test_moves_after_solving_are_ignored() -> None:
    game = _shuffled_3x3()
    for target in [(1, 2), (1, 1), (2, 1), (2, 2)]:
        game.request_move(*target)
    before = _snapshot(game)

    assert not game.request_move(2, 1)
    assert _snapshot(game) == before


def test_reveal_does_nothing_while_unsolved() -> None:
    game = GamePlay(rng=random.Random(2))
    game.initialize(_contents(3), 3)
    game.reveal_on_solve()

    assert game.revealed_piece is None


def test_reshuffle_after_solving_starts_over() -> None:
    game = _shuffled_3x3()
    for target in [(1, 2), (1, 1), (2, 1), (2, 2)]:
        game.request_move(*target)

    game.shuffle()

    assert game.status is PuzzleStatus.SHUFFLED
    assert game.revealed_piece is None
    assert not game.is_solved()


# -- auto-complete ---------------------------------------------------------------


@pytest.mark.parametrize("size", [2, 3, 5])
def test_auto_complete_always_solves(size: int) -> None:
    game = GamePlay(ShuffleMode.PERMUTATION, random.Random(size))
    game.initialize(_contents(size), size)
    fresh = [f"fresh-{i}" for i in range(size * size)]

    game.auto_complete(fresh)

    assert game.is_solved()
    assert game.status is PuzzleStatus.SOLVED
    assert game.grid is not None
    assert game.grid.empty_pos == (size - 1, size - 1)
    assert game.grid.get_tile(0, 0).content == "fresh-0"
    assert game.revealed_piece == fresh[-1]
    _assert_invariants(game, fresh)


def test_auto_complete_before_initialize_is_an_error() -> None:
    with pytest.raises(RuntimeError):
        GamePlay().auto_complete(_contents(3))
