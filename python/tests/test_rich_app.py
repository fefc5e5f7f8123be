"""Terminal frontend tests: key translation and the board table."""

from __future__ import annotations

import random
from pathlib import Path

import pytest
from rich.console import Console

from backend.engine.partitioner import Partition
from backend.engine.session import PuzzleSession
from frontend.cli.rich.app import _action, _render_board


def _numbered_loader(source: Path, size: int) -> Partition:
    return Partition(
        tiles=tuple(range(size * size)),
        tile_width=1.0,
        tile_height=1.0,
        source_size=(size, size),
    )


def _text(table) -> str:
    console = Console(width=80, record=True)
    console.print(table)
    return console.export_text()


@pytest.mark.parametrize(
    "keys, action",
    [
        ("w", "up"),
        ("D", "right"),
        ("\x1b[A", "up"),
        ("\x1b[D", "left"),
        ("\xe0P", "down"),
        ("\x00M", "right"),
        ("\r", "enter"),
        (" ", "enter"),
        ("C", "complete"),
        ("i", "image"),
        ("n", "next"),
        ("r", "restart"),
        ("+", "grow"),
        ("_", "shrink"),
        ("q", "quit"),
        ("\x03", "quit"),
        ("\x1b", "quit"),
        ("\x1b[Z", ""),
        ("\x1bx", ""),
        ("z", ""),
        ("", ""),
    ],
)
def test_keys_map_to_actions(keys: str, action: str) -> None:
    assert _action(keys) == action


def test_board_shows_home_numbers() -> None:
    session = PuzzleSession(
        [Path("numbers.png")], loader=_numbered_loader, rng=random.Random(2)
    )
    session.regenerate()
    session.auto_complete()

    text = _text(_render_board(session.view(), (0, 0)))

    for n in range(1, 10):
        assert str(n) in text


def test_reference_overlay_shows_the_goal_order() -> None:
    session = PuzzleSession(
        [Path("numbers.png")], loader=_numbered_loader, rng=random.Random(2)
    )
    session.regenerate()
    session.toggle_reference()

    lines = _text(_render_board(session.view(), (0, 0))).splitlines()
    rows = [line for line in lines if any(ch.isdigit() for ch in line)]

    assert [[int(tok) for tok in row.split() if tok.isdigit()] for row in rows] == [
        [1, 2, 3],
        [4, 5, 6],
        [7, 8],
    ]
