#!/usr/bin/env python3
"""Picture Slide Puzzle.

Usage::

    python main.py                      # interactive menu
    python main.py -f rich -s 4         # Rich terminal, 4×4
    python main.py -f pygame -l 2       # Pygame GUI, third level
    python main.py --levels             # list level images
"""

import importlib
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent
ASSETS_DIR = PROJECT_ROOT / "assets"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.config import PuzzleConfig, ShuffleMode, discover_levels  # noqa: E402
from backend.engine.session import PuzzleSession  # noqa: E402
from backend.logger import setup_logging  # noqa: E402

log = logger.bind(component="app")


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    rich = "rich"
    pygame = "pygame"


_RUNNERS = {
    Frontend.rich: "frontend.cli.rich.app",
    Frontend.pygame: "frontend.gui.pygame.app",
}


# -- helpers ------------------------------------------------------------------


def _print_levels(levels: list[Path], images_dir: Path) -> None:
    console = Console()
    if not levels:
        console.print(f"\n  [dim]No level images in {images_dir}.[/dim]\n")
        return
    table = Table(title="Levels", title_style="bold cyan", border_style="dim")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Name", style="yellow")
    table.add_column("File", style="dim")
    for i, path in enumerate(levels):
        table.add_row(str(i), path.stem, path.name)
    console.print(table)


def _launch(frontend: Frontend, session: PuzzleSession) -> None:
    mod = importlib.import_module(_RUNNERS[frontend])
    mod.run(session)


def _menu_loop(session: PuzzleSession) -> None:
    while True:
        print()
        print("  ====================================")
        print("       P I C T U R E   P U Z Z L E    ")
        print("  ====================================")
        print()
        print("  1.  Play  (Rich Terminal)")
        print("  2.  Play  (Pygame GUI)")
        print("  0.  Quit")
        print()

        choice = input("  Select: ").strip()

        if choice == "0":
            print("\n  Goodbye!\n")
            return
        if choice == "1":
            _launch(Frontend.rich, session)
        elif choice == "2":
            _launch(Frontend.pygame, session)
        else:
            print("  Unknown option.")


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    frontend: Optional[Frontend] = typer.Option(
        None, "-f", "--frontend",
        help="Frontend to launch. Omit for interactive menu.",
    ),
    size: int = typer.Option(
        3, "-s", "--size",
        min=2, max=8,
        help="Grid size (2-8).",
    ),
    level: int = typer.Option(
        0, "-l", "--level",
        min=0,
        help="Index of the starting level.",
    ),
    images_dir: Path = typer.Option(
        ASSETS_DIR / "images", "--images-dir",
        envvar="SLIDE_PUZZLE_IMAGES",
        file_okay=False,
        help="Directory holding the level images.",
    ),
    shuffle: ShuffleMode = typer.Option(
        ShuffleMode.WALK, "--shuffle",
        help="walk: always solvable. permutation: unchecked random order.",
    ),
    levels: bool = typer.Option(
        False, "--levels",
        help="List the level images and exit.",
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level",
        envvar="SLIDE_PUZZLE_LOG_LEVEL",
        help="Minimum level for log output on stderr.",
    ),
) -> None:
    """Picture Slide Puzzle."""
    setup_logging(log_level)
    config = PuzzleConfig(grid_size=size, shuffle_mode=shuffle, images_dir=images_dir)
    found = discover_levels(config)

    if levels:
        _print_levels(found, images_dir)
        return

    if not found:
        log.error("no level images found in {}", images_dir)
        raise typer.Exit(code=1)

    session = PuzzleSession(found, config)
    if level >= len(found):
        raise typer.BadParameter(
            f"there are only {len(found)} levels", param_hint="--level"
        )
    session.select_level(level)

    if frontend is None:
        _menu_loop(session)
        return

    _launch(frontend, session)


if __name__ == "__main__":
    app()
