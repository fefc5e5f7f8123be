"""Configuration for the picture slide puzzle."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_IMAGES_DIR = PROJECT_ROOT / "assets" / "images"


class ShuffleMode(StrEnum):
    WALK = "walk"  # random legal slides from the solved grid, always solvable
    PERMUTATION = "permutation"  # uniform tile permutation, may be unsolvable


@dataclass
class PuzzleConfig:
    """Settings shared by the engine, the session and the frontends."""

    # Grid parameters
    grid_size: int = 3
    min_grid_size: int = 2
    max_grid_size: int = 8

    # Shuffle parameters
    shuffle_mode: ShuffleMode = ShuffleMode.WALK
    walk_factor: int = 100  # legal slides per slot when walking

    # Level images
    images_dir: Path = DEFAULT_IMAGES_DIR
    image_suffixes: tuple[str, ...] = field(
        default=(".png", ".jpg", ".jpeg", ".bmp", ".gif")
    )

    def __post_init__(self) -> None:
        if self.min_grid_size < 2:
            raise ValueError("min_grid_size must be at least 2")
        self.check_grid_size(self.grid_size)

    def check_grid_size(self, size: int) -> None:
        if not self.min_grid_size <= size <= self.max_grid_size:
            raise ValueError(
                f"Grid size must be between {self.min_grid_size} and "
                f"{self.max_grid_size}, got {size}."
            )


def discover_levels(config: PuzzleConfig) -> list[Path]:
    """Return the level images under ``config.images_dir``, sorted by name."""
    if not config.images_dir.is_dir():
        return []
    return sorted(
        p
        for p in config.images_dir.iterdir()
        if p.is_file() and p.suffix.lower() in config.image_suffixes
    )
