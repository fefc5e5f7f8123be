from __future__ import annotations

from pathlib import Path

import pytest

from backend.config import PuzzleConfig, ShuffleMode, discover_levels


def test_defaults() -> None:
    config = PuzzleConfig()

    assert config.grid_size == 3
    assert config.shuffle_mode is ShuffleMode.WALK


@pytest.mark.parametrize("size", [0, 1, 9])
def test_grid_size_out_of_bounds(size: int) -> None:
    with pytest.raises(ValueError):
        PuzzleConfig(grid_size=size)


def test_discover_levels_sorts_and_filters(tmp_path: Path) -> None:
    for name in ("moon.JPG", "dragon.png", "notes.txt", "eye.bmp"):
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "nested.png").mkdir()

    levels = discover_levels(PuzzleConfig(images_dir=tmp_path))

    assert [p.name for p in levels] == ["dragon.png", "eye.bmp", "moon.JPG"]


def test_discover_levels_missing_dir(tmp_path: Path) -> None:
    assert discover_levels(PuzzleConfig(images_dir=tmp_path / "missing")) == []
