from __future__ import annotations

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from pathlib import Path  # noqa: E402

import pygame  # noqa: E402
import pytest  # noqa: E402

from helpers import make_picture  # noqa: E402


@pytest.fixture
def picture() -> pygame.Surface:
    return make_picture(300, 300, 3)


@pytest.fixture
def level_files(tmp_path: Path) -> list[Path]:
    """Two 300×300 BMP levels."""
    paths: list[Path] = []
    for name in ("a_dragon.bmp", "b_moon.bmp"):
        path = tmp_path / name
        pygame.image.save(make_picture(300, 300, 3), str(path))
        paths.append(path)
    return paths
