"""Splits a source picture into an N×N grid of tile surfaces."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pygame
from loguru import logger

log = logger.bind(component="partitioner")


class ImageLoadError(RuntimeError):
    """The source image could not be decoded or is too small to cut up."""

    def __init__(self, source: object, reason: str) -> None:
        super().__init__(f"Failed to load image: {source} ({reason})")
        self.source = source
        self.reason = reason


@dataclass(frozen=True)
class Partition:
    """Row-major tile surfaces plus the nominal tile size for layout."""

    tiles: tuple[pygame.Surface, ...]
    tile_width: float
    tile_height: float
    source_size: tuple[int, int]


ImageSource = str | Path | pygame.Surface


def load_image(source: ImageSource) -> pygame.Surface:
    """Decode *source* into a surface.

    Already-decoded surfaces are returned as they are.  Nothing here
    touches the display, so it is safe to call from a worker thread.
    """
    if isinstance(source, pygame.Surface):
        return source
    try:
        image = pygame.image.load(str(source))
    except (pygame.error, OSError) as exc:
        log.error("could not decode {}: {}", source, exc)
        raise ImageLoadError(source, str(exc)) from exc
    log.debug("loaded {} ({}x{})", source, *image.get_size())
    return image


def _edges(length: int, parts: int) -> list[int]:
    # Same floor rule for every boundary, so tiles never overlap or leave gaps.
    return [(i * length) // parts for i in range(parts + 1)]


def partition(image: pygame.Surface, size: int) -> Partition:
    """Cut *image* into ``size * size`` tiles in row-major order.

    Images narrower or shorter than *size* pixels raise ``ImageLoadError``;
    a *size* below 2 is a ``ValueError``.

    Tile ``(r, c)`` covers ``[c·W/N, (c+1)·W/N) × [r·H/N, (r+1)·H/N)`` with
    fractional boundaries floored.  When the image divides evenly every
    tile is exactly ``W/N × H/N``.
    """
    if size < 2:
        raise ValueError(f"Grid size must be at least 2, got {size}.")
    width, height = image.get_size()
    if width < size or height < size:
        reason = f"{width}x{height} is too small for a {size}×{size} grid"
        log.error("cannot partition: {}", reason)
        raise ImageLoadError(image, reason)

    xs = _edges(width, size)
    ys = _edges(height, size)
    tiles: list[pygame.Surface] = []
    for r in range(size):
        for c in range(size):
            rect = pygame.Rect(xs[c], ys[r], xs[c + 1] - xs[c], ys[r + 1] - ys[r])
            tiles.append(image.subsurface(rect).copy())

    log.debug("partitioned {}x{} image into {}×{} tiles", width, height, size, size)
    return Partition(
        tiles=tuple(tiles),
        tile_width=width / size,
        tile_height=height / size,
        source_size=(width, height),
    )


def load_and_partition(source: ImageSource, size: int) -> Partition:
    """Decode *source* and partition it; the loader the session uses."""
    image = load_image(source)
    try:
        return partition(image, size)
    except ImageLoadError as exc:
        raise ImageLoadError(source, exc.reason) from exc
