"""Picture builders shared by the test modules."""

from __future__ import annotations

import pygame


def block_colour(row: int, col: int) -> tuple[int, int, int]:
    return (row * 40, col * 40, 200)


def make_picture(width: int, height: int, size: int) -> pygame.Surface:
    """Return a surface whose N×N blocks are each filled with a distinct colour.

    Block ``(r, c)`` is coloured ``block_colour(r, c)``, so a tile's origin
    pixel tells which block it was cut from.
    """
    surf = pygame.Surface((width, height))
    for r in range(size):
        for c in range(size):
            x0, x1 = (c * width) // size, ((c + 1) * width) // size
            y0, y1 = (r * height) // size, ((r + 1) * height) // size
            surf.fill(block_colour(r, c), pygame.Rect(x0, y0, x1 - x0, y1 - y0))
    return surf


def pixel(surf: pygame.Surface, x: int, y: int) -> tuple[int, int, int]:
    r, g, b, _ = surf.get_at((x, y))
    return (r, g, b)
