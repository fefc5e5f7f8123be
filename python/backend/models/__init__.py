from backend.models.grid import Grid
from backend.models.tile import Tile

__all__ = ["Grid", "Tile"]
