"""
Blob AutoTiles

Picks the blob-tileset tile for every cell of a layered grid from the
solidity of its eight neighbors.
"""

from .adapters import GridAdapter, GridUnavailableError, NumpyTileGrid
from .core import (
    EMPTY_TILE,
    UNMAPPED_TILE,
    AutoTileSettings,
    BitmaskTable,
    GridRebuilder,
    RebuildReport,
    TilesetDefinition,
    UnknownTilePolicy,
)

__version__ = "0.1.0"

__all__ = [
    "AutoTileSettings",
    "BitmaskTable",
    "EMPTY_TILE",
    "GridAdapter",
    "GridRebuilder",
    "GridUnavailableError",
    "NumpyTileGrid",
    "RebuildReport",
    "TilesetDefinition",
    "UNMAPPED_TILE",
    "UnknownTilePolicy",
]
