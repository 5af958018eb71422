"""
Blob AutoTiles - Grid adapters.

The adapter contract and an in-memory numpy implementation.
"""

from .base import GridAdapter, GridUnavailableError
from .numpy_grid import NumpyTileGrid

__all__ = ["GridAdapter", "GridUnavailableError", "NumpyTileGrid"]
