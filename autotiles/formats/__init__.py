"""
Blob AutoTiles - File formats.

JSON tile map files and the text rows they store tiles in.
"""

from . import row_utils
from .tilemap_data import TileMapData

__all__ = ["TileMapData", "row_utils"]
