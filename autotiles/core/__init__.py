"""
Blob AutoTiles core.

Bitmask lookup tables, tile classification, neighbor sampling, tile
resolution and the rebuild pass that ties them together.
"""

from .bitmask_table import BitmaskTable
from .constants import EMPTY_TILE, UNMAPPED_TILE
from .grid_rebuilder import (
    GridRebuilder,
    RebuildInProgressError,
    RebuildReport,
    RebuildState,
    UnmappedBitmask,
)
from .neighbor_sampler import BitmaskComputer, NeighborSampler
from .settings import AutoTileSettings, SettingsError, UnknownTilePolicy
from .tile_classifier import TileClassifier
from .tile_resolver import Resolution, Rule, TileResolver
from .tileset import TilesetDefinition, TilesetError, reduce_mask
from .variant_selector import VariantSelector

__all__ = [
    "AutoTileSettings",
    "BitmaskComputer",
    "BitmaskTable",
    "EMPTY_TILE",
    "GridRebuilder",
    "NeighborSampler",
    "RebuildInProgressError",
    "RebuildReport",
    "RebuildState",
    "Resolution",
    "Rule",
    "SettingsError",
    "TileClassifier",
    "TileResolver",
    "TilesetDefinition",
    "TilesetError",
    "UNMAPPED_TILE",
    "UnknownTilePolicy",
    "UnmappedBitmask",
    "VariantSelector",
    "reduce_mask",
]
