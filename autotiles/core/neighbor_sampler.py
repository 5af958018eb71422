"""
Blob AutoTiles - Neighbor Sampling

Reads the solidity of the eight cells around a cell and folds them into a
single bitmask:

    128  1  2
     64  .  4
     32 16  8
"""

from .constants import DIRECTIONS, EMPTY_TILE
from .settings import AutoTileSettings
from .tile_classifier import TileClassifier


class NeighborSampler:
    """Solidity (0 or 1) of individual cells, honoring border and special rules."""

    def __init__(
        self,
        grid,
        classifier: TileClassifier,
        settings: AutoTileSettings,
        width: int,
        height: int,
    ):
        self.grid = grid
        self.classifier = classifier
        self.settings = settings
        self.width = width
        self.height = height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def solidity_of(self, x: int, y: int, layer: int) -> int:
        """
        Return 1 if the cell counts as solid wall for its neighbors, else 0.

        Out-of-bounds cells follow treat_border_as_solid, special tiles
        follow treat_special_as_solid, and other floor variants are never solid.
        """
        if not self.in_bounds(x, y):
            return 1 if self.settings.treat_border_as_solid else 0

        tile = self.grid.get_tile(x, y, layer)
        if tile == EMPTY_TILE:
            return 0
        if self.classifier.is_special(tile):
            return 1 if self.settings.treat_special_as_solid else 0
        if self.classifier.is_floor_variant(tile):
            return 0
        return 1


class BitmaskComputer:
    """Computes the 0-255 neighbor bitmask of a cell."""

    def __init__(self, grid, classifier: TileClassifier, sampler: NeighborSampler):
        self.grid = grid
        self.classifier = classifier
        self.sampler = sampler

    def should_compute(self, tile: int) -> bool:
        """
        Whether a cell holding this tile gets its neighbors sampled.

        Empty cells, floors and (unless special tiles count as solid)
        special tiles keep a bitmask of 0.
        """
        if tile == EMPTY_TILE:
            return False
        if self.classifier.is_special(tile):
            return self.sampler.settings.treat_special_as_solid
        if self.classifier.is_floor_variant(tile):
            return False
        return True

    def compute(self, x: int, y: int, layer: int) -> int:
        tile = self.grid.get_tile(x, y, layer)
        if not self.should_compute(tile):
            return 0
        return self.compute_unchecked(x, y, layer)

    def compute_unchecked(self, x: int, y: int, layer: int) -> int:
        """Sum of neighbor weights, without the early exits of compute()."""
        bitmask = 0
        for _name, weight, dx, dy in DIRECTIONS:
            bitmask += self.sampler.solidity_of(x + dx, y + dy, layer) * weight
        return bitmask

    def neighbor_states(self, x: int, y: int, layer: int) -> dict[str, int]:
        """Solidity of each neighbor keyed by compass direction."""
        return {
            name: self.sampler.solidity_of(x + dx, y + dy, layer)
            for name, _weight, dx, dy in DIRECTIONS
        }
