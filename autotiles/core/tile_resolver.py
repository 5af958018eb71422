"""
Blob AutoTiles - Tile Resolution

Decides the new tile id of a cell from its current tile and bitmask.
Rules are checked in order and the first match wins:

    1. floor variant, floors not special   -> random floor variant
    2. floor variant, floors special       -> unchanged
    3. bitmask 255, centers not special    -> random center variant
    4. center variant, centers special     -> unchanged
    5. lookup table tile or unmapped mark  -> table lookup of the bitmask
    6. anything else                       -> unknown tile policy
"""

from dataclasses import dataclass
from enum import IntEnum

from .bitmask_table import BitmaskTable
from .constants import CENTER_MASK, EMPTY_TILE
from .log import get_logger
from .settings import AutoTileSettings, UnknownTilePolicy
from .tile_classifier import TileClassifier
from .variant_selector import VariantSelector

logger = get_logger(__name__)


class Rule(IntEnum):
    """Which resolution rule produced a tile."""

    RANDOM_FLOOR = 1
    KEEP_FLOOR = 2
    RANDOM_CENTER = 3
    KEEP_CENTER = 4
    LOOKUP = 5
    UNKNOWN = 6


@dataclass(frozen=True)
class Resolution:
    tile: int
    rule: Rule
    unmapped: bool = False


class TileResolver:
    """Applies the resolution rules for one table, settings and random stream."""

    def __init__(
        self,
        table: BitmaskTable,
        classifier: TileClassifier,
        selector: VariantSelector,
        settings: AutoTileSettings,
    ):
        self.table = table
        self.classifier = classifier
        self.selector = selector
        self.settings = settings

    def resolve(self, tile: int, bitmask: int) -> Resolution:
        settings = self.settings
        is_floor = self.classifier.is_floor_variant(tile)

        if is_floor and not settings.treat_floor_variants_as_special:
            return Resolution(self.selector.pick(self.table.floor_variants), Rule.RANDOM_FLOOR)
        if is_floor:
            return Resolution(tile, Rule.KEEP_FLOOR)

        if bitmask == CENTER_MASK and not settings.treat_center_variants_as_special:
            return Resolution(self.selector.pick(self.table.center_variants), Rule.RANDOM_CENTER)
        if self.classifier.is_center_variant(tile) and settings.treat_center_variants_as_special:
            return Resolution(tile, Rule.KEEP_CENTER)

        # Unmapped cells were walls; look them up again
        if self.classifier.is_wall_tile(tile) or self.classifier.is_unmapped(tile):
            new_tile = self.table.lookup(bitmask)
            if new_tile is None:
                logger.warning(
                    f"Bitmask {bitmask} has no entry in tileset "
                    f"'{self.table.definition.name}' (tile {tile}); "
                    f"writing {settings.unmapped_tile}"
                )
                return Resolution(settings.unmapped_tile, Rule.LOOKUP, unmapped=True)
            return Resolution(new_tile, Rule.LOOKUP)

        if settings.unknown_tile_policy is UnknownTilePolicy.PRESERVE:
            return Resolution(tile, Rule.UNKNOWN)
        return Resolution(EMPTY_TILE, Rule.UNKNOWN)
