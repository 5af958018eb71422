"""
Blob AutoTiles - Tile Classifier

Maps tile ids to the roles the rebuild policy cares about.
"""

from .bitmask_table import BitmaskTable
from .constants import EMPTY_TILE
from .settings import AutoTileSettings


class TileClassifier:
    """Answers role questions about tile ids for one table and settings."""

    def __init__(self, table: BitmaskTable, settings: AutoTileSettings):
        self.table = table
        self.settings = settings

    def is_empty(self, tile: int) -> bool:
        return tile == EMPTY_TILE

    def is_floor_variant(self, tile: int) -> bool:
        return tile in self.table.floor_variants

    def is_center_variant(self, tile: int) -> bool:
        return tile in self.table.center_variants

    def is_wall_tile(self, tile: int) -> bool:
        """True if the tile id is a value in the lookup table."""
        return self.table.contains_tile(tile)

    def is_unmapped(self, tile: int) -> bool:
        """True for the marker a previous pass wrote on a lookup miss."""
        return tile == self.settings.unmapped_tile

    def is_known(self, tile: int) -> bool:
        return (
            self.is_wall_tile(tile)
            or self.is_unmapped(tile)
            or self.is_floor_variant(tile)
            or self.is_center_variant(tile)
        )

    def is_special(self, tile: int) -> bool:
        """
        Check whether a tile is exempt from auto-placement.

        A tile is special when it is a floor variant and floor variants are
        treated as special, when it is a cosmetic center variant and center
        variants are treated as special, or when the tileset does not know
        it at all. The canonical center tile is never special through the
        center variant rule, only its cosmetic alternatives are.
        """
        settings = self.settings
        if settings.treat_floor_variants_as_special and self.is_floor_variant(tile):
            return True
        if (
            settings.treat_center_variants_as_special
            and self.is_center_variant(tile)
            and tile != self.table.center_tile
        ):
            return True
        return not self.is_known(tile)
