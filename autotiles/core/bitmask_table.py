"""
Blob AutoTiles - Bitmask Lookup Table

Immutable mapping from neighbor bitmask to tile id, generated from a
TilesetDefinition by expanding every raw 8-bit mask onto its shape.
Extended keys (256 and up) select the center and floor variant groups.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from .constants import CENTER_MASK, EXTENDED_KEY_BASE
from .tileset import TilesetDefinition, TilesetError, reduce_mask


def expand_shapes(shapes: Mapping[int, int]) -> dict[int, int]:
    """
    Expand reduced shape masks to every raw mask that reduces onto them.

    Args:
        shapes: Reduced mask -> tile id

    Returns:
        Raw mask (0-255) -> tile id. Raw masks whose shape is not defined
        are left out.
    """
    entries = {}
    for mask in range(CENTER_MASK + 1):
        shape = reduce_mask(mask)
        if shape in shapes:
            entries[mask] = shapes[shape]
    return entries


class BitmaskTable:
    """
    Bitmask -> tile id lookup, built once and never modified.

    Attributes:
        definition: The tileset the table was generated from
        center_tile: Canonical center tile id (bitmask 255)
        center_variants: Canonical center id plus its cosmetic variants
        floor_variants: Interchangeable floor tile ids
    """

    def __init__(self, definition: Optional[TilesetDefinition] = None):
        if definition is None:
            definition = TilesetDefinition.canonical()
        self.definition = definition

        entries = expand_shapes(definition.shapes)

        # Variant groups live on synthetic keys past the raw mask range
        key = EXTENDED_KEY_BASE
        for tile in definition.center_variants + definition.floor_variants:
            if key in entries:
                raise TilesetError(f"Duplicate lookup key {key}")
            entries[key] = tile
            key += 1

        self._entries: Mapping[int, int] = MappingProxyType(entries)
        self._values = frozenset(entries.values())
        self._masks_by_tile: dict[int, tuple[int, ...]] = {}
        for mask, tile in sorted(entries.items()):
            if mask <= CENTER_MASK:
                self._masks_by_tile[tile] = self._masks_by_tile.get(tile, ()) + (mask,)

        self.center_tile = definition.center_tile
        self.center_variants = frozenset(definition.center_variants) | {
            definition.center_tile
        }
        self.floor_variants = frozenset(definition.floor_variants)

    @property
    def entries(self) -> Mapping[int, int]:
        """Read-only view of every key -> tile id pair."""
        return self._entries

    @property
    def wall_tiles(self) -> frozenset[int]:
        """Tile ids reachable from a raw neighbor bitmask."""
        return frozenset(self._masks_by_tile)

    @property
    def shape_count(self) -> int:
        return len(set(reduce_mask(m) for m in self._entries if m <= CENTER_MASK))

    def lookup(self, bitmask: int) -> int | None:
        """Return the tile id for a bitmask, or None when it has no entry."""
        return self._entries.get(bitmask)

    def contains_tile(self, tile: int) -> bool:
        """True if the tile id appears as a value anywhere in the table."""
        return tile in self._values

    def masks_for(self, tile: int) -> tuple[int, ...]:
        """All raw bitmasks (0-255) that resolve to the given tile id."""
        return self._masks_by_tile.get(tile, ())

    def missing_masks(self) -> list[int]:
        """Raw bitmasks with no entry (gaps in a partial tileset)."""
        return [m for m in range(CENTER_MASK + 1) if m not in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, bitmask: int) -> bool:
        return bitmask in self._entries
