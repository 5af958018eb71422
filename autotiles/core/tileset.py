"""
Blob AutoTiles - Tileset Definition

Describes which tile id draws each blob shape, and which ids are
interchangeable center and floor variants. Definitions can be loaded
from JSON so a project can autotile a sheet laid out differently from
the canonical one.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path

from . import blob_tileset
from .constants import CENTER_MASK, DIAGONAL_CARDINALS


class TilesetError(ValueError):
    """Raised when a tileset definition is inconsistent."""


def reduce_mask(mask: int) -> int:
    """
    Drop diagonal bits whose neighboring cardinals are not both solid.

    Args:
        mask: Raw 8-neighbor bitmask (0-255)

    Returns:
        The reduced mask identifying the wall shape
    """
    reduced = mask
    for diagonal, (first, second) in DIAGONAL_CARDINALS.items():
        if not (mask & first and mask & second):
            reduced &= ~diagonal
    return reduced


@dataclass(frozen=True)
class TilesetDefinition:
    """Tile ids for every wall shape plus the variant groups."""

    shapes: dict[int, int]
    center_tile: int
    center_variants: tuple[int, ...] = ()
    floor_variants: tuple[int, ...] = ()
    name: str = field(default="custom", compare=False)

    def __post_init__(self):
        self.validate()

    @classmethod
    def canonical(cls) -> "TilesetDefinition":
        """The built-in 47-shape blob tileset."""
        return cls(
            shapes=dict(blob_tileset.SHAPES),
            center_tile=blob_tileset.CENTER_TILE,
            center_variants=blob_tileset.CENTER_VARIANTS,
            floor_variants=blob_tileset.FLOOR_VARIANTS,
            name="blob47",
        )

    @classmethod
    def from_dict(cls, data: dict) -> "TilesetDefinition":
        """
        Build a definition from its JSON form.

        Shape keys may be decimal strings ("28") or hex strings ("0x1C").

        Raises:
            TilesetError: If required keys are missing or values are invalid.
        """
        for key in ("shapes", "center_tile"):
            if key not in data:
                raise TilesetError(f"Missing '{key}' in tileset definition")

        try:
            shapes = {int(str(k), 0): int(v) for k, v in data["shapes"].items()}
        except (TypeError, ValueError) as e:
            raise TilesetError(f"Invalid shape entry: {e}") from e

        return cls(
            shapes=shapes,
            center_tile=int(data["center_tile"]),
            center_variants=tuple(int(t) for t in data.get("center_variants", [])),
            floor_variants=tuple(int(t) for t in data.get("floor_variants", [])),
            name=data.get("name", "custom"),
        )

    @classmethod
    def load(cls, path: str | Path) -> "TilesetDefinition":
        """
        Load a tileset definition from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist.
            json.JSONDecodeError: If the file is not valid JSON.
            TilesetError: If the definition is inconsistent.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Tileset definition not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "center_tile": self.center_tile,
            "center_variants": list(self.center_variants),
            "floor_variants": list(self.floor_variants),
            "shapes": {str(mask): tile for mask, tile in sorted(self.shapes.items())},
        }

    def validate(self) -> None:
        """
        Check the definition for conflicting entries.

        Raises:
            TilesetError: On the first problem found.
        """
        for mask, tile in self.shapes.items():
            if not 0 <= mask <= CENTER_MASK:
                raise TilesetError(f"Shape mask {mask} outside 0-255")
            if reduce_mask(mask) != mask:
                raise TilesetError(
                    f"Shape mask {mask} is not reduced (expected {reduce_mask(mask)})"
                )
            if tile < 0:
                raise TilesetError(f"Shape mask {mask} maps to negative tile id {tile}")

        if self.center_tile < 0:
            raise TilesetError(f"Negative center tile id {self.center_tile}")

        if CENTER_MASK in self.shapes and self.shapes[CENTER_MASK] != self.center_tile:
            raise TilesetError(
                f"center_tile {self.center_tile} does not match shape 255 "
                f"(tile {self.shapes[CENTER_MASK]})"
            )

        for group, ids in (
            ("center_variants", self.center_variants),
            ("floor_variants", self.floor_variants),
        ):
            if len(set(ids)) != len(ids):
                raise TilesetError(f"Duplicate ids in {group}: {list(ids)}")
            if any(t < 0 for t in ids):
                raise TilesetError(f"Negative tile id in {group}: {list(ids)}")

        centers = set(self.center_variants) | {self.center_tile}
        overlap = centers & set(self.floor_variants)
        if overlap:
            raise TilesetError(
                f"Tiles {sorted(overlap)} are both center and floor variants"
            )

        walls = set(self.shapes.values()) - {self.center_tile}
        for group, ids in (
            ("center_variants", self.center_variants),
            ("floor_variants", self.floor_variants),
        ):
            clash = walls & set(ids)
            if clash:
                raise TilesetError(
                    f"Tiles {sorted(clash)} in {group} are also wall shape tiles"
                )
