"""
Blob AutoTiles - Settings

Configuration flags for a rebuild pass. Settings are frozen so they cannot
change while a pass is running; use replace() to derive a modified copy.
"""

import dataclasses
import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from .constants import EMPTY_TILE, UNMAPPED_TILE


FLAG_FIELDS = (
    "treat_border_as_solid",
    "treat_special_as_solid",
    "treat_center_variants_as_special",
    "treat_floor_variants_as_special",
)


class SettingsError(ValueError):
    """Raised when settings data cannot be parsed."""


class UnknownTilePolicy(Enum):
    """What happens to a tile the tileset does not know about."""

    CLEAR = "clear"  # replace with the empty tile
    PRESERVE = "preserve"  # leave the tile as it is


@dataclass(frozen=True)
class AutoTileSettings:
    """
    Options controlling how cells are classified.

    Attributes:
        treat_border_as_solid: Cells outside the grid count as solid
        treat_special_as_solid: Special tiles count as solid neighbors and
            are themselves reclassified from their neighbors
        treat_center_variants_as_special: Center variants are left alone
        treat_floor_variants_as_special: Floor variants are left alone
        random_seed: Seed for variant picks; None generates one per pass
        enabled_layers: Layer indices that get autotiled
        unknown_tile_policy: Handling of tiles absent from the tileset
        unmapped_tile: Tile written when a bitmask has no table entry
    """

    treat_border_as_solid: bool = False
    treat_special_as_solid: bool = False
    treat_center_variants_as_special: bool = False
    treat_floor_variants_as_special: bool = False
    random_seed: Optional[int] = None
    enabled_layers: frozenset[int] = field(default_factory=lambda: frozenset({0}))
    unknown_tile_policy: UnknownTilePolicy = UnknownTilePolicy.CLEAR
    unmapped_tile: int = UNMAPPED_TILE

    def __post_init__(self):
        for name in FLAG_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise SettingsError(f"{name} must be true or false, got {value!r}")

        # Accept any iterable of layers, store as frozenset
        if not isinstance(self.enabled_layers, frozenset):
            object.__setattr__(self, "enabled_layers", frozenset(self.enabled_layers))
        if any(not _is_int(layer) for layer in self.enabled_layers):
            raise SettingsError(f"Invalid enabled_layers: {sorted(self.enabled_layers, key=str)}")
        if any(layer < 0 for layer in self.enabled_layers):
            raise SettingsError(f"Negative layer index in {sorted(self.enabled_layers)}")

        if self.random_seed is not None and not _is_int(self.random_seed):
            raise SettingsError(f"random_seed must be an integer, got {self.random_seed!r}")

        # Must never collide with a real tile id or the empty marker
        if (
            not _is_int(self.unmapped_tile)
            or self.unmapped_tile >= 0
            or self.unmapped_tile == EMPTY_TILE
        ):
            raise SettingsError(
                f"unmapped_tile must be negative and not {EMPTY_TILE}, "
                f"got {self.unmapped_tile!r}"
            )

        if isinstance(self.unknown_tile_policy, str):
            object.__setattr__(
                self, "unknown_tile_policy", _parse_policy(self.unknown_tile_policy)
            )

    def replace(self, **changes) -> "AutoTileSettings":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def is_layer_enabled(self, layer: int) -> bool:
        return layer in self.enabled_layers

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AutoTileSettings":
        """
        Build settings from a JSON-style dictionary.

        Missing keys keep their defaults.

        Raises:
            SettingsError: On unknown keys or malformed values.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise SettingsError(f"Unknown settings keys: {', '.join(sorted(unknown))}")

        kwargs = dict(data)
        if "enabled_layers" in kwargs:
            layers = kwargs["enabled_layers"]
            if not isinstance(layers, list):
                raise SettingsError(f"Invalid enabled_layers: expected a list, got {layers!r}")
            try:
                kwargs["enabled_layers"] = frozenset(layers)
            except TypeError as e:
                raise SettingsError(f"Invalid enabled_layers: {e}") from e
        if "unknown_tile_policy" in kwargs:
            kwargs["unknown_tile_policy"] = _parse_policy(kwargs["unknown_tile_policy"])

        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "treat_border_as_solid": self.treat_border_as_solid,
            "treat_special_as_solid": self.treat_special_as_solid,
            "treat_center_variants_as_special": self.treat_center_variants_as_special,
            "treat_floor_variants_as_special": self.treat_floor_variants_as_special,
            "random_seed": self.random_seed,
            "enabled_layers": sorted(self.enabled_layers),
            "unknown_tile_policy": self.unknown_tile_policy.value,
            "unmapped_tile": self.unmapped_tile,
        }

    @classmethod
    def load(cls, path: str | Path) -> "AutoTileSettings":
        """Load settings from a JSON file."""
        with open(path) as f:
            data = json.load(f)
        return cls.from_dict(data)

    def save(self, path: str | Path):
        """Save settings to a JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_policy(value) -> UnknownTilePolicy:
    if isinstance(value, UnknownTilePolicy):
        return value
    try:
        return UnknownTilePolicy(str(value).lower())
    except ValueError:
        choices = ", ".join(p.value for p in UnknownTilePolicy)
        raise SettingsError(
            f"Invalid unknown_tile_policy '{value}' (expected one of: {choices})"
        ) from None
