"""
Blob AutoTiles - Tile Map File

Loads and saves layered tile maps as JSON, together with the autotile
settings the map was authored with.

File layout:

    {
      "width": 4,
      "height": 3,
      "layers": [
        {"name": "walls", "rows": ["20 3 . 46", ...]}
      ],
      "autotile": {"treat_border_as_solid": false, ...}
    }

Rows are listed north first, so the file reads the way the map looks.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..adapters.numpy_grid import NumpyTileGrid
from ..core.constants import EMPTY_TILE
from ..core.settings import AutoTileSettings
from . import row_utils


class TileMapData:
    """A layered tile map loaded from (or destined for) a JSON file."""

    def __init__(self, width: int = 0, height: int = 0):
        self.width = width
        self.height = height
        self.layers: List[List[List[int]]] = []
        self.layer_names: List[str] = []
        self.settings = AutoTileSettings()
        self.metadata: Dict[str, Any] = {}
        self.filepath: Optional[str] = None
        self.modified: bool = False

    def load(self, path: str | Path):
        """
        Load a map from a JSON file.

        Raises:
            ValueError: If a layer's rows do not match the declared size.
            SettingsError: If the embedded settings are malformed.
        """
        with open(path, "r") as f:
            data = json.load(f)

        self.width = data["width"]
        self.height = data["height"]

        # Settings first: "?" cells take their value from unmapped_tile
        self.settings = AutoTileSettings.from_dict(data.get("autotile", {}))
        unmapped_tile = self.settings.unmapped_tile

        self.layers = []
        self.layer_names = []
        for index, layer in enumerate(data["layers"]):
            rows = row_utils.parse_rows(layer["rows"], unmapped_tile)
            if len(rows) != self.height or any(len(r) != self.width for r in rows):
                raise ValueError(
                    f"Layer {index} in {path} is not {self.width}x{self.height}"
                )
            self.layers.append(rows)
            self.layer_names.append(layer.get("name", f"layer_{index}"))

        self.metadata = data.get("metadata", {})

        self.filepath = str(path)
        self.modified = False

    def save(self, path: Optional[str | Path] = None):
        """Save the map to a JSON file (defaults to the path it was loaded from)."""
        if path is None:
            path = self.filepath
        if path is None:
            raise ValueError("No save path specified")

        unmapped_tile = self.settings.unmapped_tile
        data = {
            "width": self.width,
            "height": self.height,
            "layers": [
                {"name": name, "rows": row_utils.format_rows(rows, unmapped_tile=unmapped_tile)}
                for name, rows in zip(self.layer_names, self.layers)
            ],
            "autotile": self.settings.to_dict(),
        }
        if self.metadata:
            data["metadata"] = self.metadata

        with open(path, "w") as f:
            json.dump(data, f, indent=2)

        self.filepath = str(path)
        self.modified = False

    def get_layer_count(self) -> int:
        return len(self.layers)

    def add_layer(self, name: str, rows: Optional[List[List[int]]] = None):
        """Append a layer, empty unless rows are given."""
        if rows is None:
            rows = [[EMPTY_TILE] * self.width for _ in range(self.height)]
        self.layers.append([list(row) for row in rows])
        self.layer_names.append(name)
        self.modified = True

    def to_grid(self, buffered: bool = True) -> NumpyTileGrid:
        """Copy the map into an in-memory grid adapter."""
        if not self.layers:
            return NumpyTileGrid(self.width, self.height, 0, buffered=buffered)
        return NumpyTileGrid.from_rows(self.layers, buffered=buffered)

    def update_from_grid(self, grid: NumpyTileGrid):
        """Copy tiles back from a grid adapter after a rebuild."""
        if grid.get_dimensions() != (self.width, self.height):
            raise ValueError(
                f"Grid is {grid.width}x{grid.height}, map is {self.width}x{self.height}"
            )
        if grid.get_layer_count() != len(self.layers):
            raise ValueError(
                f"Grid has {grid.get_layer_count()} layer(s), map has {len(self.layers)}"
            )
        new_layers = grid.to_rows()
        if new_layers != self.layers:
            self.layers = new_layers
            self.modified = True
