"""
Blob AutoTiles - In-Memory Grid

A numpy-backed layered tile grid implementing the GridAdapter contract.
Used by the command-line tools and tests, and usable directly by hosts
that keep their maps as arrays.
"""

from typing import Iterable, Optional, Sequence

import numpy as np

from ..core.constants import EMPTY_TILE


class NumpyTileGrid:
    """
    Layered tile grid stored as a (layers, height, width) int32 array.

    Cell (x, y) lives at array[layer, y, x], with y = 0 the southmost row.

    When buffered, set_tile() writes go to a pending copy that finalize()
    publishes, so every read during a pass sees the grid as it was when
    the pass started.
    """

    def __init__(
        self,
        width: int,
        height: int,
        layers: int = 1,
        buffered: bool = True,
        tiles: Optional[np.ndarray] = None,
    ):
        if width < 0 or height < 0 or layers < 0:
            raise ValueError(f"Invalid grid size {width}x{height}x{layers}")

        if tiles is None:
            tiles = np.full((layers, height, width), EMPTY_TILE, dtype=np.int32)
        elif tiles.shape != (layers, height, width):
            raise ValueError(
                f"Tile array shape {tiles.shape} does not match "
                f"({layers}, {height}, {width})"
            )

        self.width = width
        self.height = height
        self.layers = layers
        self.buffered = buffered
        self._tiles = np.array(tiles, dtype=np.int32)
        self._pending: Optional[np.ndarray] = None
        self.build_count = 0

    @classmethod
    def from_rows(
        cls, layer_rows: Sequence[Sequence[Sequence[int]]], buffered: bool = True
    ) -> "NumpyTileGrid":
        """
        Build a grid from rows listed north first, one row list per layer.

        Example:
            NumpyTileGrid.from_rows([[[0, 0], [-1, 0]]]) makes a 2x2 grid
            whose south-west cell is empty.
        """
        if not layer_rows:
            return cls(0, 0, 0, buffered=buffered)

        height = len(layer_rows[0])
        width = len(layer_rows[0][0]) if height else 0
        for layer_idx, rows in enumerate(layer_rows):
            if len(rows) != height or any(len(row) != width for row in rows):
                raise ValueError(f"Layer {layer_idx} is not {width}x{height}")

        # Flip so array row 0 is the south edge
        tiles = np.array(layer_rows, dtype=np.int32).reshape(len(layer_rows), height, width)
        tiles = tiles[:, ::-1, :]
        return cls(width, height, len(layer_rows), buffered=buffered, tiles=tiles)

    @property
    def tiles(self) -> np.ndarray:
        """Read-only view of the published tile array."""
        view = self._tiles.view()
        view.flags.writeable = False
        return view

    def to_rows(self, layer: Optional[int] = None) -> list:
        """
        Rows listed north first, for one layer or (layer=None) all layers.
        """
        if layer is not None:
            self._check_layer(layer)
            return self._tiles[layer, ::-1, :].tolist()
        return [self._tiles[l, ::-1, :].tolist() for l in range(self.layers)]

    def copy(self) -> "NumpyTileGrid":
        return NumpyTileGrid(
            self.width, self.height, self.layers, buffered=self.buffered, tiles=self._tiles
        )

    def fill(self, tile: int, cells: Iterable[tuple[int, int]], layer: int = 0):
        """Set a group of cells directly, bypassing any write buffer."""
        self._check_layer(layer)
        for x, y in cells:
            self._check_cell(x, y)
            self._tiles[layer, y, x] = tile

    # GridAdapter contract

    def get_dimensions(self) -> tuple[int, int]:
        return self.width, self.height

    def get_layer_count(self) -> int:
        return self.layers

    def get_tile(self, x: int, y: int, layer: int) -> int:
        self._check_layer(layer)
        self._check_cell(x, y)
        return int(self._tiles[layer, y, x])

    def set_tile(self, x: int, y: int, layer: int, tile: int) -> None:
        self._check_layer(layer)
        self._check_cell(x, y)
        if not self.buffered:
            self._tiles[layer, y, x] = tile
            return
        if self._pending is None:
            self._pending = self._tiles.copy()
        self._pending[layer, y, x] = tile

    def finalize(self) -> None:
        if self._pending is not None:
            self._tiles = self._pending
            self._pending = None
        self.build_count += 1

    def _check_cell(self, x: int, y: int):
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"Cell ({x}, {y}) outside {self.width}x{self.height} grid"
            )

    def _check_layer(self, layer: int):
        if not 0 <= layer < self.layers:
            raise IndexError(f"Layer {layer} outside 0-{self.layers - 1}")
