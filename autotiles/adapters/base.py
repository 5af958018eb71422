"""
Blob AutoTiles - Grid Adapter Contract

The rebuild engine only talks to a host tile map through this interface.
Hosts own the grid storage; the engine reads and writes one cell at a time.
"""

from typing import Protocol, runtime_checkable


class GridUnavailableError(RuntimeError):
    """Raised when the host grid cannot be reached before a rebuild."""


@runtime_checkable
class GridAdapter(Protocol):
    """Access to a layered tile grid owned by a host application."""

    def get_dimensions(self) -> tuple[int, int]:
        """Return (width, height) in cells."""
        ...

    def get_layer_count(self) -> int:
        ...

    def get_tile(self, x: int, y: int, layer: int) -> int:
        """Return the tile id at a cell, or EMPTY_TILE."""
        ...

    def set_tile(self, x: int, y: int, layer: int, tile: int) -> None:
        """Write a tile id (or EMPTY_TILE). Writes may be buffered."""
        ...

    def finalize(self) -> None:
        """Called once after a pass so the host can rebuild derived state."""
        ...
