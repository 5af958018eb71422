"""
Blob AutoTiles - Grid Rebuilder

Runs a full autotiling pass over a host grid: for every enabled layer and
every cell, compute the neighbor bitmask, resolve the new tile and write
it back through the grid adapter.

Cells are visited layer by layer (ascending), then x ascending, then y
ascending. Variant picks draw from one random stream in that order, so
the same seed and grid always produce the same result.
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..adapters.base import GridUnavailableError
from .bitmask_table import BitmaskTable
from .log import get_logger
from .neighbor_sampler import BitmaskComputer, NeighborSampler
from .settings import AutoTileSettings
from .tile_classifier import TileClassifier
from .tile_resolver import TileResolver
from .tileset import TilesetDefinition
from .variant_selector import VariantSelector

logger = get_logger(__name__)

SEED_RANGE = 2**31


class RebuildState(Enum):
    IDLE = "idle"
    BUILDING = "building"


class RebuildInProgressError(RuntimeError):
    """Raised when a rebuild is started while another is running."""


@dataclass
class UnmappedBitmask:
    """A cell whose bitmask had no entry in the lookup table."""

    x: int
    y: int
    layer: int
    tile: int
    bitmask: int

    def __str__(self) -> str:
        return (
            f"Layer {self.layer}, Cell ({self.x}, {self.y}): "
            f"bitmask {self.bitmask} (0b{self.bitmask:08b}) unmapped for tile {self.tile}"
        )


@dataclass
class RebuildReport:
    """Summary of one rebuild pass."""

    seed: Optional[int]
    width: int = 0
    height: int = 0
    layers: list[int] = field(default_factory=list)
    cells_visited: int = 0
    cells_changed: int = 0
    unmapped: list[UnmappedBitmask] = field(default_factory=list)

    def __str__(self) -> str:
        lines = [
            f"Rebuilt {self.width}x{self.height} grid, layers {self.layers} (seed {self.seed})",
            f"  {self.cells_changed} of {self.cells_visited} cell(s) changed",
        ]
        if self.unmapped:
            lines.append(f"  {len(self.unmapped)} unmapped bitmask(s):")
            for entry in self.unmapped[:10]:
                lines.append(f"    {entry}")
            if len(self.unmapped) > 10:
                lines.append(f"    ... and {len(self.unmapped) - 10} more")
        return "\n".join(lines)


class GridRebuilder:
    """
    Drives autotiling passes over one grid adapter.

    The lookup table is built on the first pass and reused until
    invalidate_tables() is called. A fresh random stream is seeded for
    every pass unless one was injected.
    """

    def __init__(
        self,
        grid,
        settings: Optional[AutoTileSettings] = None,
        tileset: Optional[TilesetDefinition] = None,
        rng: Optional[random.Random] = None,
    ):
        self.grid = grid
        self.settings = settings if settings is not None else AutoTileSettings()
        self.tileset = tileset
        self.rng = rng
        self.state = RebuildState.IDLE
        self._table: Optional[BitmaskTable] = None

    @property
    def table(self) -> BitmaskTable:
        """The lookup table, built on first access."""
        if self._table is None:
            self._table = BitmaskTable(self.tileset)
            logger.debug(
                f"Built lookup table '{self._table.definition.name}' "
                f"({len(self._table)} entries)"
            )
        return self._table

    def invalidate_tables(self):
        """Drop the cached lookup table so the next pass rebuilds it."""
        self._table = None

    def layer_flags(self, layer_count: int) -> list[bool]:
        """
        Per-layer enabled flags for a grid with layer_count layers.

        Enabled indices past the last layer are dropped.
        """
        flags = [self.settings.is_layer_enabled(l) for l in range(layer_count)]
        stale = sorted(l for l in self.settings.enabled_layers if l >= layer_count)
        if stale:
            logger.debug(f"Ignoring enabled layers {stale}: grid has {layer_count} layer(s)")
        return flags

    def rebuild(self) -> RebuildReport:
        """
        Run one full pass.

        Returns:
            RebuildReport describing the pass

        Raises:
            GridUnavailableError: If the grid cannot be reached; no cell is
                touched in that case.
            RebuildInProgressError: If called while a pass is running.
        """
        if self.state is RebuildState.BUILDING:
            raise RebuildInProgressError("A rebuild pass is already running")

        width, height, layer_count = self._acquire_grid()

        self.state = RebuildState.BUILDING
        try:
            return self._run_pass(width, height, layer_count)
        finally:
            self.state = RebuildState.IDLE

    def _acquire_grid(self) -> tuple[int, int, int]:
        """Read dimensions and layer count before any cell is written."""
        if self.grid is None:
            raise GridUnavailableError("No grid attached to the rebuilder")

        try:
            width, height = self.grid.get_dimensions()
            layer_count = self.grid.get_layer_count()
        except GridUnavailableError:
            raise
        except Exception as e:
            raise GridUnavailableError(f"Could not read grid dimensions: {e}") from e

        if width < 0 or height < 0 or layer_count < 0:
            raise GridUnavailableError(
                f"Invalid grid size {width}x{height} with {layer_count} layer(s)"
            )
        return width, height, layer_count

    def _run_pass(self, width: int, height: int, layer_count: int) -> RebuildReport:
        settings = self.settings
        table = self.table

        seed = settings.random_seed
        if self.rng is not None:
            # The injected stream's state is unknown, so no seed can replay it
            if seed is not None:
                logger.debug(f"Ignoring random_seed {seed}: using the injected random stream")
            seed = None
            rng = self.rng
        else:
            if seed is None:
                seed = random.SystemRandom().randrange(SEED_RANGE)
                logger.info(f"Generated random seed {seed}")
            rng = random.Random(seed)

        classifier = TileClassifier(table, settings)
        sampler = NeighborSampler(self.grid, classifier, settings, width, height)
        computer = BitmaskComputer(self.grid, classifier, sampler)
        resolver = TileResolver(table, classifier, VariantSelector(rng), settings)

        layers = [l for l, enabled in enumerate(self.layer_flags(layer_count)) if enabled]
        report = RebuildReport(seed=seed, width=width, height=height, layers=layers)
        logger.info(f"Rebuilding {width}x{height} grid, layers {layers}, seed {seed}")

        for layer in layers:
            changed_before = report.cells_changed
            for x in range(width):
                for y in range(height):
                    tile = self.grid.get_tile(x, y, layer)
                    bitmask = computer.compute(x, y, layer)
                    resolution = resolver.resolve(tile, bitmask)

                    if resolution.unmapped:
                        report.unmapped.append(UnmappedBitmask(x, y, layer, tile, bitmask))
                    if resolution.tile != tile:
                        report.cells_changed += 1
                    report.cells_visited += 1

                    self.grid.set_tile(x, y, layer, resolution.tile)
            logger.debug(
                f"Layer {layer}: {report.cells_changed - changed_before} cell(s) changed"
            )

        assert tuple(self.grid.get_dimensions()) == (width, height), "grid resized mid-pass"
        self.grid.finalize()
        logger.info(
            f"Rebuild finished: {report.cells_changed}/{report.cells_visited} changed, "
            f"{len(report.unmapped)} unmapped"
        )
        return report
