"""
Unit tests for GridRebuilder.
"""

import logging
import random

import pytest

from autotiles.adapters import GridUnavailableError, NumpyTileGrid
from autotiles.core import (
    AutoTileSettings,
    GridRebuilder,
    RebuildInProgressError,
    RebuildState,
    UnknownTilePolicy,
    VariantSelector,
)
from autotiles.core.constants import EMPTY_TILE, UNMAPPED_TILE

FLOORS = {46, 47, 48, 53, 54, 55}
CENTERS = {8, 27, 34, 41}


class RecordingGrid(NumpyTileGrid):
    """Grid that records every adapter call."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.writes = []
        self.finalized = 0

    def set_tile(self, x, y, layer, tile):
        self.writes.append((x, y, layer, tile))
        super().set_tile(x, y, layer, tile)

    def finalize(self):
        self.finalized += 1
        super().finalize()


class BrokenGrid:
    """Grid whose host has gone away."""

    def __init__(self):
        self.writes = []

    def get_dimensions(self):
        raise LookupError("tile map component missing")

    def get_layer_count(self):
        return 1

    def get_tile(self, x, y, layer):
        return 20

    def set_tile(self, x, y, layer, tile):
        self.writes.append((x, y, layer, tile))

    def finalize(self):
        pass


def rebuild(grid, **flags):
    flags.setdefault("random_seed", 1234)
    return GridRebuilder(grid, settings=AutoTileSettings(**flags)).rebuild()


# =============================================================================
# Border Behavior
# =============================================================================

class TestSingleCell:
    """A 1x1 grid exercises the border rules in isolation."""

    def test_isolated_block(self, make_grid):
        grid = make_grid([[20]])
        rebuild(grid)
        assert grid.get_tile(0, 0, 0) == 20

    def test_solid_border_gives_center_variant(self, make_grid):
        grid = make_grid([[20]])
        rebuild(grid, treat_border_as_solid=True)
        assert grid.get_tile(0, 0, 0) in CENTERS

    def test_solid_border_with_special_centers_gives_center_tile(self, make_grid):
        grid = make_grid([[20]])
        rebuild(grid, treat_border_as_solid=True, treat_center_variants_as_special=True)
        assert grid.get_tile(0, 0, 0) == 8

    def test_empty_stays_empty(self, make_grid):
        grid = make_grid([[EMPTY_TILE]])
        rebuild(grid, treat_border_as_solid=True)
        assert grid.get_tile(0, 0, 0) == EMPTY_TILE


# =============================================================================
# Full Passes
# =============================================================================

class TestRoom:
    """A solid 3x3 room resolves to the classic blob layout."""

    def test_room_layout(self, make_grid, room_rows):
        grid = make_grid(room_rows)
        rebuild(grid)
        rows = grid.to_rows(0)
        assert rows[0] == [0, 1, 2]
        assert rows[1][0] == 7 and rows[1][2] == 9
        assert rows[1][1] in CENTERS
        assert rows[2] == [14, 15, 16]

    def test_second_pass_is_stable(self, make_grid, room_rows):
        grid = make_grid(room_rows)
        rebuild(grid)
        first = grid.to_rows(0)
        rebuild(grid)
        assert grid.to_rows(0) == first

    def test_floor_cells_stay_floor(self, make_grid):
        grid = make_grid([[20, 46, 20], [47, 48, 53]])
        rebuild(grid, treat_border_as_solid=True)
        rows = grid.to_rows(0)
        assert {rows[0][1], *rows[1]} <= FLOORS

    def test_floors_do_not_join_walls(self, make_grid):
        grid = make_grid([[20, 46, 20]])
        rebuild(grid)
        rows = grid.to_rows(0)
        assert rows[0][0] == 20
        assert rows[0][2] == 20


class TestUnknownTiles:
    """Unknown tile handling under both policies."""

    def test_unknown_cleared(self, make_grid):
        grid = make_grid([[20, 99, 20]])
        rebuild(grid)
        assert grid.to_rows(0) == [[20, EMPTY_TILE, 20]]

    def test_unknown_preserved(self, make_grid):
        grid = make_grid([[20, 99, 20]])
        rebuild(grid, unknown_tile_policy=UnknownTilePolicy.PRESERVE)
        assert grid.to_rows(0) == [[20, 99, 20]]

    def test_solid_special_shapes_neighbors(self, make_grid):
        grid = make_grid([[20, 99, 20]])
        rebuild(
            grid,
            treat_special_as_solid=True,
            unknown_tile_policy=UnknownTilePolicy.PRESERVE,
        )
        # Dead ends pointing at the special tile
        assert grid.to_rows(0) == [[30, 99, 29]]

    def test_buffered_grid_samples_pre_pass_state(self, make_grid):
        grid = make_grid([[20, 99, 20]])
        rebuild(grid, treat_special_as_solid=True)
        assert grid.to_rows(0) == [[30, EMPTY_TILE, 29]]

    def test_unbuffered_grid_sees_earlier_writes(self, make_grid):
        grid = make_grid([[20, 99, 20]], buffered=False)
        rebuild(grid, treat_special_as_solid=True)
        # The cleared cell is already empty when the east cell is sampled
        assert grid.to_rows(0) == [[30, EMPTY_TILE, 20]]


class TestUnmapped:
    """Lookup misses are reported, not raised."""

    def test_unmapped_cell_reported(self, make_grid, partial_tileset, caplog):
        grid = make_grid([[14, EMPTY_TILE, 0]])
        rebuilder = GridRebuilder(
            grid, settings=AutoTileSettings(random_seed=1), tileset=partial_tileset
        )
        with caplog.at_level(logging.WARNING, logger="autotiles"):
            report = rebuilder.rebuild()

        assert grid.to_rows(0) == [[UNMAPPED_TILE, EMPTY_TILE, UNMAPPED_TILE]]
        assert [(u.x, u.y, u.bitmask) for u in report.unmapped] == [(0, 0, 0), (2, 0, 0)]
        assert "unmapped" in str(report)
        assert caplog.text.count("has no entry") == 2

    def test_mapped_room_has_no_misses(self, make_grid, partial_tileset):
        # Tile 20 is not in the partial tileset; 0 is
        grid = make_grid([[0] * 3 for _ in range(3)])
        rebuilder = GridRebuilder(
            grid, settings=AutoTileSettings(random_seed=1), tileset=partial_tileset
        )
        report = rebuilder.rebuild()
        assert report.unmapped == []
        assert grid.to_rows(0)[1][1] in {8, 27}
        assert grid.to_rows(0)[0] == [0, 1, 2]

    def test_unknown_room_cleared(self, make_grid, room_rows, partial_tileset):
        grid = make_grid(room_rows)
        GridRebuilder(
            grid, settings=AutoTileSettings(random_seed=1), tileset=partial_tileset
        ).rebuild()
        assert grid.to_rows(0) == [[EMPTY_TILE] * 3] * 3

    def test_unmapped_marks_rebuilt_by_full_tileset(self, make_grid, partial_tileset):
        grid = make_grid([[0, EMPTY_TILE, 0]])
        settings = AutoTileSettings(random_seed=1)
        GridRebuilder(grid, settings=settings, tileset=partial_tileset).rebuild()
        assert grid.to_rows(0) == [[UNMAPPED_TILE, EMPTY_TILE, UNMAPPED_TILE]]

        report = GridRebuilder(grid, settings=settings).rebuild()
        assert grid.to_rows(0) == [[20, EMPTY_TILE, 20]]
        assert report.unmapped == []


# =============================================================================
# Layers
# =============================================================================

class TestLayers:
    """Tests for layer selection."""

    def test_only_enabled_layers_change(self):
        grid = NumpyTileGrid.from_rows([[[20, 20]], [[20, 20]]])
        report = rebuild(grid, enabled_layers={1})
        assert grid.to_rows(0) == [[20, 20]]
        assert grid.to_rows(1) == [[30, 29]]
        assert report.layers == [1]

    def test_layer_flags_padded_and_truncated(self):
        rebuilder = GridRebuilder(None, settings=AutoTileSettings(enabled_layers={0, 2, 5}))
        assert rebuilder.layer_flags(3) == [True, False, True]
        assert rebuilder.layer_flags(0) == []

    def test_missing_layer_ignored(self, make_grid):
        grid = make_grid([[20]])
        report = rebuild(grid, enabled_layers={0, 3})
        assert report.layers == [0]


# =============================================================================
# Pass Lifecycle
# =============================================================================

class TestLifecycle:
    """Tests for preconditions, state and adapter calls."""

    def test_no_grid(self):
        with pytest.raises(GridUnavailableError, match="No grid"):
            GridRebuilder(None).rebuild()

    def test_unreachable_grid_is_not_touched(self):
        grid = BrokenGrid()
        with pytest.raises(GridUnavailableError, match="tile map component missing"):
            GridRebuilder(grid).rebuild()
        assert grid.writes == []

    def test_every_cell_written_once_then_finalized(self, room_rows):
        grid = RecordingGrid.from_rows([room_rows])
        report = GridRebuilder(grid, settings=AutoTileSettings(random_seed=3)).rebuild()
        assert len(grid.writes) == 9
        assert grid.finalized == 1
        assert report.cells_visited == 9
        assert report.cells_changed == 9

    def test_write_order_is_x_then_y(self):
        grid = RecordingGrid.from_rows([[[20, 20], [20, 20]]])
        GridRebuilder(grid, settings=AutoTileSettings(random_seed=3)).rebuild()
        assert [(x, y) for x, y, _, _ in grid.writes] == [(0, 0), (0, 1), (1, 0), (1, 1)]

    def test_variant_picks_follow_visit_order(self, make_grid):
        grid = make_grid([[46, 46], [46, 46]])
        rebuild(grid, random_seed=77)

        selector = VariantSelector.seeded(77)
        expected = {cell: selector.pick(FLOORS) for cell in [(0, 0), (0, 1), (1, 0), (1, 1)]}
        for (x, y), tile in expected.items():
            assert grid.get_tile(x, y, 0) == tile

    def test_state_returns_to_idle(self, make_grid):
        rebuilder = GridRebuilder(make_grid([[20]]))
        rebuilder.rebuild()
        assert rebuilder.state is RebuildState.IDLE

    def test_reentrant_rebuild_rejected(self, room_rows):
        class ReentrantGrid(NumpyTileGrid):
            def finalize(self):
                self.rebuilder.rebuild()

        grid = ReentrantGrid.from_rows([room_rows])
        rebuilder = GridRebuilder(grid, settings=AutoTileSettings(random_seed=1))
        grid.rebuilder = rebuilder
        with pytest.raises(RebuildInProgressError):
            rebuilder.rebuild()
        assert rebuilder.state is RebuildState.IDLE

    def test_table_built_once(self, make_grid):
        rebuilder = GridRebuilder(make_grid([[20]]))
        rebuilder.rebuild()
        table = rebuilder.table
        rebuilder.rebuild()
        assert rebuilder.table is table

        rebuilder.invalidate_tables()
        assert rebuilder.table is not table


# =============================================================================
# Seeds and Determinism
# =============================================================================

class TestDeterminism:
    """Tests for reproducible variant picks."""

    @staticmethod
    def _center_field():
        return NumpyTileGrid.from_rows([[[20] * 10 for _ in range(10)]])

    def test_same_seed_same_output(self):
        a, b = self._center_field(), self._center_field()
        rebuild(a, random_seed=5, treat_border_as_solid=True)
        rebuild(b, random_seed=5, treat_border_as_solid=True)
        assert a.tiles.tobytes() == b.tiles.tobytes()

    def test_different_seed_different_output(self):
        a, b = self._center_field(), self._center_field()
        rebuild(a, random_seed=1, treat_border_as_solid=True)
        rebuild(b, random_seed=2, treat_border_as_solid=True)
        assert a.to_rows() != b.to_rows()

    def test_generated_seed_is_reported_and_reusable(self):
        a, b = self._center_field(), self._center_field()
        report = rebuild(a, random_seed=None, treat_border_as_solid=True)
        assert isinstance(report.seed, int)
        rebuild(b, random_seed=report.seed, treat_border_as_solid=True)
        assert a.to_rows() == b.to_rows()

    def test_injected_rng_is_used(self):
        a, b = self._center_field(), self._center_field()
        settings = AutoTileSettings(treat_border_as_solid=True)
        report = GridRebuilder(a, settings=settings, rng=random.Random(21)).rebuild()
        rebuild(b, random_seed=21, treat_border_as_solid=True)
        assert report.seed is None
        assert a.to_rows() == b.to_rows()

    def test_injected_rng_overrides_seed_setting(self):
        a, b = self._center_field(), self._center_field()
        settings = AutoTileSettings(random_seed=5, treat_border_as_solid=True)
        report = GridRebuilder(a, settings=settings, rng=random.Random(99)).rebuild()
        # The settings seed was not used, so it must not be reported
        assert report.seed is None

        rebuild(b, random_seed=99, treat_border_as_solid=True)
        assert a.to_rows() == b.to_rows()
