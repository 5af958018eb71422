"""
Unit tests for map file rows and TileMapData.
"""

import json

import pytest

from autotiles.adapters import NumpyTileGrid
from autotiles.core import AutoTileSettings, SettingsError
from autotiles.core.constants import EMPTY_TILE, UNMAPPED_TILE
from autotiles.formats import TileMapData, row_utils


# =============================================================================
# Row Utilities
# =============================================================================

class TestRows:
    """Tests for row_utils parsing and formatting."""

    def test_parse_row(self):
        assert row_utils.parse_row("20 3 . 46") == [20, 3, EMPTY_TILE, 46]

    def test_parse_unmapped_marker(self):
        assert row_utils.parse_row("? 0") == [UNMAPPED_TILE, 0]

    def test_parse_rejects_negative(self):
        with pytest.raises(ValueError, match="Negative tile id"):
            row_utils.parse_row("20 -5")

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            row_utils.parse_row("20 wall")

    def test_format_row(self):
        assert row_utils.format_row([20, 3, EMPTY_TILE, UNMAPPED_TILE]) == "20 3 . ?"

    def test_format_rows_aligned(self):
        assert row_utils.format_rows([[1, 20], [EMPTY_TILE, 3]], align=True) == [
            " 1 20",
            " .  3",
        ]

    def test_format_rows_empty(self):
        assert row_utils.format_rows([], align=True) == []

    def test_custom_unmapped_value(self):
        assert row_utils.parse_row("? 3", unmapped_tile=-5) == [-5, 3]
        assert row_utils.format_row([-5, 3], unmapped_tile=-5) == "? 3"
        assert row_utils.format_rows([[-5, 20]], align=True, unmapped_tile=-5) == [" ? 20"]


# =============================================================================
# Map Files
# =============================================================================

class TestTileMapData:
    """Tests for loading and saving map files."""

    def test_load_fixture(self, room_map_path):
        tile_map = TileMapData()
        tile_map.load(room_map_path)
        assert (tile_map.width, tile_map.height) == (5, 4)
        assert tile_map.layer_names == ["walls", "decor"]
        assert tile_map.layers[0][0] == [20, 20, 20, EMPTY_TILE, 46]
        assert tile_map.settings.random_seed == 7
        assert tile_map.settings.enabled_layers == frozenset({0})
        assert not tile_map.modified

    def test_save_and_reload(self, room_map_path, tmp_path):
        tile_map = TileMapData()
        tile_map.load(room_map_path)
        out = tmp_path / "out.json"
        tile_map.save(out)

        reloaded = TileMapData()
        reloaded.load(out)
        assert reloaded.layers == tile_map.layers
        assert reloaded.layer_names == tile_map.layer_names
        assert reloaded.settings == tile_map.settings

    def test_custom_unmapped_tile_round_trip(self, tmp_path):
        tile_map = TileMapData(2, 1)
        tile_map.settings = AutoTileSettings(unmapped_tile=-5)
        tile_map.add_layer("walls", [[-5, 20]])
        path = tmp_path / "marks.json"
        tile_map.save(path)

        assert json.loads(path.read_text())["layers"][0]["rows"] == ["? 20"]
        reloaded = TileMapData()
        reloaded.load(path)
        assert reloaded.layers == [[[-5, 20]]]

    def test_save_without_path(self):
        with pytest.raises(ValueError, match="No save path"):
            TileMapData(1, 1).save()

    def test_size_mismatch_rejected(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({
            "width": 3, "height": 1, "layers": [{"rows": ["20 20"]}],
        }))
        with pytest.raises(ValueError, match="not 3x1"):
            TileMapData().load(path)

    def test_bad_settings_rejected(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({
            "width": 1, "height": 1, "layers": [{"rows": ["20"]}],
            "autotile": {"treat_lava_as_solid": True},
        }))
        with pytest.raises(SettingsError):
            TileMapData().load(path)

    def test_missing_settings_use_defaults(self, tmp_path):
        path = tmp_path / "plain.json"
        path.write_text(json.dumps({"width": 1, "height": 1, "layers": [{"rows": ["20"]}]}))
        tile_map = TileMapData()
        tile_map.load(path)
        assert tile_map.layer_names == ["layer_0"]
        assert tile_map.settings.random_seed is None

    def test_add_layer(self):
        tile_map = TileMapData(2, 1)
        tile_map.add_layer("walls")
        assert tile_map.layers == [[[EMPTY_TILE, EMPTY_TILE]]]
        assert tile_map.modified


class TestGridConversion:
    """Tests for moving tiles between maps and grid adapters."""

    def test_to_grid_orientation(self, room_map_path):
        tile_map = TileMapData()
        tile_map.load(room_map_path)
        grid = tile_map.to_grid()
        assert grid.get_dimensions() == (5, 4)
        assert grid.get_layer_count() == 2
        # North-east corner of the walls layer
        assert grid.get_tile(4, 3, 0) == 46
        assert grid.get_tile(0, 0, 0) == EMPTY_TILE

    def test_update_from_grid(self):
        tile_map = TileMapData(2, 1)
        tile_map.add_layer("walls", [[20, 20]])
        tile_map.modified = False

        grid = tile_map.to_grid(buffered=False)
        grid.set_tile(0, 0, 0, 30)
        tile_map.update_from_grid(grid)
        assert tile_map.layers == [[[30, 20]]]
        assert tile_map.modified

    def test_update_from_wrong_size_grid(self):
        tile_map = TileMapData(2, 1)
        tile_map.add_layer("walls")
        with pytest.raises(ValueError, match="Grid is 3x1"):
            tile_map.update_from_grid(NumpyTileGrid(3, 1))

    def test_empty_map_grid(self):
        grid = TileMapData(2, 2).to_grid()
        assert grid.get_layer_count() == 0
