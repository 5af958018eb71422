"""Shared pytest fixtures for autotiling tests."""

import importlib.util
import shutil
from pathlib import Path

import pytest

from autotiles.adapters import NumpyTileGrid
from autotiles.core import AutoTileSettings, BitmaskTable, TilesetDefinition

FIXTURES_DIR = Path(__file__).parent / "fixtures"
TOOLS_DIR = Path(__file__).parent.parent / "tools"


@pytest.fixture
def canonical_table():
    """Lookup table for the built-in blob tileset."""
    return BitmaskTable()


@pytest.fixture
def settings():
    """Default settings with a fixed seed."""
    return AutoTileSettings(random_seed=1234)


@pytest.fixture
def make_grid():
    """Build a single-layer grid from rows listed north first."""

    def _make(rows, buffered=True):
        return NumpyTileGrid.from_rows([rows], buffered=buffered)

    return _make


@pytest.fixture
def room_rows():
    """A 3x3 block of single-block wall tiles."""
    return [
        [20, 20, 20],
        [20, 20, 20],
        [20, 20, 20],
    ]


@pytest.fixture
def room_map_path():
    """Path to the two-layer sample map."""
    return FIXTURES_DIR / "room.json"


@pytest.fixture
def room_map_copy(tmp_path, room_map_path):
    """Writable copy of the sample map."""
    path = tmp_path / "room.json"
    shutil.copy(room_map_path, path)
    return path


@pytest.fixture
def partial_room_map_copy(tmp_path):
    """Writable copy of a map drawn only with ids the partial tileset knows."""
    path = tmp_path / "room_partial_ids.json"
    shutil.copy(FIXTURES_DIR / "room_partial_ids.json", path)
    return path


@pytest.fixture
def partial_tileset_path():
    """Path to a tileset that only knows the shapes of a solid 3x3 room."""
    return FIXTURES_DIR / "partial_tileset.json"


@pytest.fixture
def partial_tileset(partial_tileset_path):
    return TilesetDefinition.load(partial_tileset_path)


def load_tool(name: str):
    """Import a script from tools/ as a module."""
    spec = importlib.util.spec_from_file_location(name, TOOLS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def rebuild_tool():
    return load_tool("rebuild")


@pytest.fixture
def analyze_tool():
    return load_tool("analyze_bitmasks")
