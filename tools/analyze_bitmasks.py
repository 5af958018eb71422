#!/usr/bin/env python3
"""
Blob AutoTiles - Bitmask Analyzer

Prints the neighbor bitmask of every cell in one layer of a tile map and
the tile each cell would resolve to, without modifying the file.
"""

import argparse
import random
import sys
from collections import Counter
from pathlib import Path

from autotiles.core import (
    BitmaskComputer,
    BitmaskTable,
    NeighborSampler,
    TileClassifier,
    TileResolver,
    TilesetDefinition,
    VariantSelector,
)
from autotiles.formats import TileMapData, row_utils


def analyze_layer(tile_map: TileMapData, layer: int, tileset=None) -> dict:
    """
    Compute bitmasks and resolved tiles for one layer.

    Returns:
        Dictionary with "bitmasks" and "resolved" rows (north first) and a
        "rules" Counter of which resolution rule fired how often.
    """
    settings = tile_map.settings
    table = BitmaskTable(tileset)
    grid = tile_map.to_grid()
    width, height = grid.get_dimensions()

    classifier = TileClassifier(table, settings)
    sampler = NeighborSampler(grid, classifier, settings, width, height)
    computer = BitmaskComputer(grid, classifier, sampler)
    seed = settings.random_seed if settings.random_seed is not None else 0
    resolver = TileResolver(
        table, classifier, VariantSelector(random.Random(seed)), settings
    )

    bitmasks = [[0] * width for _ in range(height)]
    resolved = [[0] * width for _ in range(height)]
    rules = Counter()

    # Same visiting order as a rebuild pass so variant picks match
    for x in range(width):
        for y in range(height):
            row = height - 1 - y
            bitmask = computer.compute(x, y, layer)
            resolution = resolver.resolve(grid.get_tile(x, y, layer), bitmask)
            bitmasks[row][x] = bitmask
            resolved[row][x] = resolution.tile
            rules[resolution.rule.name] += 1

    return {"bitmasks": bitmasks, "resolved": resolved, "rules": rules}


def parse_cell(text: str) -> tuple[int, int]:
    """Parse a cell position given as "X,Y"."""
    try:
        x, y = (int(part) for part in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid cell: {text} (expected X,Y)") from None
    return x, y


def cell_neighbors(tile_map: TileMapData, layer: int, x: int, y: int, tileset=None) -> dict:
    """Solidity of each neighbor of one cell, keyed by compass direction."""
    settings = tile_map.settings
    table = BitmaskTable(tileset)
    grid = tile_map.to_grid()
    width, height = grid.get_dimensions()

    classifier = TileClassifier(table, settings)
    sampler = NeighborSampler(grid, classifier, settings, width, height)
    return BitmaskComputer(grid, classifier, sampler).neighbor_states(x, y, layer)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Show autotile bitmasks for a map layer")
    parser.add_argument("map", type=Path, help="Tile map JSON file")
    parser.add_argument("--layer", type=int, default=0, help="Layer index (default: 0)")
    parser.add_argument("--tileset", type=Path, help="Custom tileset definition JSON")
    parser.add_argument(
        "--cell",
        type=parse_cell,
        help="Also show neighbor states of cell X,Y (y=0 is the south row)",
    )
    args = parser.parse_args(argv)

    try:
        tile_map = TileMapData()
        tile_map.load(args.map)
        tileset = TilesetDefinition.load(args.tileset) if args.tileset else None
    except (FileNotFoundError, ValueError, KeyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not 0 <= args.layer < tile_map.get_layer_count():
        print(
            f"Error: layer {args.layer} not in map "
            f"({tile_map.get_layer_count()} layer(s))",
            file=sys.stderr,
        )
        return 1

    if args.cell is not None and not (
        0 <= args.cell[0] < tile_map.width and 0 <= args.cell[1] < tile_map.height
    ):
        print(
            f"Error: cell {args.cell} outside {tile_map.width}x{tile_map.height} map",
            file=sys.stderr,
        )
        return 1

    result = analyze_layer(tile_map, args.layer, tileset)
    unmapped_tile = tile_map.settings.unmapped_tile

    print(f"Layer {args.layer} ({tile_map.layer_names[args.layer]})")
    print("=" * 50)
    print("\nCurrent tiles:")
    for line in row_utils.format_rows(tile_map.layers[args.layer], True, unmapped_tile):
        print(f"  {line}")
    print("\nBitmasks:")
    for line in row_utils.format_rows(result["bitmasks"], align=True):
        print(f"  {line}")
    print("\nResolved tiles:")
    for line in row_utils.format_rows(result["resolved"], True, unmapped_tile):
        print(f"  {line}")
    print("\nRules applied:")
    for rule, count in sorted(result["rules"].items()):
        print(f"  {rule}: {count}")

    if args.cell is not None:
        x, y = args.cell
        states = cell_neighbors(tile_map, args.layer, x, y, tileset)
        print(f"\nNeighbors of ({x}, {y}):")
        for direction, solid in states.items():
            print(f"  {direction}: {'solid' if solid else 'open'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
