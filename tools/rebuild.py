#!/usr/bin/env python3
"""
Blob AutoTiles - Map Rebuilder

Runs an autotiling pass over a JSON tile map and writes the result.

Settings embedded in the map file are used unless overridden on the
command line.
"""

import argparse
import logging
import sys
from pathlib import Path

from autotiles.adapters import GridUnavailableError
from autotiles.core import (
    GridRebuilder,
    TilesetDefinition,
    UnknownTilePolicy,
)
from autotiles.core.log import setup_logging
from autotiles.formats import TileMapData


# Command-line toggle -> settings field
FLAG_OPTIONS = {
    "border_solid": "treat_border_as_solid",
    "special_solid": "treat_special_as_solid",
    "center_special": "treat_center_variants_as_special",
    "floor_special": "treat_floor_variants_as_special",
}


def parse_layers(text: str) -> frozenset[int]:
    """Parse a comma-separated list of layer indices ("0,2")."""
    try:
        layers = frozenset(int(part) for part in text.split(",") if part.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid layer list: {text}") from None
    if any(l < 0 for l in layers):
        raise argparse.ArgumentTypeError(f"Negative layer index in: {text}")
    return layers


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Autotile a JSON tile map using blob-tileset bitmask rules",
    )
    parser.add_argument("map", type=Path, help="Tile map JSON file")
    parser.add_argument(
        "-o", "--output", type=Path, help="Output file (default: overwrite input)"
    )
    parser.add_argument("--seed", type=int, help="Random seed for variant picks")
    parser.add_argument(
        "--layers", type=parse_layers, help="Comma-separated layer indices to autotile"
    )
    parser.add_argument(
        "--border-solid",
        action=argparse.BooleanOptionalAction,
        help="Treat cells outside the map as solid",
    )
    parser.add_argument(
        "--special-solid",
        action=argparse.BooleanOptionalAction,
        help="Treat special tiles as solid",
    )
    parser.add_argument(
        "--center-special",
        action=argparse.BooleanOptionalAction,
        help="Leave center variant tiles unchanged",
    )
    parser.add_argument(
        "--floor-special",
        action=argparse.BooleanOptionalAction,
        help="Leave floor variant tiles unchanged",
    )
    parser.add_argument(
        "--preserve-unknown",
        action=argparse.BooleanOptionalAction,
        help="Keep tiles the tileset does not know instead of clearing them",
    )
    parser.add_argument("--tileset", type=Path, help="Custom tileset definition JSON")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log per-layer details"
    )
    return parser


def apply_overrides(settings, args):
    """Fold command-line flags into the map's embedded settings."""
    changes = {}
    if args.seed is not None:
        changes["random_seed"] = args.seed
    if args.layers is not None:
        changes["enabled_layers"] = args.layers
    # Toggles left as None keep the map's value
    for option, name in FLAG_OPTIONS.items():
        value = getattr(args, option)
        if value is not None:
            changes[name] = value
    if args.preserve_unknown is not None:
        changes["unknown_tile_policy"] = (
            UnknownTilePolicy.PRESERVE if args.preserve_unknown else UnknownTilePolicy.CLEAR
        )
    return settings.replace(**changes) if changes else settings


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        tile_map = TileMapData()
        tile_map.load(args.map)
        tileset = TilesetDefinition.load(args.tileset) if args.tileset else None
        settings = apply_overrides(tile_map.settings, args)
    except (FileNotFoundError, ValueError, KeyError) as e:
        # SettingsError and TilesetError are ValueErrors
        print(f"Error: {e}", file=sys.stderr)
        return 1

    grid = tile_map.to_grid()
    try:
        report = GridRebuilder(grid, settings=settings, tileset=tileset).rebuild()
    except GridUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    tile_map.update_from_grid(grid)
    # Record the generated seed so the pass can be reproduced
    if settings.random_seed is None:
        settings = settings.replace(random_seed=report.seed)
    tile_map.settings = settings
    output = args.output or args.map
    tile_map.save(output)

    print(report)
    print(f"Wrote: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
