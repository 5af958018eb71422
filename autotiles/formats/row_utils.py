"""
Blob AutoTiles - Text Row Utilities

Parsing and formatting of the tile rows stored in map files. A row is a
space-separated list of decimal tile ids with "." marking an empty cell
and "?" a cell whose bitmask had no tileset entry.

The "?" marker stands for whatever unmapped tile value the map's settings
use, so both directions take it as a parameter.
"""

from typing import List

from ..core.constants import EMPTY_TILE, UNMAPPED_TILE

EMPTY_TOKEN = "."
UNMAPPED_TOKEN = "?"


def parse_row(row_str: str, unmapped_tile: int = UNMAPPED_TILE) -> List[int]:
    """
    Parse a space-separated row to a list of tile ids.

    Args:
        row_str: Row text (e.g., "20 3 . 46")
        unmapped_tile: Value stored for "?" cells

    Returns:
        List of tile ids, EMPTY_TILE for "." and unmapped_tile for "?"

    Raises:
        ValueError: If a token is not a marker or a non-negative integer.

    Example:
        >>> parse_row("20 3 . 46")
        [20, 3, -1, 46]
    """
    row = []
    for token in row_str.split():
        if token == EMPTY_TOKEN:
            row.append(EMPTY_TILE)
            continue
        if token == UNMAPPED_TOKEN:
            row.append(unmapped_tile)
            continue
        value = int(token)
        if value < 0:
            raise ValueError(f"Negative tile id '{token}' (use '{EMPTY_TOKEN}' for empty)")
        row.append(value)
    return row


def format_row(row: List[int], width: int = 0, unmapped_tile: int = UNMAPPED_TILE) -> str:
    """
    Format tile ids as a space-separated row.

    Args:
        row: Tile ids (EMPTY_TILE for empty cells)
        width: Minimum column width; cells are right-aligned when > 0
        unmapped_tile: Value written as "?"

    Example:
        >>> format_row([20, 3, -1, 46])
        '20 3 . 46'
    """
    symbols = {EMPTY_TILE: EMPTY_TOKEN, unmapped_tile: UNMAPPED_TOKEN}
    tokens = [symbols.get(t, str(t)) for t in row]
    return " ".join(token.rjust(width) for token in tokens)


def parse_rows(rows: List[str], unmapped_tile: int = UNMAPPED_TILE) -> List[List[int]]:
    """Parse multiple rows."""
    return [parse_row(row, unmapped_tile) for row in rows]


def format_rows(
    rows: List[List[int]], align: bool = False, unmapped_tile: int = UNMAPPED_TILE
) -> List[str]:
    """
    Format multiple rows.

    Args:
        rows: 2D list of tile ids
        align: Pad every cell to the widest token so columns line up
        unmapped_tile: Value written as "?"
    """
    width = 0
    if align:
        width = max(
            (len(format_row([t], unmapped_tile=unmapped_tile)) for row in rows for t in row),
            default=0,
        )
    return [format_row(row, width, unmapped_tile) for row in rows]
