"""
Blob AutoTiles - Constants

Sentinel tile ids, neighbor bit weights and direction offsets shared by
the classification engine.
"""

# Tile id sentinels (valid tile ids are >= 0)
EMPTY_TILE = -1  # cell holds no tile
UNMAPPED_TILE = -2  # bitmask had no entry in the lookup table

# Neighbor bit weights, clockwise from north
N = 1
NE = 2
E = 4
SE = 8
S = 16
SW = 32
W = 64
NW = 128

CENTER_MASK = 0xFF
ISOLATED_MASK = 0x00

# First extended lookup key; keys at or above it select variant groups
EXTENDED_KEY_BASE = 256

# Direction name -> (weight, dx, dy). The y axis grows toward north,
# matching tile maps whose origin is the bottom-left cell.
DIRECTIONS = (
    ("N", N, 0, 1),
    ("NE", NE, 1, 1),
    ("E", E, 1, 0),
    ("SE", SE, 1, -1),
    ("S", S, 0, -1),
    ("SW", SW, -1, -1),
    ("W", W, -1, 0),
    ("NW", NW, -1, 1),
)

# Diagonal weight -> the two cardinal weights that must both be solid
# for the diagonal to change the tile shape
DIAGONAL_CARDINALS = {
    NE: (N, E),
    SE: (E, S),
    SW: (S, W),
    NW: (W, N),
}
