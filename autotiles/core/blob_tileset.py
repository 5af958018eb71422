"""
Blob AutoTiles - Canonical Blob Tileset

The 47 distinct wall shapes of a convex blob tileset and the tile ids
they are drawn with. Keys are reduced masks: a diagonal bit is only
present when both neighboring cardinals are solid, since otherwise the
diagonal cannot change how the wall looks.

Layout of the bit weights around a cell:

    NW(128)  N(1)  NE(2)
    W(64)    .     E(4)
    SW(32)   S(16) SE(8)
"""

from .constants import N, NE, E, SE, S, SW, W, NW

SINGLE_BLOCK_TILE = 20
CENTER_TILE = 8

# Cosmetic alternatives to CENTER_TILE, picked at random for surrounded cells
CENTER_VARIANTS = (27, 34, 41)

# Interchangeable floor appearances
FLOOR_VARIANTS = (46, 47, 48, 53, 54, 55)

SHAPES = {
    # isolated
    0: SINGLE_BLOCK_TILE,
    # dead ends
    N: 31,
    E: 30,
    S: 28,
    W: 29,
    # straight runs
    N | S: 18,
    E | W: 17,
    # outer corners
    N | E: 10,
    E | S: 3,
    S | W: 4,
    N | W: 11,
    # filled corners
    N | NE | E: 14,
    E | SE | S: 0,
    S | SW | W: 2,
    N | W | NW: 16,
    # tees
    N | E | S: 22,
    E | S | W: 24,
    N | S | W: 23,
    N | E | W: 21,
    N | NE | E | S: 45,
    N | E | SE | S: 43,
    E | SE | S | W: 52,
    E | S | SW | W: 51,
    N | S | SW | W: 42,
    N | S | W | NW: 44,
    N | NE | E | W: 50,
    N | E | W | NW: 49,
    # edges
    N | NE | E | SE | S: 7,
    E | SE | S | SW | W: 1,
    N | S | SW | W | NW: 9,
    N | NE | E | W | NW: 15,
    # crossings
    N | E | S | W: 19,
    N | NE | E | S | W: 12,
    N | E | SE | S | W: 5,
    N | E | S | SW | W: 6,
    N | E | S | W | NW: 13,
    N | NE | E | SE | S | W: 37,
    N | NE | E | S | SW | W: 39,
    N | NE | E | S | W | NW: 38,
    N | E | SE | S | SW | W: 35,
    N | E | SE | S | W | NW: 40,
    N | E | S | SW | W | NW: 36,
    # inner corners
    N | NE | E | SE | S | SW | W: 33,
    N | NE | E | SE | S | W | NW: 26,
    N | NE | E | S | SW | W | NW: 25,
    N | E | SE | S | SW | W | NW: 32,
    # surrounded
    N | NE | E | SE | S | SW | W | NW: CENTER_TILE,
}
