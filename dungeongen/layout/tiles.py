# Cell classifications stored in the grid buffer
from enum import IntEnum


class CellType(IntEnum):
    EMPTY = 0  # unallocated void
    FLOOR = 1  # walkable
    WALL = 2  # decorative band around floor, never walkable


EMPTY = CellType.EMPTY
FLOOR = CellType.FLOOR
WALL = CellType.WALL

ASCII_GLYPHS = {EMPTY: " ", FLOOR: ".", WALL: "#"}

__all__ = ["CellType", "EMPTY", "FLOOR", "WALL", "ASCII_GLYPHS"]
