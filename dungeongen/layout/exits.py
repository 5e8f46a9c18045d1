"""Boundary exits: dig from each edge midpoint inward to the first FLOOR."""
from __future__ import annotations

from typing import List, Optional, Tuple

from .models import Coord2D, DungeonGrid
from .tiles import FLOOR
from .tunnels import dig_line


def raycast_to_floor(grid: DungeonGrid, start: Coord2D, step: Coord2D) -> Optional[Coord2D]:
    x, y = start
    dx, dy = step
    while 0 <= x < grid.width and 0 <= y < grid.height:
        if grid.cells[x][y] == FLOOR:
            return x, y
        x += dx
        y += dy
    return None


def edge_probes(grid: DungeonGrid) -> List[Tuple[Coord2D, Coord2D]]:
    """(start, inward step) for the N, S, W and E edge midpoints."""
    mid_x, mid_y = grid.width // 2, grid.height // 2
    return [
        ((mid_x, 0), (0, 1)),
        ((mid_x, grid.height - 1), (0, -1)),
        ((0, mid_y), (1, 0)),
        ((grid.width - 1, mid_y), (-1, 0)),
    ]


def place_exits(grid: DungeonGrid) -> int:
    """Carve up to four edge-reaching corridors. Returns how many were dug.

    A direction whose ray crosses the whole grid without meeting FLOOR is skipped.
    """
    dug = 0
    for start, step in edge_probes(grid):
        hit = raycast_to_floor(grid, start, step)
        if hit is None:
            continue
        dig_line(grid, hit, start)
        dug += 1
    return dug


__all__ = ["edge_probes", "place_exits", "raycast_to_floor"]
