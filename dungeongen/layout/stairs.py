"""Stair placement for linking stacked levels.

Up stairs take the centres of the earliest rooms. Down stairs prefer corridor
dead ends (shuffled), then the centres of the latest rooms, never room 0.
A cell holds at most one stair.
"""
from __future__ import annotations

from typing import List

from .models import Coord2D, DungeonGrid, Stair, new_id
from .tiles import FLOOR


def corridor_dead_ends(grid: DungeonGrid) -> List[Coord2D]:
    out = []
    for y in range(1, grid.height - 1):
        for x in range(1, grid.width - 1):
            if grid.cells[x][y] != FLOOR or grid.room_at(x, y) is not None:
                continue
            if grid.floor_neighbor_count(x, y) == 1:
                out.append((x, y))
    return out


def _add(grid: DungeonGrid, x: int, y: int, direction: str, rng) -> bool:
    if grid.stair_at(x, y) is not None:
        return False
    grid.stairs.append(Stair(x, y, direction, id=new_id(rng)))
    return True


def place_stairs(grid: DungeonGrid, up: int, down: int, rng) -> int:
    placed = 0
    ups = 0
    for room in grid.rooms:
        if ups >= up:
            break
        if _add(grid, *room.center, "up", rng):
            ups += 1
    placed += ups

    downs = 0
    if down > 0:
        dead_ends = corridor_dead_ends(grid)
        rng.shuffle(dead_ends)
        while downs < down and dead_ends:
            x, y = dead_ends.pop()
            if _add(grid, x, y, "down", rng):
                downs += 1
        for room in reversed(grid.rooms[1:]):
            if downs >= down:
                break
            if _add(grid, *room.center, "down", rng):
                downs += 1
    return placed + downs


__all__ = ["corridor_dead_ends", "place_stairs"]
