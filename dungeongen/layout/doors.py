"""Door placement at corridor chokepoints next to rooms.

A candidate is an interior FLOOR cell outside every room whose FLOOR
neighbours are exactly one opposite pair, with a room cell on at least one
end of that pair. Doors never sit on stairs or within Manhattan distance 1 of
another door, and ``door_density`` thins the survivors.
"""
from __future__ import annotations

from typing import Optional

from .models import Door, DoorOrientation, DungeonGrid, new_id
from .tiles import FLOOR


def chokepoint_orientation(grid: DungeonGrid, x: int, y: int) -> Optional[DoorOrientation]:
    """VERTICAL for an east-west passage, HORIZONTAL for north-south, else None."""
    if grid.get(x, y) != FLOOR:
        return None
    n = grid.get(x, y - 1) == FLOOR
    s = grid.get(x, y + 1) == FLOOR
    e = grid.get(x + 1, y) == FLOOR
    w = grid.get(x - 1, y) == FLOOR
    if w and e and not n and not s:
        return DoorOrientation.VERTICAL
    if n and s and not w and not e:
        return DoorOrientation.HORIZONTAL
    return None


def connects_to_room(grid: DungeonGrid, x: int, y: int, orientation: DoorOrientation) -> bool:
    if orientation == DoorOrientation.VERTICAL:
        ends = ((x - 1, y), (x + 1, y))
    else:
        ends = ((x, y - 1), (x, y + 1))
    return any(grid.room_at(ex, ey) is not None for ex, ey in ends)


def _has_door_near(grid: DungeonGrid, x: int, y: int) -> bool:
    return any(abs(d.x - x) + abs(d.y - y) <= 1 for d in grid.doors)


def place_doors(grid: DungeonGrid, density: float, rng) -> int:
    """Rebuild ``grid.doors`` from the current cells. Returns the count placed."""
    grid.doors = []
    for y in range(1, grid.height - 1):
        for x in range(1, grid.width - 1):
            if grid.cells[x][y] != FLOOR:
                continue
            if grid.stair_at(x, y) is not None or grid.room_at(x, y) is not None:
                continue
            orientation = chokepoint_orientation(grid, x, y)
            if orientation is None:
                continue
            if not connects_to_room(grid, x, y, orientation):
                continue
            if _has_door_near(grid, x, y):
                continue
            if rng.random() > density:
                continue
            grid.doors.append(Door(x, y, orientation, id=new_id(rng)))
    return len(grid.doors)


__all__ = ["chokepoint_orientation", "connects_to_room", "place_doors"]
