"""Corridor carving between room centres.

Three styles share one signature, ``carve(grid, a, b, rng, **opts) -> bool``,
returning True when the preferred route failed and the L-path fallback was
used instead. Every style writes only FLOOR.
"""
from __future__ import annotations

import heapq
from itertools import count
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from .config import CorridorStyle
from .models import Coord2D, DungeonGrid, Room
from .tiles import FLOOR

FLOOR_STEP_COST = 1
DIG_STEP_COST = 5
FOREIGN_ROOM_PENALTY = 50


def carve_h(grid: DungeonGrid, x1: int, x2: int, y: int) -> None:
    for x in range(min(x1, x2), max(x1, x2) + 1):
        grid.set(x, y, FLOOR)


def carve_v(grid: DungeonGrid, y1: int, y2: int, x: int) -> None:
    for y in range(min(y1, y2), max(y1, y2) + 1):
        grid.set(x, y, FLOOR)


def carve_l_path(grid: DungeonGrid, a: Coord2D, b: Coord2D, rng, horizontal_first: Optional[bool] = None) -> None:
    """One orthogonal bend; the leg order is drawn from ``rng`` unless given."""
    (x1, y1), (x2, y2) = a, b
    if horizontal_first is None:
        horizontal_first = rng.random() < 0.5
    if horizontal_first:
        carve_h(grid, x1, x2, y1)
        carve_v(grid, y1, y2, x2)
    else:
        carve_v(grid, y1, y2, x1)
        carve_h(grid, x1, x2, y2)


def line_cells(x0: int, y0: int, x1: int, y1: int) -> List[Coord2D]:
    """Bresenham line with an extra orthogonal cell on each diagonal step.

    Consecutive cells always share an edge, so a carved line is walkable.
    """
    dx, dy = abs(x1 - x0), abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy
    out = [(x0, y0)]
    while (x0, y0) != (x1, y1):
        e2 = 2 * err
        step_x = e2 > -dy
        step_y = e2 < dx
        if step_x:
            err -= dy
            x0 += sx
        if step_x and step_y:
            out.append((x0, y0))
        if step_y:
            err += dx
            y0 += sy
        out.append((x0, y0))
    return out


def dig_line(grid: DungeonGrid, a: Coord2D, b: Coord2D) -> int:
    cells = line_cells(a[0], a[1], b[0], b[1])
    for x, y in cells:
        grid.set(x, y, FLOOR)
    return len(cells)


def _penalty_cells(rooms: Iterable[Room], skip: Tuple[Room, ...]) -> Set[Coord2D]:
    cells: Set[Coord2D] = set()
    for room in rooms:
        if any(room is s for s in skip):
            continue
        for x in range(room.x - 1, room.right + 1):
            for y in range(room.y - 1, room.bottom + 1):
                cells.add((x, y))
    return cells


def astar_route(grid: DungeonGrid, start: Coord2D, goal: Coord2D, rng=None, noise: float = 0.0,
                penalized: Optional[Set[Coord2D]] = None) -> Optional[List[Coord2D]]:
    """4-connected A* from ``start`` to ``goal``.

    Stepping onto FLOOR costs 1, digging costs 5, ``penalized`` cells add 50 and
    ``noise`` adds ``rng.random() * noise * 10`` per step. The border ring and
    cells outside the mask are impassable. Returns the path (start..goal) or
    None when the goal cannot be reached.
    """
    if start == goal:
        return [start]
    w, h = grid.width, grid.height
    gx, gy = goal
    tie = count()
    frontier = [(0, next(tie), 0, start)]
    came_from: Dict[Coord2D, Optional[Coord2D]] = {start: None}
    cost_so_far: Dict[Coord2D, float] = {start: 0}
    found = False
    while frontier:
        _, _, g_cost, current = heapq.heappop(frontier)
        if current == goal:
            found = True
            break
        cx, cy = current
        if g_cost > cost_so_far[current]:
            continue  # stale entry
        for nx, ny in ((cx + 1, cy), (cx - 1, cy), (cx, cy + 1), (cx, cy - 1)):
            if nx <= 0 or nx >= w - 1 or ny <= 0 or ny >= h - 1:
                continue
            if not grid.mask[nx][ny]:
                continue
            step = FLOOR_STEP_COST if grid.cells[nx][ny] == FLOOR else DIG_STEP_COST
            if penalized and (nx, ny) in penalized:
                step += FOREIGN_ROOM_PENALTY
            if noise > 0 and rng is not None:
                step += rng.random() * noise * 10
            new_cost = cost_so_far[current] + step
            nxt = (nx, ny)
            if nxt not in cost_so_far or new_cost < cost_so_far[nxt]:
                cost_so_far[nxt] = new_cost
                priority = new_cost + abs(gx - nx) + abs(gy - ny)
                heapq.heappush(frontier, (priority, next(tie), new_cost, nxt))
                came_from[nxt] = current
    if not found:
        return None
    path = []
    node: Optional[Coord2D] = goal
    while node is not None:
        path.append(node)
        node = came_from[node]
    path.reverse()
    return path


def carve_straight(grid: DungeonGrid, a: Room, b: Room, rng, **_opts) -> bool:
    dig_line(grid, a.center, b.center)
    return False


def carve_l(grid: DungeonGrid, a: Room, b: Room, rng, **_opts) -> bool:
    carve_l_path(grid, a.center, b.center, rng)
    return False


def carve_errant(grid: DungeonGrid, a: Room, b: Room, rng, noise: float = 0.2,
                 avoid_other_rooms: bool = True, **_opts) -> bool:
    penalized = _penalty_cells(grid.rooms, (a, b)) if avoid_other_rooms else None
    path = astar_route(grid, a.center, b.center, rng=rng, noise=noise, penalized=penalized)
    if path is None:
        # Horizontal leg first, matching the fixed fallback shape
        carve_l_path(grid, a.center, b.center, rng, horizontal_first=True)
        return True
    for x, y in path:
        grid.set(x, y, FLOOR)
    return False


CORRIDOR_CARVERS: Dict[CorridorStyle, Callable[..., bool]] = {
    CorridorStyle.STRAIGHT: carve_straight,
    CorridorStyle.L_PATH: carve_l,
    CorridorStyle.ERRANT: carve_errant,
}


__all__ = [
    "CORRIDOR_CARVERS",
    "astar_route",
    "carve_errant",
    "carve_l",
    "carve_l_path",
    "carve_straight",
    "dig_line",
    "line_cells",
]
