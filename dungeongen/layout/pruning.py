"""Dead-end erosion after routing.

``all`` repeatedly clears FLOOR tips (<= 1 FLOOR neighbour) until none remain.
``some`` snapshots the tips of a single scan and clears each with probability
one half, so long dead ends survive as shortened stubs.
"""
from __future__ import annotations

from typing import List

from .config import DeadEndPolicy
from .models import Coord2D, DungeonGrid
from .tiles import EMPTY, FLOOR

SOME_REMOVAL_CHANCE = 0.5


def find_dead_ends(grid: DungeonGrid) -> List[Coord2D]:
    """Interior FLOOR cells with at most one FLOOR 4-neighbour, in row-major order."""
    tips = []
    for y in range(1, grid.height - 1):
        for x in range(1, grid.width - 1):
            if grid.cells[x][y] == FLOOR and grid.floor_neighbor_count(x, y) <= 1:
                tips.append((x, y))
    return tips


def prune_dead_ends(grid: DungeonGrid, policy: DeadEndPolicy, rng) -> int:
    """Apply ``policy`` in place; returns the number of cells cleared."""
    if policy == DeadEndPolicy.NONE:
        return 0
    if policy == DeadEndPolicy.SOME:
        removed = 0
        for x, y in find_dead_ends(grid):
            if rng.random() < SOME_REMOVAL_CHANCE:
                grid.cells[x][y] = EMPTY
                removed += 1
        return removed

    removed = 0
    frontier = find_dead_ends(grid)
    while frontier:
        candidates = set()
        for x, y in frontier:
            if grid.cells[x][y] != FLOOR:
                continue
            if grid.floor_neighbor_count(x, y) > 1:
                continue
            grid.cells[x][y] = EMPTY
            removed += 1
            for nx, ny in grid.neighbors(x, y):
                if 0 < nx < grid.width - 1 and 0 < ny < grid.height - 1 and grid.cells[nx][ny] == FLOOR:
                    candidates.add((nx, ny))
        frontier = sorted(candidates, key=lambda c: (c[1], c[0]))
    return removed


__all__ = ["find_dead_ends", "prune_dead_ends"]
