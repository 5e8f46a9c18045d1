"""Envelope builders: stamp the carvable region onto the grid mask.

Each builder takes ``(grid, rng)`` and only writes the mask. Shapes make no
connectivity promise; routing deals with whatever the envelope leaves.
"""
from __future__ import annotations

import math
from typing import Callable, Dict

from .config import MaskShape
from .models import DungeonGrid

CAVE_FILL = 0.55
CAVE_ITERATIONS = 5


def rectangle_mask(grid: DungeonGrid, rng=None) -> None:
    """Everything except the outermost ring."""
    for x in range(1, grid.width - 1):
        for y in range(1, grid.height - 1):
            grid.mask[x][y] = True


def round_mask(grid: DungeonGrid, rng=None) -> None:
    cx, cy = grid.width // 2, grid.height // 2
    radius = min(grid.width, grid.height) / 2 - 2
    if radius <= 0:
        return
    r2 = radius * radius
    for x in range(grid.width):
        for y in range(grid.height):
            if (x - cx) ** 2 + (y - cy) ** 2 <= r2:
                grid.mask[x][y] = True


def cross_mask(grid: DungeonGrid, rng=None) -> None:
    """Horizontal and vertical arms of width min(w, h)/3, 2 cells off the edge."""
    w, h = grid.width, grid.height
    cx, cy = w // 2, h // 2
    half_arm = min(w, h) / 3 / 2
    y_lo, y_hi = math.floor(cy - half_arm), math.ceil(cy + half_arm)
    x_lo, x_hi = math.floor(cx - half_arm), math.ceil(cx + half_arm)
    for x in range(2, w - 2):
        for y in range(max(0, y_lo), min(h, y_hi)):
            grid.mask[x][y] = True
    for x in range(max(0, x_lo), min(w, x_hi)):
        for y in range(2, h - 2):
            grid.mask[x][y] = True


def keep_mask(grid: DungeonGrid, rng=None) -> None:
    for x in range(4, grid.width - 4):
        for y in range(4, grid.height - 4):
            grid.mask[x][y] = True


def cavernous_mask(grid: DungeonGrid, rng) -> None:
    """Random fill smoothed by a 3x3 majority automaton.

    Alive cells survive with >= 4 live neighbours; dead cells are born with >= 5.
    The border ring is never alive.
    """
    w, h = grid.width, grid.height
    alive = [[False] * h for _ in range(w)]
    for x in range(1, w - 1):
        for y in range(1, h - 1):
            alive[x][y] = rng.random() < CAVE_FILL
    for _ in range(CAVE_ITERATIONS):
        nxt = [[False] * h for _ in range(w)]
        for x in range(1, w - 1):
            for y in range(1, h - 1):
                n = 0
                for dx in (-1, 0, 1):
                    for dy in (-1, 0, 1):
                        if (dx or dy) and alive[x + dx][y + dy]:
                            n += 1
                nxt[x][y] = n >= 4 if alive[x][y] else n >= 5
        alive = nxt
    for x in range(w):
        for y in range(h):
            grid.mask[x][y] = alive[x][y]


MASK_BUILDERS: Dict[MaskShape, Callable[..., None]] = {
    MaskShape.RECTANGLE: rectangle_mask,
    MaskShape.ROUND: round_mask,
    MaskShape.CROSS: cross_mask,
    MaskShape.KEEP: keep_mask,
    MaskShape.CAVERNOUS: cavernous_mask,
}


def apply_mask(grid: DungeonGrid, shape: MaskShape, rng) -> int:
    """Reset and stamp the mask for ``shape``; returns the number of valid cells."""
    for column in grid.mask:
        for y in range(len(column)):
            column[y] = False
    MASK_BUILDERS[shape](grid, rng)
    return sum(column.count(True) for column in grid.mask)


__all__ = ["MASK_BUILDERS", "apply_mask", "rectangle_mask", "round_mask", "cross_mask", "keep_mask", "cavernous_mask"]
