"""Shared grid state for one generation run.

Every stage mutates a single ``DungeonGrid`` in place. Cell and mask buffers are
column-major (``cells[x][y]``) and all accessors are total: reads outside the
grid return EMPTY / invalid and writes outside the grid are ignored.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .tiles import ASCII_GLYPHS, EMPTY, FLOOR, WALL, CellType

Coord2D = Tuple[int, int]

# N, E, S, W
DIRECTIONS: Tuple[Coord2D, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))


def new_id(rng) -> str:
    """UUID4 string drawn from ``rng`` so ids repeat with the seed."""
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


class DoorOrientation(str, Enum):
    VERTICAL = "vertical"      # blocks east/west movement
    HORIZONTAL = "horizontal"  # blocks north/south movement


@dataclass
class Room:
    x: int
    y: int
    width: int
    height: int
    id: str = ""
    connections: List[str] = field(default_factory=list)
    labels: Dict[str, Any] = field(default_factory=dict)

    @property
    def center(self) -> Coord2D:
        return (self.x + self.width // 2, self.y + self.height // 2)

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def cells(self) -> Iterator[Coord2D]:
        for ix in range(self.x, self.x + self.width):
            for iy in range(self.y, self.y + self.height):
                yield ix, iy

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.right and self.y <= y < self.bottom

    def overlaps(self, other: "Room", buffer: int = 1) -> bool:
        """True when the two rectangles, each grown by ``buffer``, intersect."""
        return (
            self.x - buffer < other.right + buffer
            and self.right + buffer > other.x - buffer
            and self.y - buffer < other.bottom + buffer
            and self.bottom + buffer > other.y - buffer
        )

    def connect(self, other: "Room") -> None:
        if other.id not in self.connections:
            self.connections.append(other.id)
        if self.id not in other.connections:
            other.connections.append(self.id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "connections": list(self.connections),
            "labels": dict(self.labels),
        }


@dataclass
class Door:
    x: int
    y: int
    orientation: DoorOrientation
    id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "x": self.x, "y": self.y, "orientation": self.orientation.value}


@dataclass
class Stair:
    x: int
    y: int
    direction: str  # 'up' | 'down'
    id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "x": self.x, "y": self.y, "direction": self.direction}


class DungeonGrid:
    """Cell classification plus carve mask and the entity registries."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.cells: List[List[int]] = [[EMPTY] * height for _ in range(width)]
        self.mask: List[List[bool]] = [[False] * height for _ in range(width)]
        self.rooms: List[Room] = []
        self.doors: List[Door] = []
        self.stairs: List[Stair] = []
        self.metrics: Dict[str, Any] = {}
        self.seed: Optional[int] = None
        self.config = None

    # --- cell access -------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> int:
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.cells[x][y]
        return EMPTY

    def set(self, x: int, y: int, value: int) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self.cells[x][y] = value

    def is_floor(self, x: int, y: int) -> bool:
        return self.get(x, y) == FLOOR

    def get_mask(self, x: int, y: int) -> bool:
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.mask[x][y]
        return False

    def set_mask(self, x: int, y: int, valid: bool) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self.mask[x][y] = bool(valid)

    # --- rectangles --------------------------------------------------
    def fill_rect(self, x: int, y: int, w: int, h: int, value: int) -> None:
        for ix in range(max(0, x), min(self.width, x + w)):
            column = self.cells[ix]
            for iy in range(max(0, y), min(self.height, y + h)):
                column[iy] = value

    def carve_rect(self, x: int, y: int, w: int, h: int) -> None:
        self.fill_rect(x, y, w, h, FLOOR)

    def is_region_empty(self, x: int, y: int, w: int, h: int) -> bool:
        """True when no cell of the rectangle is FLOOR (off-grid cells count as empty)."""
        for ix in range(x, x + w):
            for iy in range(y, y + h):
                if self.get(ix, iy) == FLOOR:
                    return False
        return True

    def is_region_valid(self, x: int, y: int, w: int, h: int) -> bool:
        """True when every cell of the rectangle is inside the grid and mask-valid."""
        if w <= 0 or h <= 0:
            return False
        for ix in range(x, x + w):
            for iy in range(y, y + h):
                if not self.get_mask(ix, iy):
                    return False
        return True

    # --- neighbourhoods ----------------------------------------------
    def neighbors(self, x: int, y: int) -> List[Coord2D]:
        """In-bounds 4-neighbours in N, E, S, W order."""
        out = []
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                out.append((nx, ny))
        return out

    def floor_neighbor_count(self, x: int, y: int) -> int:
        return sum(1 for dx, dy in DIRECTIONS if self.get(x + dx, y + dy) == FLOOR)

    def room_at(self, x: int, y: int) -> Optional[Room]:
        for room in self.rooms:
            if room.contains(x, y):
                return room
        return None

    def room_by_id(self, room_id: str) -> Optional[Room]:
        for room in self.rooms:
            if room.id == room_id:
                return room
        return None

    def door_at(self, x: int, y: int) -> Optional[Door]:
        for door in self.doors:
            if door.x == x and door.y == y:
                return door
        return None

    def stair_at(self, x: int, y: int) -> Optional[Stair]:
        for stair in self.stairs:
            if stair.x == x and stair.y == y:
                return stair
        return None

    def floor_cells(self) -> Iterator[Coord2D]:
        for x in range(self.width):
            column = self.cells[x]
            for y in range(self.height):
                if column[y] == FLOOR:
                    yield x, y

    def count(self, value: int) -> int:
        return sum(column.count(value) for column in self.cells)

    def carve_wall_perimeter(self, thickness: int = 1) -> int:
        """Turn EMPTY cells within ``thickness`` (Chebyshev) of FLOOR into WALL.

        Returns the number of cells converted.
        """
        if thickness <= 0:
            return 0
        targets = set()
        for x, y in self.floor_cells():
            for dx in range(-thickness, thickness + 1):
                for dy in range(-thickness, thickness + 1):
                    nx, ny = x + dx, y + dy
                    if self.in_bounds(nx, ny) and self.cells[nx][ny] == EMPTY:
                        targets.add((nx, ny))
        for nx, ny in targets:
            self.cells[nx][ny] = WALL
        return len(targets)

    # --- export ------------------------------------------------------
    def to_ascii(self) -> str:
        overlay: Dict[Coord2D, str] = {}
        for door in self.doors:
            overlay[(door.x, door.y)] = "+"
        for stair in self.stairs:
            overlay[(stair.x, stair.y)] = "<" if stair.direction == "up" else ">"
        rows = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                glyph = overlay.get((x, y))
                row.append(glyph if glyph is not None else ASCII_GLYPHS[CellType(self.cells[x][y])])
            rows.append("".join(row))
        return "\n".join(rows)

    def to_dict(self) -> Dict[str, Any]:
        # Row-major cell dump for consumers that index [y][x]
        return {
            "width": self.width,
            "height": self.height,
            "seed": self.seed,
            "cells": [[int(self.cells[x][y]) for x in range(self.width)] for y in range(self.height)],
            "rooms": [r.to_dict() for r in self.rooms],
            "doors": [d.to_dict() for d in self.doors],
            "stairs": [s.to_dict() for s in self.stairs],
            "metrics": dict(self.metrics),
        }


__all__ = [
    "Coord2D",
    "DIRECTIONS",
    "DoorOrientation",
    "DungeonGrid",
    "Door",
    "Room",
    "Stair",
    "new_id",
]
