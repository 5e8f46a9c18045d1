"""Vision-blocking wall segments derived from a finished grid.

Every grid line that separates a FLOOR cell from a non-FLOOR cell yields a
unit ``solid`` segment. With a positive ``outset`` each segment is pushed
perpendicular to itself, away from the floor, so the line sits inside the
wall band. Endpoints then snap to the offset line of a perpendicular boundary
meeting them at that corner: the non-floor side's boundary wins (concave
corner, pulled in), otherwise the floor side's (convex corner, pushed out).
A corner with no perpendicular boundary keeps its endpoint, so straight runs
stay contiguous.

Each door adds one ``door`` segment across the middle of its cell, stretched
by the outset at both ends so it meets the offset corridor walls.

Collinear segments with the same kind and perpendicular coordinate are merged
by sort and sweep. Output coordinates are ``padding + coord * cell_size``.

    segments = build_walls(grid, cell_size=20, padding=0)
    [s.to_dict() for s in segments]
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .layout.models import DoorOrientation, DungeonGrid
from .layout.tiles import FLOOR

MERGE_TOLERANCE = 1e-6

SOLID = "solid"
DOOR = "door"


@dataclass
class WallSegment:
    x1: float
    y1: float
    x2: float
    y2: float
    kind: str = SOLID

    @property
    def orientation(self) -> str:
        return "vertical" if self.x1 == self.x2 else "horizontal"

    @property
    def coords(self) -> List[float]:
        return [self.x1, self.y1, self.x2, self.y2]

    def normalized(self) -> "WallSegment":
        if (self.x2, self.y2) < (self.x1, self.y1):
            return WallSegment(self.x2, self.y2, self.x1, self.y1, self.kind)
        return WallSegment(self.x1, self.y1, self.x2, self.y2, self.kind)

    def to_pixels(self, cell_size: float, padding: float) -> "WallSegment":
        return WallSegment(
            padding + self.x1 * cell_size,
            padding + self.y1 * cell_size,
            padding + self.x2 * cell_size,
            padding + self.y2 * cell_size,
            self.kind,
        )

    def to_dict(self) -> Dict[str, object]:
        return {"x1": self.x1, "y1": self.y1, "x2": self.x2, "y2": self.y2, "kind": self.kind, "c": self.coords}


def merge_segments(segments: List[WallSegment], tolerance: float = MERGE_TOLERANCE) -> List[WallSegment]:
    """Merge contiguous or overlapping collinear runs.

    Groups never mix orientation or kind. Running the merge on its own output
    changes nothing.
    """
    groups: Dict[Tuple[str, str, float], List[WallSegment]] = {}
    for seg in segments:
        seg = seg.normalized()
        if seg.x1 == seg.x2:
            key = ("vertical", seg.kind, round(seg.x1, 6))
        else:
            key = ("horizontal", seg.kind, round(seg.y1, 6))
        groups.setdefault(key, []).append(seg)

    merged: List[WallSegment] = []
    for (orientation, kind, _), group in sorted(groups.items(), key=lambda kv: kv[0]):
        vertical = orientation == "vertical"
        group.sort(key=lambda s: (s.y1, s.y2) if vertical else (s.x1, s.x2))
        current = group[0]
        for nxt in group[1:]:
            start = nxt.y1 if vertical else nxt.x1
            end = current.y2 if vertical else current.x2
            if start <= end + tolerance:
                if vertical:
                    current = WallSegment(current.x1, current.y1, current.x2, max(current.y2, nxt.y2), kind)
                else:
                    current = WallSegment(current.x1, current.y1, max(current.x2, nxt.x2), current.y2, kind)
            else:
                merged.append(current)
                current = nxt
        merged.append(current)
    return merged


class WallBuilder:
    def __init__(self, grid: DungeonGrid, outset: float = 0.0):
        self.grid = grid
        self.outset = outset

    def _floor(self, x: int, y: int) -> bool:
        return self.grid.get(x, y) == FLOOR

    # Offset position of the boundary on a given line, or None when the line is not a boundary there.
    def _h_boundary(self, line_y: int, col: int) -> Optional[float]:
        above, below = self._floor(col, line_y - 1), self._floor(col, line_y)
        if above == below:
            return None
        return line_y - self.outset if below else line_y + self.outset

    def _v_boundary(self, line_x: int, row: int) -> Optional[float]:
        left, right = self._floor(line_x - 1, row), self._floor(line_x, row)
        if left == right:
            return None
        return line_x + self.outset if left else line_x - self.outset

    @staticmethod
    def _snap(default: float, non_floor_side: Optional[float], floor_side: Optional[float]) -> float:
        if non_floor_side is not None:
            return non_floor_side
        if floor_side is not None:
            return floor_side
        return default

    def raw_segments(self) -> List[WallSegment]:
        """Unmerged segments in grid units: solid boundaries first, then doors."""
        grid = self.grid
        o = self.outset
        out: List[WallSegment] = []

        # Vertical grid lines x = 0..W
        for x in range(grid.width + 1):
            for y in range(grid.height):
                left = self._floor(x - 1, y)
                if left == self._floor(x, y):
                    continue
                line_x = x + o if left else x - o
                floor_col, open_col = (x - 1, x) if left else (x, x - 1)
                top = self._snap(y, self._h_boundary(y, open_col), self._h_boundary(y, floor_col))
                bottom = self._snap(y + 1, self._h_boundary(y + 1, open_col), self._h_boundary(y + 1, floor_col))
                out.append(WallSegment(line_x, top, line_x, bottom, SOLID))

        # Horizontal grid lines y = 0..H
        for y in range(grid.height + 1):
            for x in range(grid.width):
                above = self._floor(x, y - 1)
                if above == self._floor(x, y):
                    continue
                line_y = y + o if above else y - o
                floor_row, open_row = (y - 1, y) if above else (y, y - 1)
                left = self._snap(x, self._v_boundary(x, open_row), self._v_boundary(x, floor_row))
                right = self._snap(x + 1, self._v_boundary(x + 1, open_row), self._v_boundary(x + 1, floor_row))
                out.append(WallSegment(left, line_y, right, line_y, SOLID))

        for door in grid.doors:
            if door.orientation == DoorOrientation.VERTICAL:
                out.append(WallSegment(door.x + 0.5, door.y - o, door.x + 0.5, door.y + 1 + o, DOOR))
            else:
                out.append(WallSegment(door.x - o, door.y + 0.5, door.x + 1 + o, door.y + 0.5, DOOR))
        return out

    def build(self) -> List[WallSegment]:
        return merge_segments(self.raw_segments())


def build_walls(grid: DungeonGrid, cell_size: float, padding: float = 0, outset: float = 0.0) -> List[WallSegment]:
    """Merged wall segments in pixel space."""
    return [seg.to_pixels(cell_size, padding) for seg in WallBuilder(grid, outset).build()]


__all__ = ["DOOR", "SOLID", "WallBuilder", "WallSegment", "build_walls", "merge_segments"]
