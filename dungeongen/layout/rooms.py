"""Room placement strategies.

All placers append accepted rooms to ``grid.rooms`` without carving; the
caller finishes with ``carve_rooms`` so relaxation can move rooms freely
before anything touches the cell buffer. Falling short of the budget is
normal and silent.
"""
from __future__ import annotations

import math
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .config import DungeonConfig, PlacementStrategy, RoomSizeBias
from .models import DungeonGrid, Room, new_id
from .validation import coerce_outline_room

AVG_ROOM_AREA = 80
MIN_BUDGET = 5
MAX_BUDGET = 100
ATTEMPTS_PER_ROOM = 50
RELAX_PASSES = 50


def room_budget(grid: DungeonGrid, config: DungeonConfig) -> int:
    if config.num_rooms is not None:
        return config.num_rooms
    target = math.floor(grid.width * grid.height * config.density / AVG_ROOM_AREA)
    return max(MIN_BUDGET, min(target, MAX_BUDGET))


def sample_room_size(config: DungeonConfig, rng) -> Tuple[int, int]:
    lo, hi = config.min_room_size, config.max_room_size
    span = hi - lo

    def one() -> int:
        if config.room_size_bias == RoomSizeBias.SMALL:
            return math.floor(rng.random() * span * 0.3) + lo
        if config.room_size_bias == RoomSizeBias.LARGE:
            return math.floor(math.floor(rng.random() * span * 0.5) + (hi - span * 0.5))
        return math.floor(rng.random() * (span + 1)) + lo

    w = one()
    h = one()
    return w, h


def _random_origin(rng, span: int) -> Optional[int]:
    # Origins land in [2, 2 + span); None when the grid is too small for the size
    if span <= 0:
        return None
    return math.floor(rng.random() * span) + 2


def is_valid_placement(grid: DungeonGrid, x: int, y: int, w: int, h: int,
                       existing: Iterable[Room] | None = None) -> bool:
    """Rectangle plus a one-cell buffer is mask-valid and clear of every existing room's buffer."""
    if not grid.is_region_valid(x - 1, y - 1, w + 2, h + 2):
        return False
    candidate = Room(x, y, w, h)
    for other in grid.rooms if existing is None else existing:
        if candidate.overlaps(other, buffer=1):
            return False
    return True


def place_standard(grid: DungeonGrid, config: DungeonConfig, rng, budget: int) -> int:
    attempts = 0
    max_attempts = budget * ATTEMPTS_PER_ROOM
    placed = 0
    while placed < budget and attempts < max_attempts:
        attempts += 1
        w, h = sample_room_size(config, rng)
        x = _random_origin(rng, grid.width - w - 4)
        y = _random_origin(rng, grid.height - h - 4)
        if x is None or y is None:
            continue
        if is_valid_placement(grid, x, y, w, h):
            grid.rooms.append(Room(x, y, w, h, id=new_id(rng)))
            placed += 1
    return attempts


def place_symmetric(grid: DungeonGrid, config: DungeonConfig, rng, budget: int) -> int:
    """Place in the left half and mirror across the vertical centre line."""
    attempts = 0
    max_attempts = budget * ATTEMPTS_PER_ROOM
    half_w = (grid.width - 2) // 2
    placed = 0
    while placed < budget and attempts < max_attempts:
        attempts += 1
        w, h = sample_room_size(config, rng)
        x = _random_origin(rng, half_w - w - 2)
        y = _random_origin(rng, grid.height - h - 4)
        if x is None or y is None:
            continue
        mirror_x = grid.width - x - w
        primary = Room(x, y, w, h)
        mirror = Room(mirror_x, y, w, h)
        if primary.overlaps(mirror, buffer=1):
            continue
        if not is_valid_placement(grid, x, y, w, h):
            continue
        if not is_valid_placement(grid, mirror_x, y, w, h):
            continue
        primary.id = new_id(rng)
        mirror.id = new_id(rng)
        grid.rooms.extend((primary, mirror))
        placed += 2
    return attempts


def _clamp_room(grid: DungeonGrid, room: Room) -> None:
    room.x = max(2, min(room.x, grid.width - room.width - 2))
    room.y = max(2, min(room.y, grid.height - room.height - 2))


def _round_half_up(v: float) -> int:
    return math.floor(v + 0.5)


def place_relaxation(grid: DungeonGrid, config: DungeonConfig, rng, budget: int) -> int:
    """Scatter everything, push overlapping pairs apart, keep the survivors."""
    scattered: List[Room] = []
    for _ in range(budget):
        w, h = sample_room_size(config, rng)
        x = _random_origin(rng, grid.width - w - 4)
        y = _random_origin(rng, grid.height - h - 4)
        if x is None or y is None:
            continue
        scattered.append(Room(x, y, w, h))

    passes = 0
    for _ in range(RELAX_PASSES):
        passes += 1
        moved = False
        for j in range(len(scattered)):
            for k in range(j + 1, len(scattered)):
                r1, r2 = scattered[j], scattered[k]
                if not r1.overlaps(r2, buffer=1):
                    continue
                (c1x, c1y), (c2x, c2y) = r1.center, r2.center
                dx, dy = c1x - c2x, c1y - c2y
                dist = math.hypot(dx, dy)
                if dist == 0:
                    r1.x += 1
                    _clamp_room(grid, r1)
                    moved = True
                    continue
                push_x = _round_half_up(dx / dist)
                push_y = _round_half_up(dy / dist)
                r1.x += push_x
                r1.y += push_y
                r2.x -= push_x
                r2.y -= push_y
                _clamp_room(grid, r1)
                _clamp_room(grid, r2)
                moved = True
        if not moved:
            break

    for room in scattered:
        if is_valid_placement(grid, room.x, room.y, room.width, room.height):
            room.id = new_id(rng)
            grid.rooms.append(room)
    return passes


PLACERS: Dict[PlacementStrategy, Callable[[DungeonGrid, DungeonConfig, Any, int], int]] = {
    PlacementStrategy.STANDARD: place_standard,
    PlacementStrategy.RELAXATION: place_relaxation,
    PlacementStrategy.SYMMETRIC: place_symmetric,
}


def adopt_outline_rooms(grid: DungeonGrid, entries: Iterable[Any]) -> int:
    """Validate caller-authored rooms and keep those that fit.

    Malformed entries raise ValidationError; well-formed rooms with a cell
    outside the mask, or that crowd an earlier room, are dropped. Unlike
    random placement no mask margin is required. Returns the number dropped.
    """
    dropped = 0
    seen_ids = set()
    for index, entry in enumerate(entries):
        parsed = coerce_outline_room(entry, index)
        if parsed["id"] in seen_ids:
            dropped += 1
            continue
        room = Room(parsed["x"], parsed["y"], parsed["width"], parsed["height"], id=parsed["id"])
        # Authored rooms may touch the mask edge; spacing between rooms still applies
        if not grid.is_region_valid(room.x, room.y, room.width, room.height) or any(
            room.overlaps(other, buffer=1) for other in grid.rooms
        ):
            dropped += 1
            continue
        if isinstance(entry, dict) and isinstance(entry.get("labels"), dict):
            room.labels.update(entry["labels"])
        grid.rooms.append(room)
        seen_ids.add(parsed["id"])
    return dropped


def carve_rooms(grid: DungeonGrid) -> None:
    for room in grid.rooms:
        grid.carve_rect(room.x, room.y, room.width, room.height)


def place_rooms(grid: DungeonGrid, config: DungeonConfig, rng) -> Tuple[int, int]:
    """Run the configured placer and carve the result.

    Returns (budget, placed_count).
    """
    budget = room_budget(grid, config)
    PLACERS[config.placement](grid, config, rng, budget)
    carve_rooms(grid)
    return budget, len(grid.rooms)


__all__ = [
    "PLACERS",
    "adopt_outline_rooms",
    "carve_rooms",
    "is_valid_placement",
    "place_relaxation",
    "place_rooms",
    "place_standard",
    "place_symmetric",
    "room_budget",
    "sample_room_size",
]
