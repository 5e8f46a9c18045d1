"""Dungeon generation invariant tests.

These tests are intentionally lightweight and focus on structural integrity
rather than exhaustive statistical properties.

Invariants covered:
1. Rooms keep a one-cell buffer from each other.
2. Every room lies inside the carve mask.
3. All rooms share one connected FLOOR component.
4. Doors are FLOOR chokepoints outside rooms, never adjacent to each other.
5. Stairs sit on FLOOR and never share a cell.
6. The wall band touches FLOOR and nothing walkable leaks outside the grid.
"""

from __future__ import annotations

import pytest

from dungeongen import generate
from dungeongen.layout.tiles import EMPTY, FLOOR, WALL
from tests.dungeon_test_utils import all_rooms_reachable, door_shape_ok, rooms_separated

VARIANTS = [
    {"maskType": "rectangle"},
    {"maskType": "round", "placementAlgorithm": "relaxation"},
    {"maskType": "cross", "corridorStyle": "straight", "deadEndRemoval": "all"},
    {"maskType": "keep", "placementAlgorithm": "symmetric", "connectivity": "full"},
    {"maskType": "cavernous", "corridorStyle": "errant", "deadEndRemoval": "some"},
    {"roomSizeBias": "small", "density": 0.9, "peripheralEgress": True},
    {"roomSizeBias": "large", "connectivity": "mst", "doorDensity": 0.3},
]


@pytest.mark.structure
@pytest.mark.parametrize("opts", VARIANTS)
@pytest.mark.parametrize("seed", [7, 1234])
def test_layout_invariants(opts, seed):
    g = generate(60, 60, dict(opts, seed=seed))
    assert rooms_separated(g.rooms), "rooms overlap their buffers"
    for room in g.rooms:
        assert g.is_region_valid(room.x, room.y, room.width, room.height), f"room {room.id} outside mask"
    if len(g.rooms) >= 2:
        assert all_rooms_reachable(g), f"disconnected rooms for {opts}"
    for door in g.doors:
        assert door_shape_ok(g, door), f"door {(door.x, door.y)} is not a chokepoint"
        assert g.room_at(door.x, door.y) is None
    stair_cells = [(s.x, s.y) for s in g.stairs]
    assert len(stair_cells) == len(set(stair_cells))
    for x, y in stair_cells:
        assert g.get(x, y) == FLOOR
        assert g.door_at(x, y) is None


def test_wall_band_hugs_floor():
    g = generate(50, 50, {"seed": 88})
    for x in range(g.width):
        for y in range(g.height):
            if g.get(x, y) != WALL:
                continue
            near_floor = any(
                g.get(x + dx, y + dy) == FLOOR for dx in (-1, 0, 1) for dy in (-1, 0, 1) if dx or dy
            )
            assert near_floor, f"stray wall band cell at {(x, y)}"
    # Every FLOOR cell is fully enclosed: no EMPTY neighbour in the 8-neighbourhood
    for x, y in g.floor_cells():
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                nx, ny = x + dx, y + dy
                if g.in_bounds(nx, ny):
                    assert g.get(nx, ny) != EMPTY


def test_wall_band_disabled():
    g = generate(40, 40, {"seed": 3, "wallBand": 0})
    assert g.count(WALL) == 0


def test_ascii_dump_shapes():
    g = generate(40, 30, {"seed": 11})
    rows = g.to_ascii().split("\n")
    assert len(rows) == 30 and all(len(r) == 40 for r in rows)
    text = "\n".join(rows)
    assert "." in text and "#" in text
    assert text.count("<") == sum(1 for s in g.stairs if s.direction == "up")
