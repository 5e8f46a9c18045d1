import random

from dungeongen import generate
from dungeongen.layout.exits import place_exits, raycast_to_floor
from dungeongen.layout.models import DungeonGrid, Room
from dungeongen.layout.stairs import corridor_dead_ends, place_stairs
from dungeongen.layout.tiles import FLOOR
from tests.dungeon_test_utils import bfs_reachable


def _grid_with_room():
    g = DungeonGrid(21, 15)
    room = Room(8, 5, 5, 5, id="core")
    g.rooms.append(room)
    g.carve_rect(room.x, room.y, room.width, room.height)
    return g


def test_raycast_hits_first_floor():
    g = _grid_with_room()
    assert raycast_to_floor(g, (10, 0), (0, 1)) == (10, 5)
    assert raycast_to_floor(g, (0, 1), (1, 0)) is None


def test_exits_reach_all_four_edges():
    g = _grid_with_room()
    assert place_exits(g) == 4
    for edge in [(10, 0), (10, 14), (0, 7), (20, 7)]:
        assert g.get(*edge) == FLOOR
    seen = bfs_reachable(g, g.rooms[0].center)
    assert {(10, 0), (10, 14), (0, 7), (20, 7)} <= seen


def test_exits_skip_when_nothing_to_hit():
    g = DungeonGrid(10, 10)
    g.set(1, 1, FLOOR)
    assert place_exits(g) == 0


def test_generate_with_peripheral_egress():
    g = generate(50, 50, {"seed": 17, "peripheralEgress": True})
    touches = [
        any(g.get(x, 0) == FLOOR for x in range(g.width)),
        any(g.get(x, g.height - 1) == FLOOR for x in range(g.width)),
        any(g.get(0, y) == FLOOR for y in range(g.height)),
        any(g.get(g.width - 1, y) == FLOOR for y in range(g.height)),
    ]
    # Only exit digs reach the outer ring; N/S share a column and W/E a row
    assert g.metrics["exits_carved"] == sum(touches)
    assert g.metrics["exits_carved"] in (2, 4)
    assert touches[0] == touches[1] and touches[2] == touches[3]


def test_stairs_prefer_dead_ends_for_down():
    g = _grid_with_room()
    for x in range(13, 18):
        g.set(x, 7, FLOOR)
    assert corridor_dead_ends(g) == [(17, 7)]
    assert place_stairs(g, 1, 1, random.Random(0)) == 2
    up = [s for s in g.stairs if s.direction == "up"]
    down = [s for s in g.stairs if s.direction == "down"]
    assert (up[0].x, up[0].y) == g.rooms[0].center
    assert (down[0].x, down[0].y) == (17, 7)


def test_down_stairs_fall_back_to_later_rooms():
    g = DungeonGrid(40, 20)
    for i, x in enumerate((2, 14, 26)):
        room = Room(x, 4, 6, 6, id=f"r{i}")
        g.rooms.append(room)
        g.carve_rect(room.x, room.y, room.width, room.height)
    assert place_stairs(g, 1, 5, random.Random(0)) == 3
    downs = [(s.x, s.y) for s in g.stairs if s.direction == "down"]
    assert downs == [g.rooms[2].center, g.rooms[1].center]
    assert len({(s.x, s.y) for s in g.stairs}) == len(g.stairs)


def test_no_rooms_no_stairs():
    g = DungeonGrid(10, 10)
    assert place_stairs(g, 1, 1, random.Random(0)) == 0
