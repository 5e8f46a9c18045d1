import math
import random

import pytest

from dungeongen import generate
from dungeongen.layout.config import ConnectivityStrategy, CorridorStyle
from dungeongen.layout.connectivity import (
    CorridorRouter,
    build_edges,
    connect_rooms,
    connect_specific_rooms,
    kruskal,
    select_edges,
)
from dungeongen.layout.models import DungeonGrid, Room
from dungeongen.logging_utils import get_logger
from tests.dungeon_test_utils import all_rooms_reachable, bfs_reachable


def _rooms_grid():
    g = DungeonGrid(40, 40)
    for x in range(1, 39):
        for y in range(1, 39):
            g.set_mask(x, y, True)
    specs = [(3, 3), (20, 3), (3, 20), (20, 20), (30, 30)]
    for i, (x, y) in enumerate(specs):
        room = Room(x, y, 5, 5, id=f"r{i}")
        g.rooms.append(room)
        g.carve_rect(room.x, room.y, room.width, room.height)
    return g


def test_edges_sorted_and_complete():
    g = _rooms_grid()
    edges = build_edges(g.rooms)
    assert len(edges) == 10
    weights = [e.weight for e in edges]
    assert weights == sorted(weights)
    eu = build_edges(g.rooms, euclidean=True)
    assert min(e.weight for e in eu) == pytest.approx(math.hypot(10, 10))


def test_kruskal_spans_all_rooms():
    g = _rooms_grid()
    tree = kruskal(len(g.rooms), build_edges(g.rooms))
    assert len(tree) == len(g.rooms) - 1


@pytest.mark.parametrize("strategy,expected", [("mst", 4), ("full", 10)])
def test_select_edges_counts(strategy, expected):
    g = _rooms_grid()
    selected, loops = select_edges(len(g.rooms), build_edges(g.rooms), ConnectivityStrategy(strategy), random.Random(1))
    assert len(selected) == expected
    assert loops == expected - 4


def test_mst_loops_bounded():
    g = _rooms_grid()
    for seed in range(20):
        selected, loops = select_edges(5, build_edges(g.rooms), ConnectivityStrategy.MST_LOOPS, random.Random(seed))
        assert 0 <= loops <= 2
        assert len(selected) == 4 + loops


@pytest.mark.structure
@pytest.mark.parametrize("style", list(CorridorStyle))
@pytest.mark.parametrize("strategy", list(ConnectivityStrategy))
def test_all_rooms_connected(style, strategy):
    g = _rooms_grid()
    router = CorridorRouter(g, style, random.Random(7))
    stats = connect_rooms(g, router, strategy)
    assert stats["edges_selected"] >= 4
    assert router.carved == stats["edges_selected"]
    assert all_rooms_reachable(g), f"disconnected layout for {style}/{strategy}"
    for room in g.rooms:
        assert room.connections, f"{room.id} has no recorded connection"
        for other_id in room.connections:
            assert room.id in g.room_by_id(other_id).connections


def test_single_room_needs_no_corridors():
    g = DungeonGrid(20, 20)
    g.rooms.append(Room(5, 5, 4, 4, id="solo"))
    router = CorridorRouter(g, CorridorStyle.L_PATH, random.Random(0))
    assert connect_rooms(g, router, ConnectivityStrategy.MST_LOOPS) == {"edges_selected": 0, "loops_added": 0}


def test_specific_pairs_dedupe_and_skip_unknown():
    g = _rooms_grid()
    router = CorridorRouter(g, CorridorStyle.L_PATH, random.Random(2))
    pairs = [
        {"from": "r0", "to": "r1"},
        {"from": "r1", "to": "r0"},
        {"from": "r2", "to": "r2"},
        {"from": "r3", "to": "nope"},
        ("r1", "r3"),
    ]
    assert connect_specific_rooms(g, router, pairs) == 2
    seen = bfs_reachable(g, g.rooms[0].center)
    assert g.rooms[1].center in seen and g.rooms[3].center in seen
    assert g.rooms[2].center not in seen
    assert g.rooms[2].connections == []


def test_errant_falls_back_when_mask_blocks():
    g = _rooms_grid()
    # Sever the mask with a full-height column so A* cannot cross
    for y in range(40):
        g.set_mask(15, y, False)
    router = CorridorRouter(g, CorridorStyle.ERRANT, random.Random(3))
    router.route(g.rooms[0], g.rooms[1])
    assert router.fallbacks == 1
    assert g.rooms[1].center in bfs_reachable(g, g.rooms[0].center)


@pytest.mark.structure
@pytest.mark.parametrize("seed", [0, 1, 2, 3, 42, 99, 12345])
def test_generated_dungeons_are_connected(seed):
    g = generate(60, 60, {"seed": seed, "corridorStyle": "errant", "deadEndRemoval": "all"})
    assert len(g.rooms) >= 2
    assert all_rooms_reachable(g)


def test_fallback_logged_through_bound_logger(monkeypatch, capsys):
    monkeypatch.setenv("DUNGEONGEN_LOG_LEVEL", "debug")
    g = _rooms_grid()
    for y in range(40):
        g.set_mask(15, y, False)
    logger = get_logger("dungeongen.connectivity").bind(seed=3)
    router = CorridorRouter(g, CorridorStyle.ERRANT, random.Random(3), logger=logger)
    router.route(g.rooms[0], g.rooms[1])
    out = capsys.readouterr().out
    assert out.count("event=astar_fallback") == router.fallbacks == 1
    assert "seed=3" in out
    assert f"src={g.rooms[0].id}" in out
