import random

import pytest

from dungeongen.layout.models import DungeonGrid
from dungeongen.layout.tiles import FLOOR
from dungeongen.layout.tunnels import astar_route, carve_l_path, dig_line, line_cells


def _open_grid(w=20, h=20):
    g = DungeonGrid(w, h)
    for x in range(1, w - 1):
        for y in range(1, h - 1):
            g.set_mask(x, y, True)
    return g


@pytest.mark.parametrize("a,b", [((0, 0), (7, 3)), ((5, 9), (1, 2)), ((3, 3), (3, 8)), ((2, 6), (9, 6)), ((4, 4), (4, 4))])
def test_line_cells_are_edge_connected(a, b):
    cells = line_cells(*a, *b)
    assert cells[0] == a and cells[-1] == b
    for (x1, y1), (x2, y2) in zip(cells, cells[1:]):
        assert abs(x1 - x2) + abs(y1 - y2) == 1, f"diagonal step {(x1, y1)} -> {(x2, y2)}"


def test_dig_line_carves_floor():
    g = DungeonGrid(10, 10)
    n = dig_line(g, (1, 1), (6, 4))
    assert n == g.count(FLOOR)
    assert g.get(1, 1) == FLOOR and g.get(6, 4) == FLOOR


def test_l_path_axis_order():
    g = DungeonGrid(10, 10)
    carve_l_path(g, (1, 1), (5, 5), random.Random(0), horizontal_first=True)
    assert g.get(5, 1) == FLOOR and g.get(1, 5) != FLOOR
    g2 = DungeonGrid(10, 10)
    carve_l_path(g2, (1, 1), (5, 5), random.Random(0), horizontal_first=False)
    assert g2.get(1, 5) == FLOOR and g2.get(5, 1) != FLOOR
    assert g.count(FLOOR) == g2.count(FLOOR) == 9


def test_astar_straight_on_open_grid():
    g = _open_grid()
    path = astar_route(g, (2, 2), (10, 2))
    assert path[0] == (2, 2) and path[-1] == (10, 2)
    assert len(path) == 9


def test_astar_prefers_existing_floor():
    g = _open_grid()
    # Existing U-shaped corridor is cheaper (cost 1 per step) than digging straight across (cost 5)
    for x in range(2, 11):
        g.set(x, 8, FLOOR)
    for y in range(2, 9):
        g.set(2, y, FLOOR)
        g.set(10, y, FLOOR)
    path = astar_route(g, (2, 2), (10, 2))
    assert (6, 8) in path
    assert (6, 2) not in path


def test_astar_avoids_penalised_cells():
    g = _open_grid()
    penalized = {(x, y) for x in range(5, 8) for y in range(1, 6)}
    path = astar_route(g, (2, 3), (10, 3), penalized=penalized)
    assert not penalized.intersection(path)


def test_astar_respects_border_and_mask():
    g = _open_grid()
    for y in range(20):
        g.set_mask(9, y, False)
    assert astar_route(g, (2, 2), (15, 2)) is None
    path = astar_route(_open_grid(), (1, 1), (1, 18))
    assert all(0 < x < 19 and 0 < y < 19 for x, y in path)


def test_astar_noise_is_seeded():
    g = _open_grid(30, 30)
    p1 = astar_route(g, (2, 2), (25, 20), rng=random.Random(5), noise=0.2)
    p2 = astar_route(g, (2, 2), (25, 20), rng=random.Random(5), noise=0.2)
    assert p1 == p2
