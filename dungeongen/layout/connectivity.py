"""Room graph, edge selection and corridor routing.

The complete graph over room centres is reduced to a Kruskal minimum spanning
tree, optionally topped up with loop edges, and one corridor is carved per
selected edge. Rooms are referenced by list index inside the graph and by id
in ``Room.connections``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..logging_utils import get_logger
from .config import ConnectivityStrategy, CorridorStyle
from .models import DungeonGrid, Room
from .tunnels import CORRIDOR_CARVERS

log = get_logger("dungeongen.connectivity")

LOOP_CHANCE = 0.3
LOOP_FRACTION = 0.2
MIN_LOOPS = 2


@dataclass(frozen=True)
class Edge:
    weight: float
    u: int
    v: int


def build_edges(rooms: List[Room], euclidean: bool = False) -> List[Edge]:
    """All room pairs, shortest first (stable on index order for equal weights)."""
    edges = []
    for i in range(len(rooms)):
        x1, y1 = rooms[i].center
        for j in range(i + 1, len(rooms)):
            x2, y2 = rooms[j].center
            if euclidean:
                dist = math.hypot(x1 - x2, y1 - y2)
            else:
                dist = abs(x1 - x2) + abs(y1 - y2)
            edges.append(Edge(dist, i, j))
    edges.sort(key=lambda e: e.weight)
    return edges


def kruskal(n: int, edges: Iterable[Edge]) -> List[Edge]:
    parent = list(range(n))

    def find(a):
        while parent[a] != a:
            parent[a] = parent[parent[a]]
            a = parent[a]
        return a

    tree = []
    for edge in edges:
        ru, rv = find(edge.u), find(edge.v)
        if ru != rv:
            parent[ru] = rv
            tree.append(edge)
    return tree


def select_edges(n: int, edges: List[Edge], strategy: ConnectivityStrategy, rng) -> Tuple[List[Edge], int]:
    """Spanning tree plus loops per ``strategy``. Returns (selected, loops_added)."""
    tree = kruskal(n, edges)
    selected = list(tree)
    if strategy == ConnectivityStrategy.MST:
        return selected, 0
    in_tree = set(tree)
    loops = 0
    max_loops = max(MIN_LOOPS, math.floor(n * LOOP_FRACTION))
    for edge in edges:
        if edge in in_tree:
            continue
        if strategy == ConnectivityStrategy.FULL:
            selected.append(edge)
            loops += 1
        elif loops < max_loops and rng.random() < LOOP_CHANCE:
            selected.append(edge)
            loops += 1
    return selected, loops


class CorridorRouter:
    """Carves corridors in one fixed style and keeps per-run counters."""

    def __init__(self, grid: DungeonGrid, style: CorridorStyle, rng, noise: float = 0.2,
                 avoid_other_rooms: bool = True, logger=None):
        self.grid = grid
        self.style = style
        self.rng = rng
        self.noise = noise
        self.avoid_other_rooms = avoid_other_rooms
        self._carve = CORRIDOR_CARVERS[style]
        self.carved = 0
        self.fallbacks = 0
        self.log = logger or log

    def route(self, a: Room, b: Room) -> None:
        a.connect(b)
        fell_back = self._carve(
            self.grid, a, b, self.rng, noise=self.noise, avoid_other_rooms=self.avoid_other_rooms
        )
        self.carved += 1
        if fell_back:
            self.fallbacks += 1
            self.log.debug(event="astar_fallback", src=a.id, dst=b.id)


def connect_rooms(grid: DungeonGrid, router: CorridorRouter, strategy: ConnectivityStrategy,
                  euclidean: bool = False) -> Dict[str, int]:
    """Select edges over ``grid.rooms`` and carve each one."""
    rooms = grid.rooms
    stats = {"edges_selected": 0, "loops_added": 0}
    if len(rooms) < 2:
        return stats
    edges = build_edges(rooms, euclidean=euclidean)
    selected, loops = select_edges(len(rooms), edges, strategy, router.rng)
    for edge in selected:
        router.route(rooms[edge.u], rooms[edge.v])
    stats["edges_selected"] = len(selected)
    stats["loops_added"] = loops
    return stats


def _pair_ids(pair: Any) -> Tuple[str, str]:
    if isinstance(pair, Mapping):
        a, b = pair.get("from"), pair.get("to")
    elif isinstance(pair, (list, tuple)) and len(pair) == 2:
        a, b = pair
    else:
        return "", ""
    return (str(a).strip() if a is not None else "", str(b).strip() if b is not None else "")


def connect_specific_rooms(grid: DungeonGrid, router: CorridorRouter, pairs: Optional[Iterable[Any]]) -> int:
    """Carve exactly the given ``{from, to}`` (or 2-tuple) id pairs.

    Self pairs, unknown ids and repeats of an unordered pair are skipped.
    Returns the number of corridors carved.
    """
    if len(grid.rooms) < 2 or not pairs:
        return 0
    by_id = {str(r.id): r for r in grid.rooms}
    seen = set()
    carved = 0
    for pair in pairs:
        a_id, b_id = _pair_ids(pair)
        if not a_id or not b_id or a_id == b_id:
            continue
        key = (a_id, b_id) if a_id < b_id else (b_id, a_id)
        if key in seen:
            continue
        a, b = by_id.get(a_id), by_id.get(b_id)
        if a is None or b is None:
            continue
        router.route(a, b)
        seen.add(key)
        carved += 1
    return carved


__all__ = [
    "CorridorRouter",
    "Edge",
    "build_edges",
    "connect_rooms",
    "connect_specific_rooms",
    "kruskal",
    "select_edges",
]
