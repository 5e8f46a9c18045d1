"""Pipeline orchestration for dungeon layout generation.

``DungeonPipeline`` resolves every strategy once from its config, owns the
run's random generator, and drives the stages over a single grid in a fixed
order: mask, rooms, connect, prune, exits, stairs, doors, wall band. Stages
mutate the grid in place and each one sees only the committed result of the
previous stage.
"""
from __future__ import annotations

import random
import time
from typing import Any, Dict, Mapping, Optional

from ..logging_utils import get_logger
from .config import ConnectivityStrategy, DungeonConfig
from .connectivity import CorridorRouter, connect_rooms, connect_specific_rooms
from .doors import place_doors
from .exits import place_exits
from .masks import MASK_BUILDERS
from .metrics import init_metrics
from .models import DungeonGrid
from .pruning import prune_dead_ends
from .rooms import PLACERS, adopt_outline_rooms, carve_rooms, room_budget
from .stairs import place_stairs
from .validation import ValidationError

log = get_logger("dungeongen.pipeline")


class DungeonPipeline:
    def __init__(self, config: Optional[DungeonConfig] = None, apply_overrides: bool = True):
        self.config = config or DungeonConfig()
        if apply_overrides:
            self.config.apply_overrides()
        # 0 is a valid deterministic seed; None draws one
        if self.config.seed is None:
            self.seed = random.randint(1, 1_000_000)
        else:
            self.seed = int(self.config.seed)
        self._rng = random.Random(self.seed)
        self._log = log.bind(seed=self.seed)
        self._mask_builder = MASK_BUILDERS[self.config.mask_shape]
        self._placer = PLACERS[self.config.placement]
        self.grid: Optional[DungeonGrid] = None
        self.metrics: Dict[str, Any] = {}

    # --- timing --------------------------------------------------------
    def _begin(self) -> DungeonGrid:
        grid = DungeonGrid(self.config.width, self.config.height)
        grid.seed = self.seed
        grid.config = self.config
        self.grid = grid
        self.metrics = init_metrics() if self.config.enable_metrics else {}
        self._phase_times: Dict[str, int] = {}
        self._start = time.perf_counter()
        return grid

    def _phase(self, label, fn, *a, **k):
        ps = time.perf_counter()
        r = fn(*a, **k)
        elapsed = int((time.perf_counter() - ps) * 1000)
        self._phase_times[label] = elapsed
        self._log.debug(event="phase_complete", phase=label, ms=elapsed)
        return r

    def _count(self, key: str, value) -> None:
        if self.config.enable_metrics:
            self.metrics[key] = value

    # --- entry points --------------------------------------------------
    def run(self) -> DungeonGrid:
        """Randomised pipeline: mask, placed rooms, routed corridors, finishing passes."""
        grid = self._begin()
        self._phase("mask", self._mask_builder, grid, self._rng)
        self._place_random(grid)
        router = self._router(avoid_other_rooms=True)
        stats = self._phase("connect", connect_rooms, grid, router, self.config.connectivity)
        self._record_routing(router, stats)
        return self._finish(grid)

    def run_from_outline(self, outline: Any) -> DungeonGrid:
        """Route caller-authored rooms, falling back to random placement when none fit.

        ``outline`` is ``{"rooms": [...], "connections": [...]}`` or a bare
        list of rooms. Connections are ``{"from": id, "to": id}`` pairs.
        Rooms may touch the mask edge but must stay one cell apart.
        """
        rooms_in, connections = _split_outline(outline)
        grid = self._begin()
        self._phase("mask", self._mask_builder, grid, self._rng)
        dropped = self._phase("rooms", adopt_outline_rooms, grid, rooms_in)
        self._count("rooms_requested", len(rooms_in))
        self._count("rooms_dropped", dropped)

        if not grid.rooms:
            self._log.debug(event="outline_fallback", supplied=len(rooms_in), dropped=dropped)
            self._place_random(grid)
            router = self._router(avoid_other_rooms=True)
            stats = self._phase("connect", connect_rooms, grid, router, self.config.connectivity)
            self._record_routing(router, stats)
            return self._finish(grid)

        self._phase("carve_rooms", carve_rooms, grid)
        self._count("rooms_placed", len(grid.rooms))
        router = self._router(avoid_other_rooms=False)
        if connections is None:
            stats = self._phase(
                "connect", connect_rooms, grid, router, self.config.connectivity, euclidean=True
            )
        else:
            carved = self._phase("connect", connect_specific_rooms, grid, router, connections)
            stats = {"edges_selected": carved, "loops_added": 0}
            if carved == 0:
                stats = self._phase(
                    "connect_fallback", connect_rooms, grid, router, ConnectivityStrategy.MST, euclidean=True
                )
        self._record_routing(router, stats)
        return self._finish(grid)

    # --- stages --------------------------------------------------------
    def _place_random(self, grid: DungeonGrid) -> None:
        budget = room_budget(grid, self.config)
        self._phase("rooms", self._placer, grid, self.config, self._rng, budget)
        self._phase("carve_rooms", carve_rooms, grid)
        if self.config.enable_metrics:
            self.metrics["rooms_requested"] = self.metrics.get("rooms_requested", 0) + budget
            self.metrics["rooms_placed"] = len(grid.rooms)

    def _router(self, avoid_other_rooms: bool) -> CorridorRouter:
        return CorridorRouter(
            self.grid,
            self.config.corridor_style,
            self._rng,
            noise=self.config.errant_noise,
            avoid_other_rooms=avoid_other_rooms,
            logger=get_logger("dungeongen.connectivity").bind(seed=self.seed),
        )

    def _record_routing(self, router: CorridorRouter, stats: Mapping[str, int]) -> None:
        self._count("edges_selected", stats.get("edges_selected", 0))
        self._count("loops_added", stats.get("loops_added", 0))
        self._count("corridors_carved", router.carved)
        self._count("astar_fallbacks", router.fallbacks)

    def _finish(self, grid: DungeonGrid) -> DungeonGrid:
        cfg = self.config
        pruned = self._phase("prune", prune_dead_ends, grid, cfg.dead_end_removal, self._rng)
        self._count("dead_ends_pruned", pruned)
        if cfg.peripheral_egress:
            exits = self._phase("exits", place_exits, grid)
            self._count("exits_carved", exits)
        stairs = self._phase("stairs", place_stairs, grid, cfg.stairs_up, cfg.stairs_down, self._rng)
        self._count("stairs_placed", stairs)
        doors = self._phase("doors", place_doors, grid, cfg.door_density, self._rng)
        self._count("doors_placed", doors)
        band = self._phase("wall_band", grid.carve_wall_perimeter, cfg.wall_band)
        self._count("wall_band_cells", band)

        runtime_ms = int((time.perf_counter() - self._start) * 1000)
        if cfg.enable_metrics:
            self.metrics["runtime_ms"] = runtime_ms
            self.metrics["phase_ms"] = dict(self._phase_times)
        grid.metrics = self.metrics
        self._log.info(
            event="dungeon_generated",
            width=grid.width,
            height=grid.height,
            rooms=len(grid.rooms),
            doors=len(grid.doors),
            runtime_ms=runtime_ms,
        )
        return grid


def _split_outline(outline: Any):
    if isinstance(outline, Mapping):
        rooms = outline.get("rooms")
        if rooms is None:
            rooms = []
        connections = outline.get("connections")
    elif isinstance(outline, (list, tuple)):
        rooms, connections = outline, None
    else:
        raise ValidationError("outline", "must be an object with a rooms list or a list of rooms", "outline")
    if not isinstance(rooms, (list, tuple)):
        raise ValidationError("outline.rooms", "must be a list", "outline")
    if connections is not None and not isinstance(connections, (list, tuple)):
        raise ValidationError("outline.connections", "must be a list", "outline")
    return list(rooms), connections


def generate(width: int, height: int, options: Optional[Mapping[str, Any]] = None) -> DungeonGrid:
    """Run the full randomised pipeline on a ``width`` x ``height`` grid."""
    config = DungeonConfig.from_options(options, width=width, height=height)
    return DungeonPipeline(config).run()


def generate_from_outline(width: int, height: int, options: Optional[Mapping[str, Any]],
                          outline: Any) -> DungeonGrid:
    """Same pipeline from routing onward, over caller-supplied rooms."""
    config = DungeonConfig.from_options(options, width=width, height=height)
    return DungeonPipeline(config).run_from_outline(outline)


__all__ = ["DungeonPipeline", "generate", "generate_from_outline"]
