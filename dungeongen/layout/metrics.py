from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'rooms_requested': 0,
        'rooms_placed': 0,
        'rooms_dropped': 0,
        'edges_selected': 0,
        'loops_added': 0,
        'corridors_carved': 0,
        'astar_fallbacks': 0,
        'dead_ends_pruned': 0,
        'exits_carved': 0,
        'stairs_placed': 0,
        'doors_placed': 0,
        'wall_band_cells': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
