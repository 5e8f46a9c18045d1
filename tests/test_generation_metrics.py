from dungeongen import generate

PHASES = ['mask', 'rooms', 'carve_rooms', 'connect', 'prune', 'stairs', 'doors', 'wall_band']


def test_metrics_keys_and_consistency():
    g = generate(60, 60, {'seed': 2024, 'deadEndRemoval': 'all'})
    m = g.metrics
    for k in ['rooms_requested', 'rooms_placed', 'rooms_dropped', 'edges_selected', 'loops_added',
              'corridors_carved', 'astar_fallbacks', 'dead_ends_pruned', 'exits_carved', 'stairs_placed',
              'doors_placed', 'wall_band_cells', 'runtime_ms', 'phase_ms']:
        assert k in m, f"missing metric {k}"
    assert m['rooms_requested'] == 18  # floor(60 * 60 * 0.4 / 80)
    assert m['rooms_placed'] == len(g.rooms)
    assert m['doors_placed'] == len(g.doors)
    assert m['stairs_placed'] == len(g.stairs)
    assert m['corridors_carved'] == m['edges_selected'] >= len(g.rooms) - 1
    assert m['exits_carved'] == 0
    assert m['wall_band_cells'] > 0
    assert isinstance(m['runtime_ms'], int)
    for phase in PHASES:
        assert phase in m['phase_ms'], f"phase {phase} not timed"
    assert 'exits' not in m['phase_ms']


def test_metrics_disabled():
    g = generate(40, 40, {'seed': 1, 'enable_metrics': False})
    assert g.metrics == {}
    assert g.rooms


def test_grid_dict_carries_metrics():
    g = generate(30, 30, {'seed': 9})
    d = g.to_dict()
    assert d['metrics']['rooms_placed'] == len(d['rooms'])
    assert d['seed'] == 9
