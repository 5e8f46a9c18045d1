import time
import pytest
from dungeongen import build_walls, generate

# Simple performance guardrail. Not a strict micro-benchmark; aims to catch large regressions.
# Adjust thresholds if CI hardware differs significantly.

@pytest.mark.performance
def test_generation_medium_seeds():
    seeds = [10101, 20202, 30303]
    max_seconds_per = 6.0  # generous threshold; errant A* dominates
    timings = []
    for s in seeds:
        start = time.perf_counter()
        g = generate(75, 75, {'seed': s, 'corridorStyle': 'errant', 'connectivity': 'mst_loops'})
        build_walls(g, 20, 0, outset=0.2)
        elapsed = time.perf_counter() - start
        timings.append(elapsed)
        assert g.rooms
        assert elapsed < max_seconds_per, f"Seed {s} took {elapsed:.3f}s (> {max_seconds_per}s)"
    avg = sum(timings)/len(timings)
    assert avg < max_seconds_per * 0.85, f"Average generation {avg:.3f}s too high"
