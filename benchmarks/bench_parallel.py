#!/usr/bin/env python3
"""Benchmark parallel replicate processing.

Runs the fully stochastic scenario at workers=1,2,4,8 with a fixed seed
and reports wall-clock times. Every worker count must reproduce the
serial result exactly.
"""

import time

import numpy as np

from pva_sim.config import default_config, override_config
from pva_sim.extinction import quasi_extinction_probability
from pva_sim.model import run_projection
from pva_sim.scenarios import apply_scenario


def make_config(n_replicates=2000, n_years=50, workers=1):
    """Fully stochastic config at the requested size."""
    config = override_config(default_config(), {
        'simulation': {
            'replicate_count': n_replicates,
            'year_count': n_years,
            'initial_population': 50,
            'parallel_workers': workers,
        },
    })
    return apply_scenario(config, 'full')


def benchmark(n_replicates=2000, n_years=50, workers_list=None, seed=42):
    """Run benchmark across different worker counts."""
    if workers_list is None:
        workers_list = [1, 2, 4, 8]

    results = {}
    reference = None
    for w in workers_list:
        config = make_config(n_replicates, n_years, w)

        t0 = time.perf_counter()
        result = run_projection(config, seed=seed)
        elapsed = time.perf_counter() - t0

        matrix = result.population_matrix()
        if reference is None:
            reference = matrix
        identical = np.array_equal(matrix, reference)
        p = quasi_extinction_probability(result, config.extinction.threshold)

        results[w] = {'elapsed': elapsed, 'probability': p, 'identical': identical}
        print(f"  workers={w:2d}  time={elapsed:6.2f}s  "
              f"P(qe)={p:.4f}  identical={identical}")

    return results


if __name__ == "__main__":
    print("Benchmark: 2000 replicates, 50 years, all uncertainty mechanisms on")
    print(f"{'='*60}")
    results = benchmark()

    print(f"\n{'='*60}")
    print("Summary:")
    serial_time = results[1]['elapsed']
    for w, r in results.items():
        speedup = serial_time / r['elapsed'] if r['elapsed'] > 0 else 0
        print(f"  workers={w:2d}: {r['elapsed']:6.2f}s  "
              f"speedup={speedup:.2f}x")
