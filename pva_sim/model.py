"""Replicate aggregation: the projection entry point.

``run_projection`` validates the configuration, spawns one independent
random stream per replicate, runs every replicate's pipeline

  resolve mean rates → rate sequences → year loop (sample → step)

and collects the trajectories into a ProjectionResult.

Replicates share nothing but the frozen SimulationConfig, so they can be
fanned out over a thread pool (``simulation.parallel_workers > 1``)
without locks. Because each replicate owns a SeedSequence child keyed by
its index, serial and parallel runs with the same seed are bit-identical.
The year loop is scalar Python and holds the GIL for most of each
replicate, so extra workers buy little wall-clock time
(``benchmarks/bench_parallel.py`` reports the measured speedup).

The result is built locally and returned whole; a failing replicate
aborts the run and nothing partial escapes.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

import numpy as np

from pva_sim.config import SimulationConfig, validate_config
from pva_sim.rng import (
    SeedLike,
    master_seed_sequence,
    replicate_rng,
    replicate_seed_sequences,
)
from pva_sim.trajectory import simulate_replicate
from pva_sim.types import ProjectionResult, Replicate

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

# Replicates handed to a worker per task; keeps executor overhead small.
_CHUNK_SIZE = 64


def _run_chunk(
    config: SimulationConfig,
    children: List[np.random.SeedSequence],
    start: int,
) -> List[Replicate]:
    return [
        simulate_replicate(config, replicate_rng(child), index=start + offset)
        for offset, child in enumerate(children)
    ]


def run_projection(
    config: SimulationConfig,
    seed: SeedLike = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> ProjectionResult:
    """Simulate ``replicate_count`` independent population trajectories.

    Args:
        config: SimulationConfig; validated before any sampling.
        seed: Overrides ``config.simulation.seed``. If both are None,
            fresh OS entropy is used and recorded on the result.
        progress_callback: Optional callable(done, total), invoked as
            chunks of replicates complete.

    Returns:
        ProjectionResult with replicates ordered by index.

    Raises:
        ConfigurationError: If the configuration or ``seed`` is invalid.
        SamplingDomainError: If any replicate hits an invalid
            distribution parameter; the whole run fails.
    """
    # load_config / override_config already emitted the warnings.
    validate_config(config, warn=False)
    sim = config.simulation

    if seed is None:
        seed = sim.seed
    root = master_seed_sequence(seed)
    children = replicate_seed_sequences(root, sim.replicate_count)
    chunks = [
        (children[start:start + _CHUNK_SIZE], start)
        for start in range(0, sim.replicate_count, _CHUNK_SIZE)
    ]

    logger.info(
        "Projecting %d replicates x %d years (workers=%d, entropy=%s)",
        sim.replicate_count, sim.year_count, sim.parallel_workers, root.entropy,
    )
    t0 = time.perf_counter()

    replicates: List[Replicate] = []
    done = 0
    if sim.parallel_workers == 1:
        for chunk_children, start in chunks:
            replicates.extend(_run_chunk(config, chunk_children, start))
            done += len(chunk_children)
            _report_progress(progress_callback, done, sim.replicate_count)
    else:
        with ThreadPoolExecutor(max_workers=sim.parallel_workers) as pool:
            futures = [
                pool.submit(_run_chunk, config, chunk_children, start)
                for chunk_children, start in chunks
            ]
            try:
                for future in futures:
                    chunk_result = future.result()
                    replicates.extend(chunk_result)
                    done += len(chunk_result)
                    _report_progress(progress_callback, done, sim.replicate_count)
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

    elapsed = time.perf_counter() - t0
    logger.info("Projection finished in %.3fs", elapsed)

    return ProjectionResult(
        replicates=tuple(replicates),
        year_count=sim.year_count,
        config=config,
        seed_entropy=root.entropy,
        elapsed_s=elapsed,
    )


def _report_progress(
    callback: Optional[ProgressCallback],
    done: int,
    total: int,
) -> None:
    logger.debug("%d/%d replicates complete", done, total)
    if callback is not None:
        callback(done, total)
