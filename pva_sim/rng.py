"""Seeded RNG factory for reproducible projections.

Uses NumPy's SeedSequence → PCG64 hierarchy to guarantee:
  - Statistical independence between per-replicate streams
  - Bit-exact replay with the same master seed, serial or parallel
  - Adding replicates doesn't affect existing replicates' streams
"""

from __future__ import annotations

import numbers
from typing import List, Union

import numpy as np

from pva_sim.errors import ConfigurationError

SeedLike = Union[int, np.random.SeedSequence, None]


def master_seed_sequence(seed: SeedLike = None) -> np.random.SeedSequence:
    """Build the root SeedSequence for a run.

    ``None`` draws fresh OS entropy; the chosen entropy is available as
    ``.entropy`` on the returned sequence so the run can be replayed.

    Raises:
        ConfigurationError: If ``seed`` is not None, a SeedSequence or a
            non-negative integer.
    """
    if seed is None:
        return np.random.SeedSequence()
    if isinstance(seed, np.random.SeedSequence):
        return seed
    if (not isinstance(seed, numbers.Integral) or isinstance(seed, bool)
            or seed < 0):
        raise ConfigurationError(
            f"seed must be a non-negative integer, a SeedSequence or None, "
            f"got {seed!r}"
        )
    return np.random.SeedSequence(int(seed))


def replicate_seed_sequences(
    seed: SeedLike,
    n_replicates: int,
) -> List[np.random.SeedSequence]:
    """Spawn one child SeedSequence per replicate.

    Spawning is positional: child ``i`` depends only on the master
    entropy and ``i``, not on ``n_replicates``. A SeedSequence passed in
    directly keeps its spawn counter, so reusing it yields new children.
    """
    if n_replicates < 0:
        raise ValueError(f"n_replicates must be >= 0, got {n_replicates}")
    return master_seed_sequence(seed).spawn(n_replicates)


def replicate_rng(child: np.random.SeedSequence) -> np.random.Generator:
    """PCG64 Generator for one replicate's SeedSequence child."""
    return np.random.Generator(np.random.PCG64(child))


def create_replicate_rngs(
    seed: SeedLike,
    n_replicates: int,
) -> List[np.random.Generator]:
    """Create an independent PCG64 Generator for every replicate.

    Args:
        seed: Master seed (non-negative int), a SeedSequence, or None.
        n_replicates: Number of replicate streams.

    Returns:
        List of Generators; element ``i`` belongs to replicate ``i`` and
        draws exactly what ``run_projection`` gives replicate ``i``.

    Example:
        >>> rngs = create_replicate_rngs(42, n_replicates=1000)
        >>> rngs[0].poisson(5.0)  # reproducible
    """
    return [replicate_rng(child) for child in replicate_seed_sequences(seed, n_replicates)]
