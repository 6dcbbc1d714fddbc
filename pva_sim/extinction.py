"""Quasi-extinction probability.

A replicate is quasi-extinct when its FINAL-year population is strictly
below the threshold τ. A replicate that dipped below τ and recovered by
the last year does not count. This understates risk relative to a
running-minimum definition, which is available as ``rule="minimum"``.

The evaluator only reads the ProjectionResult.
"""

from __future__ import annotations

import math
from typing import Iterable

import numpy as np
import pandas as pd

from pva_sim.config import EXTINCTION_RULES
from pva_sim.errors import InvalidThresholdError
from pva_sim.types import ProjectionResult, QuasiExtinctionResult


def _check_threshold(threshold: float) -> None:
    if threshold is None or not math.isfinite(threshold) or threshold < 0:
        raise InvalidThresholdError(
            f"quasi-extinction threshold must be a finite non-negative "
            f"number, got {threshold!r}"
        )


def _evaluated_sizes(result: ProjectionResult, rule: str) -> np.ndarray:
    if rule == "final":
        return result.final_population()
    if rule == "minimum":
        return result.minimum_population()
    raise ValueError(f"rule must be one of {EXTINCTION_RULES}, got '{rule}'")


def evaluate_quasi_extinction(
    result: ProjectionResult,
    threshold: float,
    rule: str = "final",
) -> QuasiExtinctionResult:
    """Count quasi-extinct replicates and return the full evaluation.

    Args:
        result: ProjectionResult from ``run_projection``.
        threshold: Quasi-extinction threshold τ (>= 0).
        rule: "final" (final-year size < τ) or "minimum" (any year < τ).

    Raises:
        InvalidThresholdError: If τ is negative or not finite.
        ValueError: If the result holds no replicates or rule is unknown.
    """
    _check_threshold(threshold)
    if result.replicate_count == 0:
        raise ValueError("ProjectionResult has no replicates")
    sizes = _evaluated_sizes(result, rule)
    n_below = int(np.count_nonzero(sizes < threshold))
    return QuasiExtinctionResult(
        threshold=float(threshold),
        probability=n_below / result.replicate_count,
        rule=rule,
        n_quasi_extinct=n_below,
        replicate_count=result.replicate_count,
    )


def quasi_extinction_probability(
    result: ProjectionResult,
    threshold: float,
    rule: str = "final",
) -> float:
    """Fraction of replicates whose final population is below ``threshold``."""
    return evaluate_quasi_extinction(result, threshold, rule).probability


def quasi_extinction_curve(
    result: ProjectionResult,
    thresholds: Iterable[float],
    rule: str = "final",
) -> pd.DataFrame:
    """Quasi-extinction probability over a range of thresholds.

    Returns a DataFrame with columns ``threshold`` and ``probability``,
    sorted by threshold. Probability is non-decreasing in threshold.
    """
    thresholds = np.sort(np.asarray(list(thresholds), dtype=np.float64))
    for tau in thresholds:
        _check_threshold(float(tau))
    if result.replicate_count == 0:
        raise ValueError("ProjectionResult has no replicates")
    sizes = np.sort(_evaluated_sizes(result, rule))
    # count of sizes strictly below each threshold
    counts = np.searchsorted(sizes, thresholds, side='left')
    return pd.DataFrame({
        'threshold': thresholds,
        'probability': counts / result.replicate_count,
    })
