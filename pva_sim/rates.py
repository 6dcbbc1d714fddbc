"""Environmental stochasticity: per-year vital rate sequences.

Each year's rate is an independent draw from Normal(mean, sd) with the
absolute value taken, so a negative draw is reflected into the positive
range. Reflection (rather than resampling or truncating at zero) shifts
the realized mean upward when sd is large relative to the mean; that
bias is part of the model.

Birth and death draws use their own SDs. No autocorrelation between years.
"""

from __future__ import annotations

import numpy as np

from pva_sim.config import SimulationConfig
from pva_sim.types import MeanRates, RateSequences


def reflected_normal(
    mean: float,
    sd: float,
    size: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """Draw ``size`` values from |Normal(mean, sd)|."""
    if sd == 0.0:
        return np.full(size, abs(mean), dtype=np.float64)
    return np.abs(rng.normal(mean, sd, size=size))


def generate_rate_sequences(
    mean_rates: MeanRates,
    n_transitions: int,
    config: SimulationConfig,
    rng: np.random.Generator,
) -> RateSequences:
    """Expand a replicate's mean rates into per-year rate sequences.

    Args:
        mean_rates: Output of ``resolve_mean_rates``.
        n_transitions: Number of annual steps (year_count - 1).
        config: Validated SimulationConfig (SDs and environmental flag).
        rng: The replicate's own Generator.

    Returns:
        RateSequences of length ``n_transitions``. Constant when
        environmental stochasticity is off.
    """
    if not config.stochasticity.environmental:
        return RateSequences(
            birth=np.full(n_transitions, mean_rates.birth, dtype=np.float64),
            death=np.full(n_transitions, mean_rates.death, dtype=np.float64),
        )
    birth = reflected_normal(mean_rates.birth, config.birth.sd, n_transitions, rng)
    death = reflected_normal(mean_rates.death, config.death.sd, n_transitions, rng)
    return RateSequences(birth=birth, death=death)
