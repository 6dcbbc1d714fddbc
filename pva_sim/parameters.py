"""Per-replicate mean vital rates.

Parametric uncertainty represents not knowing the true rate of a
population: each replicate draws its mean birth and death rate once from
Uniform(minimum, maximum) and keeps them for its whole lifetime. With
the flag off the configured means are used and no random draw is made.
"""

from __future__ import annotations

import numpy as np

from pva_sim.config import SimulationConfig, VitalRateSection
from pva_sim.types import MeanRates


def _draw_mean(rates: VitalRateSection, rng: np.random.Generator) -> float:
    if rates.minimum == rates.maximum:
        return float(rates.minimum)
    return float(rng.uniform(rates.minimum, rates.maximum))


def resolve_mean_rates(
    config: SimulationConfig,
    rng: np.random.Generator,
) -> MeanRates:
    """Resolve one replicate's mean birth and death rates.

    Args:
        config: Validated SimulationConfig.
        rng: The replicate's own Generator.

    Returns:
        MeanRates, constant across the replicate's years.
    """
    if not config.stochasticity.parametric:
        return MeanRates(birth=float(config.birth.mean),
                         death=float(config.death.mean))
    birth = _draw_mean(config.birth, rng)
    death = _draw_mean(config.death, rng)
    return MeanRates(birth=birth, death=death)
