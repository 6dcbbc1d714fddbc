"""Demographic stochasticity: realized births and deaths for one year.

Deterministic mode returns the expected counts N·b and N·d as reals.
Stochastic mode draws
  births ~ Poisson(N·b)
  deaths ~ Binomial(floor(N), min(d, 1))
Binomial bounds deaths by the number of individuals alive, which is why
deaths are not drawn from a Poisson as well.

Inputs are checked before any draw; an out-of-domain parameter raises
SamplingDomainError instead of being coerced to zero events.
"""

from __future__ import annotations

import math

import numpy as np

from pva_sim.errors import SamplingDomainError
from pva_sim.types import VitalEvents


def binomial_trials(population: float) -> int:
    """Number of Binomial death trials for a (possibly non-integer) population.

    Populations become non-integer when an earlier step ran in
    deterministic mode, or when the initial population is fractional.
    The fractional individual is dropped: trials = floor(N).
    """
    return int(math.floor(population))


def death_probability(death_rate: float) -> float:
    """Per-individual death probability; a rate of 1 or more kills everyone."""
    return min(death_rate, 1.0)


def _check_domain(population: float, birth_rate: float, death_rate: float) -> None:
    for name, value in (('population', population),
                        ('birth rate', birth_rate),
                        ('death rate', death_rate)):
        if not math.isfinite(value):
            raise SamplingDomainError(f"{name} is not finite: {value}")
        if value < 0:
            raise SamplingDomainError(f"{name} is negative: {value}")


def sample_vital_events(
    population: float,
    birth_rate: float,
    death_rate: float,
    demographic: bool,
    rng: np.random.Generator,
) -> VitalEvents:
    """Convert a year's population size and rates into births and deaths.

    Args:
        population: Current population size N (>= 0).
        birth_rate: This year's per-capita birth rate b (>= 0).
        death_rate: This year's per-capita death rate d (>= 0).
        demographic: Demographic stochasticity flag.
        rng: The replicate's Generator. Untouched when ``demographic`` is off.

    Returns:
        VitalEvents. At N = 0 both counts are 0 in either mode.

    Raises:
        SamplingDomainError: If N or a rate is negative or non-finite.
    """
    _check_domain(population, birth_rate, death_rate)

    if not demographic:
        return VitalEvents(births=population * birth_rate,
                           deaths=population * death_rate)

    trials = binomial_trials(population)
    births = rng.poisson(population * birth_rate)
    deaths = rng.binomial(trials, death_probability(death_rate)) if trials > 0 else 0
    return VitalEvents(births=float(births), deaths=float(deaths))
