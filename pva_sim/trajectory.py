"""Single-replicate population trajectory.

State is the population size at the current year:
  N[1] = initial_population
  N[t] = max(0, N[t-1] + births[t-1] - deaths[t-1]),  t = 2 … year_count

Zero is absorbing: once N hits 0 the remaining years are filled with 0
without further sampling (births and deaths at N = 0 are 0 in every mode).
"""

from __future__ import annotations

import numpy as np

from pva_sim.config import SimulationConfig
from pva_sim.demography import sample_vital_events
from pva_sim.errors import SamplingDomainError
from pva_sim.parameters import resolve_mean_rates
from pva_sim.rates import generate_rate_sequences
from pva_sim.types import RateSequences, Replicate


def project_population(
    initial_population: float,
    rates: RateSequences,
    demographic: bool,
    rng: np.random.Generator,
):
    """Advance a population through a sequence of annual rates.

    Args:
        initial_population: N[1].
        rates: Per-year rates; ``len(rates)`` transitions are simulated.
        demographic: Demographic stochasticity flag.
        rng: The replicate's Generator.

    Returns:
        (population, births, deaths) arrays of length len(rates) + 1,
        len(rates) and len(rates).

    Raises:
        SamplingDomainError: With ``year`` set to the transition's source year.
    """
    n_steps = len(rates)
    population = np.zeros(n_steps + 1, dtype=np.float64)
    births = np.zeros(n_steps, dtype=np.float64)
    deaths = np.zeros(n_steps, dtype=np.float64)
    population[0] = initial_population

    for t in range(n_steps):
        n_now = population[t]
        if n_now == 0.0:
            # absorbing: remaining years already zero
            break
        try:
            events = sample_vital_events(
                n_now, rates.birth[t], rates.death[t], demographic, rng,
            )
        except SamplingDomainError as exc:
            raise SamplingDomainError(exc.reason, year=t + 1) from exc
        births[t] = events.births
        deaths[t] = events.deaths
        population[t + 1] = max(0.0, n_now + events.births - events.deaths)

    return population, births, deaths


def simulate_replicate(
    config: SimulationConfig,
    rng: np.random.Generator,
    index: int = 0,
) -> Replicate:
    """Run the full pipeline for one replicate.

    resolve mean rates → per-year rate sequences → year loop.

    Args:
        config: Validated SimulationConfig (read-only, shared).
        rng: This replicate's own Generator.
        index: Replicate index, used only to label the result and errors.

    Returns:
        Replicate with its own population/births/deaths arrays.

    Raises:
        SamplingDomainError: Annotated with ``index`` and the failing year.
    """
    mean_rates = resolve_mean_rates(config, rng)
    rates = generate_rate_sequences(
        mean_rates, config.simulation.year_count - 1, config, rng,
    )
    try:
        population, births, deaths = project_population(
            config.simulation.initial_population,
            rates,
            config.stochasticity.demographic,
            rng,
        )
    except SamplingDomainError as exc:
        raise SamplingDomainError(exc.reason, replicate=index, year=exc.year) from exc

    return Replicate(
        index=index,
        population=population,
        births=births,
        deaths=deaths,
        mean_rates=mean_rates,
        rates=rates,
    )
