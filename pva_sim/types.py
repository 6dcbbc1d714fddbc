"""Core data types for PVA-Sim.

Inter-stage data transfer objects for one replicate's pipeline:
  MeanRates → RateSequences → VitalEvents (per year) → Replicate

and the run-level containers:
  ProjectionResult (all replicates of one config) → QuasiExtinctionResult

Arrays inside a Replicate are owned by that replicate; no two replicates
share a buffer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple, Union

import numpy as np
import pandas as pd

if TYPE_CHECKING:
    from pva_sim.config import SimulationConfig


FRAME_COLUMNS = ['replicate', 'year', 'population', 'births', 'deaths']


# ═══════════════════════════════════════════════════════════════════════
# PER-REPLICATE PIPELINE OBJECTS
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MeanRates:
    """Per-replicate mean vital rates (fixed for the replicate's lifetime)."""
    birth: float
    death: float


@dataclass(frozen=True, eq=False)
class RateSequences:
    """Per-year birth and death rates, one entry per annual transition."""
    birth: np.ndarray
    death: np.ndarray

    def __len__(self) -> int:
        return len(self.birth)


@dataclass(frozen=True)
class VitalEvents:
    """Realized births and deaths for one year."""
    births: float
    deaths: float


@dataclass(eq=False)
class Replicate:
    """One independent simulated trajectory.

    ``population`` has one value per year (year 1 = initial population);
    ``births[t]``/``deaths[t]`` and the rates at ``t`` produced the step
    from ``population[t]`` to ``population[t + 1]``.
    """
    index: int
    population: np.ndarray
    births: np.ndarray
    deaths: np.ndarray
    mean_rates: MeanRates
    rates: RateSequences

    @property
    def year_count(self) -> int:
        return len(self.population)

    @property
    def final_population(self) -> float:
        return float(self.population[-1])

    @property
    def minimum_population(self) -> float:
        return float(self.population.min())

    @property
    def is_extinct(self) -> bool:
        """True if the population reached the absorbing zero state."""
        return self.final_population == 0.0

    def extinction_year(self) -> Optional[int]:
        """First year (1-based) at which population is 0, or None."""
        zeros = np.flatnonzero(self.population == 0.0)
        if len(zeros) == 0:
            return None
        return int(zeros[0]) + 1


# ═══════════════════════════════════════════════════════════════════════
# RUN-LEVEL RESULTS
# ═══════════════════════════════════════════════════════════════════════

@dataclass(eq=False)
class ProjectionResult:
    """All replicates of one projection run.

    Replicate order carries no meaning; year order within a replicate does.
    """
    replicates: Tuple[Replicate, ...]
    year_count: int
    config: Optional['SimulationConfig'] = None
    seed_entropy: Optional[int] = None
    elapsed_s: float = 0.0
    _matrix: Optional[np.ndarray] = field(default=None, init=False, repr=False)

    @property
    def replicate_count(self) -> int:
        return len(self.replicates)

    def population_matrix(self) -> np.ndarray:
        """Population sizes, shape (replicate_count, year_count). Read-only."""
        if self._matrix is None:
            if self.replicates:
                matrix = np.vstack([r.population for r in self.replicates])
            else:
                matrix = np.zeros((0, self.year_count), dtype=np.float64)
            matrix.setflags(write=False)
            self._matrix = matrix
        return self._matrix

    def final_population(self) -> np.ndarray:
        """Final-year population size of every replicate."""
        return self.population_matrix()[:, -1]

    def minimum_population(self) -> np.ndarray:
        """Lowest population size reached by every replicate."""
        return self.population_matrix().min(axis=1)

    def to_frame(self) -> pd.DataFrame:
        """Long-format table of (replicate, year, population, births, deaths).

        Years are 1-based. The final year has no outgoing transition, so
        its births and deaths are NaN.
        """
        n_rep = self.replicate_count
        n_years = self.year_count
        births = np.full((n_rep, n_years), np.nan)
        deaths = np.full((n_rep, n_years), np.nan)
        for i, rep in enumerate(self.replicates):
            births[i, :n_years - 1] = rep.births
            deaths[i, :n_years - 1] = rep.deaths
        return pd.DataFrame({
            'replicate': np.repeat([r.index for r in self.replicates], n_years),
            'year': np.tile(np.arange(1, n_years + 1), n_rep),
            'population': self.population_matrix().ravel(),
            'births': births.ravel(),
            'deaths': deaths.ravel(),
        }, columns=FRAME_COLUMNS)

    def to_csv(self, path: Union[str, Path]) -> None:
        """Write ``to_frame()`` as CSV."""
        self.to_frame().to_csv(path, index=False)


@dataclass(frozen=True)
class QuasiExtinctionResult:
    """Outcome of evaluating a ProjectionResult against a threshold."""
    threshold: float
    probability: float
    rule: str = "final"
    n_quasi_extinct: int = 0
    replicate_count: int = 0
