"""PVA-Sim: stochastic population viability analysis.

Projects a single unstructured population forward under exponential
growth perturbed by three independent uncertainty mechanisms:
  - Environmental stochasticity (year-to-year vital rate variation)
  - Demographic stochasticity (Poisson births, Binomial deaths)
  - Parametric uncertainty (per-replicate mean rates from a range)
and estimates the probability of ending below a quasi-extinction threshold.

Typical use:
    >>> from pva_sim import default_config, run_projection, quasi_extinction_probability
    >>> result = run_projection(default_config(), seed=1)
    >>> quasi_extinction_probability(result, threshold=50)
"""

from pva_sim.config import (  # noqa: F401
    SimulationConfig,
    default_config,
    load_config,
    override_config,
)
from pva_sim.errors import (  # noqa: F401
    ConfigurationError,
    InvalidThresholdError,
    PVAError,
    SamplingDomainError,
)
from pva_sim.extinction import (  # noqa: F401
    evaluate_quasi_extinction,
    quasi_extinction_curve,
    quasi_extinction_probability,
)
from pva_sim.model import run_projection  # noqa: F401
from pva_sim.types import ProjectionResult, QuasiExtinctionResult, Replicate  # noqa: F401

__version__ = "0.1.0"
