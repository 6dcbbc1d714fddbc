"""Named uncertainty scenarios.

Each scenario is a config override that switches the three uncertainty
mechanisms on or off; vital rates and run size are left to the base
configuration.
"""

from __future__ import annotations

import copy
from typing import Dict

from pva_sim.config import SimulationConfig, override_config
from pva_sim.errors import ConfigurationError


def _switches(environmental: bool, demographic: bool, parametric: bool) -> Dict:
    return {
        'stochasticity': {
            'environmental': environmental,
            'demographic': demographic,
            'parametric': parametric,
        }
    }


SCENARIOS: Dict[str, Dict] = {
    'deterministic': _switches(False, False, False),
    'environmental': _switches(True, False, False),
    'demographic':   _switches(False, True, False),
    'parametric':    _switches(False, False, True),
    'full':          _switches(True, True, True),
}


def scenario_overrides(name: str) -> Dict:
    """Override dict for a named scenario (a fresh copy)."""
    try:
        return copy.deepcopy(SCENARIOS[name])
    except KeyError:
        raise ConfigurationError(
            f"unknown scenario '{name}', expected one of {sorted(SCENARIOS)}"
        ) from None


def apply_scenario(config: SimulationConfig, name: str) -> SimulationConfig:
    """Return ``config`` with the named scenario's switches applied."""
    return override_config(config, scenario_overrides(name))
