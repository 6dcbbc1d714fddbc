"""Configuration system for PVA-Sim.

Hierarchical YAML configuration with deep-merge support:
  base.yaml → scenario override → ad-hoc overrides (CLI flags, sweeps)

Configurations are frozen dataclasses. A run never sees a config change
underneath it; use ``override_config()`` to derive a new one.

Design decisions:
  - Birth and death SDs are independent parameters (never coupled)
  - Quasi-extinction rule defaults to the final-year population;
    "minimum" (running minimum) is available as an explicit opt-in
  - Binomial trial counts are floored when population is non-integer
"""

from __future__ import annotations

import copy
import dataclasses
import math
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from pva_sim.errors import ConfigurationError


EXTINCTION_RULES = ("final", "minimum")


# ═══════════════════════════════════════════════════════════════════════
# CONFIGURATION DATACLASSES
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SimulationSection:
    """Run size, horizon and execution control."""
    replicate_count: int = 1000
    year_count: int = 50
    initial_population: float = 500.0
    seed: Optional[int] = None      # None = fresh OS entropy per run
    parallel_workers: int = 1       # 1 = serial; threads, GIL-bound


@dataclass(frozen=True)
class VitalRateSection:
    """Per-capita annual vital rate and its uncertainty settings.

    ``sd`` is used only under environmental stochasticity;
    ``minimum``/``maximum`` only under parametric uncertainty.
    """
    mean: float = 0.0
    sd: float = 0.0
    minimum: float = 0.0
    maximum: float = 0.0


@dataclass(frozen=True)
class StochasticitySection:
    """Switches for the three independent uncertainty mechanisms."""
    environmental: bool = False     # per-year Normal(mean, sd) rates, abs-clamped
    demographic: bool = False       # Poisson births, Binomial deaths
    parametric: bool = False        # per-replicate Uniform(min, max) mean rates


@dataclass(frozen=True)
class ExtinctionSection:
    """Quasi-extinction evaluation settings (not used by the simulator)."""
    threshold: float = 50.0
    rule: str = "final"             # "final" or "minimum"


@dataclass(frozen=True)
class SimulationConfig:
    """Complete viability-analysis configuration.

    Load from YAML via `load_config()`. Sections map 1:1 to YAML top-level keys.
    """
    simulation: SimulationSection = field(default_factory=SimulationSection)
    birth: VitalRateSection = field(
        default_factory=lambda: VitalRateSection(
            mean=0.4, sd=0.1, minimum=0.3, maximum=0.5)
    )
    death: VitalRateSection = field(
        default_factory=lambda: VitalRateSection(
            mean=0.3, sd=0.1, minimum=0.2, maximum=0.4)
    )
    stochasticity: StochasticitySection = field(default_factory=StochasticitySection)
    extinction: ExtinctionSection = field(default_factory=ExtinctionSection)


_SECTION_MAP = {
    'simulation': SimulationSection,
    'birth': VitalRateSection,
    'death': VitalRateSection,
    'stochasticity': StochasticitySection,
    'extinction': ExtinctionSection,
}


# ═══════════════════════════════════════════════════════════════════════
# YAML LOADING & MERGING
# ═══════════════════════════════════════════════════════════════════════

def deep_merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge override into base. Modifies base in place.

    - Dict values are merged recursively
    - Non-dict values are replaced
    - Keys in override but not base are added

    Args:
        base: Base dictionary (modified in place).
        override: Override dictionary.

    Returns:
        The merged base dictionary.
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _dict_to_section(section_cls, data: Dict, default: Any) -> Any:
    """Convert a dict to a section dataclass, ignoring unknown keys.

    Fields missing from ``data`` keep the value from ``default``.
    """
    valid_fields = {f.name for f in dataclasses.fields(section_cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}
    return dataclasses.replace(default, **filtered)


def _dict_to_config(data: Dict) -> SimulationConfig:
    """Convert a merged YAML dict to a SimulationConfig."""
    defaults = SimulationConfig()
    sections = {}
    for key, cls in _SECTION_MAP.items():
        default_section = getattr(defaults, key)
        if key in data and isinstance(data[key], dict):
            sections[key] = _dict_to_section(cls, data[key], default_section)
        else:
            sections[key] = default_section
    return SimulationConfig(**sections)


def config_to_dict(config: SimulationConfig) -> Dict[str, Dict[str, Any]]:
    """Plain nested dict of a config, suitable for YAML dumping."""
    return dataclasses.asdict(config)


def dump_config(config: SimulationConfig, path: Union[str, Path]) -> None:
    """Write a config to YAML so a run can be reproduced."""
    with open(path, 'w') as f:
        yaml.safe_dump(config_to_dict(config), f, sort_keys=False)


# ═══════════════════════════════════════════════════════════════════════
# VALIDATION
# ═══════════════════════════════════════════════════════════════════════

def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _check_rate_section(name: str, rates: VitalRateSection, parametric: bool) -> None:
    for attr in ('mean', 'sd', 'minimum', 'maximum'):
        value = getattr(rates, attr)
        if not _is_real(value):
            raise ConfigurationError(
                f"{name}.{attr} must be a finite number, got {value!r}"
            )
        if value < 0:
            raise ConfigurationError(
                f"{name}.{attr} must be non-negative, got {value}"
            )
    if parametric and rates.minimum > rates.maximum:
        raise ConfigurationError(
            f"{name}.minimum ({rates.minimum}) must be <= "
            f"{name}.maximum ({rates.maximum}) under parametric uncertainty"
        )


def _reachable_death_rate(config: SimulationConfig) -> float:
    """Largest mean death rate a replicate can be assigned."""
    if config.stochasticity.parametric:
        return config.death.maximum
    return config.death.mean


def validate_config(config: SimulationConfig, warn: bool = True) -> None:
    """Validate configuration constraints. Raises ConfigurationError on failure.

    Checks:
      - Replicate and year counts are positive integers
      - Initial population is finite and non-negative
      - All rates and SDs are finite and non-negative
      - min <= max for both rates when parametric uncertainty is on
      - Stochasticity flags are booleans
      - Threshold is non-negative and the extinction rule is known

    Warns (UserWarning) when demographic stochasticity will floor a
    non-integer initial population, or may cap a death rate above 1.
    ``warn=False`` runs the checks without repeating those warnings.
    """
    sim = config.simulation
    if not _is_int(sim.replicate_count) or sim.replicate_count <= 0:
        raise ConfigurationError(
            f"simulation.replicate_count must be a positive integer, "
            f"got {sim.replicate_count!r}"
        )
    if not _is_int(sim.year_count) or sim.year_count < 1:
        raise ConfigurationError(
            f"simulation.year_count must be an integer >= 1, "
            f"got {sim.year_count!r}"
        )
    if not _is_real(sim.initial_population) or sim.initial_population < 0:
        raise ConfigurationError(
            f"simulation.initial_population must be a finite non-negative "
            f"number, got {sim.initial_population!r}"
        )
    if sim.seed is not None and (not _is_int(sim.seed) or sim.seed < 0):
        raise ConfigurationError(
            f"simulation.seed must be a non-negative integer or null, "
            f"got {sim.seed!r}"
        )
    if not _is_int(sim.parallel_workers) or sim.parallel_workers < 1:
        raise ConfigurationError(
            f"simulation.parallel_workers must be an integer >= 1, "
            f"got {sim.parallel_workers!r}"
        )

    stoch = config.stochasticity
    for flag in ('environmental', 'demographic', 'parametric'):
        value = getattr(stoch, flag)
        if not isinstance(value, bool):
            raise ConfigurationError(
                f"stochasticity.{flag} must be true or false, got {value!r}"
            )

    _check_rate_section('birth', config.birth, stoch.parametric)
    _check_rate_section('death', config.death, stoch.parametric)

    ext = config.extinction
    if not _is_real(ext.threshold) or ext.threshold < 0:
        raise ConfigurationError(
            f"extinction.threshold must be a finite non-negative number, "
            f"got {ext.threshold!r}"
        )
    if ext.rule not in EXTINCTION_RULES:
        raise ConfigurationError(
            f"extinction.rule must be one of {EXTINCTION_RULES}, "
            f"got '{ext.rule}'"
        )

    if warn and stoch.demographic:
        if sim.initial_population != math.floor(sim.initial_population):
            warnings.warn(
                f"simulation.initial_population ({sim.initial_population}) "
                f"is not an integer; Binomial death trials will use "
                f"floor(N) = {math.floor(sim.initial_population)}.",
                UserWarning,
                stacklevel=2,
            )
        if _reachable_death_rate(config) > 1.0:
            warnings.warn(
                "death rate above 1 is reachable under demographic "
                "stochasticity; the Binomial death probability is capped at 1.",
                UserWarning,
                stacklevel=2,
            )


# ═══════════════════════════════════════════════════════════════════════
# CONSTRUCTION
# ═══════════════════════════════════════════════════════════════════════

def _read_yaml(path: Path) -> Dict:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"{path}: top level must be a mapping, got {type(data).__name__}"
        )
    return data


def load_config(
    base_path: Union[str, Path],
    scenario_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict] = None,
) -> SimulationConfig:
    """Load and merge hierarchical YAML configuration.

    Merge order: base → scenario → overrides.
    Each layer overrides only the fields it specifies.

    Args:
        base_path: Path to base configuration YAML.
        scenario_path: Optional scenario override YAML.
        overrides: Optional nested dict of overrides (e.g. CLI flags).

    Returns:
        Validated SimulationConfig.

    Raises:
        FileNotFoundError: If base_path or scenario_path doesn't exist.
        ConfigurationError: If validation fails.
    """
    base_path = Path(base_path)
    if not base_path.exists():
        raise FileNotFoundError(f"Config file not found: {base_path}")
    config_dict = _read_yaml(base_path)

    if scenario_path is not None:
        scenario_path = Path(scenario_path)
        if not scenario_path.exists():
            raise FileNotFoundError(f"Scenario file not found: {scenario_path}")
        deep_merge(config_dict, _read_yaml(scenario_path))

    if overrides is not None:
        deep_merge(config_dict, copy.deepcopy(overrides))

    config = _dict_to_config(config_dict)
    validate_config(config)
    return config


def override_config(config: SimulationConfig, overrides: Dict) -> SimulationConfig:
    """Return a new validated config with ``overrides`` deep-merged in.

    Args:
        config: Starting configuration (not modified).
        overrides: Nested dict, e.g. ``{'stochasticity': {'demographic': True}}``.
    """
    merged = deep_merge(config_to_dict(config), copy.deepcopy(overrides))
    new_config = _dict_to_config(merged)
    validate_config(new_config)
    return new_config


def default_config() -> SimulationConfig:
    """Return a SimulationConfig with all default values."""
    config = SimulationConfig()
    validate_config(config)
    return config
