"""Tests for pva_sim.scenarios: named uncertainty presets."""

import pytest

from pva_sim.config import default_config, override_config
from pva_sim.errors import ConfigurationError
from pva_sim.scenarios import SCENARIOS, apply_scenario, scenario_overrides


class TestScenarios:
    def test_known_names(self):
        assert set(SCENARIOS) == {'deterministic', 'environmental', 'demographic',
                                  'parametric', 'full'}

    @pytest.mark.parametrize("name, expected", [
        ('deterministic', (False, False, False)),
        ('environmental', (True, False, False)),
        ('demographic', (False, True, False)),
        ('parametric', (False, False, True)),
        ('full', (True, True, True)),
    ])
    def test_switches(self, name, expected):
        stoch = apply_scenario(default_config(), name).stochasticity
        assert (stoch.environmental, stoch.demographic, stoch.parametric) == expected

    def test_rates_untouched(self):
        base = override_config(default_config(), {'birth': {'mean': 0.55}})
        assert apply_scenario(base, 'full').birth == base.birth

    def test_deterministic_clears_flags(self):
        noisy = apply_scenario(default_config(), 'full')
        stoch = apply_scenario(noisy, 'deterministic').stochasticity
        assert not (stoch.environmental or stoch.demographic or stoch.parametric)

    def test_overrides_are_copies(self):
        overrides = scenario_overrides('full')
        overrides['stochasticity']['demographic'] = False
        assert SCENARIOS['full']['stochasticity']['demographic'] is True

    def test_unknown(self):
        with pytest.raises(ConfigurationError, match="unknown scenario"):
            apply_scenario(default_config(), 'catastrophe')
