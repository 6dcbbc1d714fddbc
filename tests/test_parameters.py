"""Tests for pva_sim.parameters: per-replicate mean rate resolution."""

import numpy as np

from pva_sim.config import default_config, override_config
from pva_sim.parameters import resolve_mean_rates


class TestResolveMeanRates:
    def test_fixed_means_without_parametric(self):
        config = default_config()
        rates = resolve_mean_rates(config, np.random.default_rng(0))
        assert rates.birth == config.birth.mean
        assert rates.death == config.death.mean

    def test_no_draw_without_parametric(self):
        """The replicate's stream is untouched when the flag is off."""
        rng = np.random.default_rng(0)
        state = rng.bit_generator.state
        resolve_mean_rates(default_config(), rng)
        assert rng.bit_generator.state == state

    def test_parametric_draws_within_bounds(self):
        config = override_config(default_config(), {
            'stochasticity': {'parametric': True},
            'birth': {'minimum': 0.2, 'maximum': 0.6},
            'death': {'minimum': 0.1, 'maximum': 0.3},
        })
        rng = np.random.default_rng(1)
        draws = [resolve_mean_rates(config, rng) for _ in range(500)]
        births = np.array([d.birth for d in draws])
        deaths = np.array([d.death for d in draws])
        assert births.min() >= 0.2 and births.max() <= 0.6
        assert deaths.min() >= 0.1 and deaths.max() <= 0.3
        # uniform mean
        assert abs(births.mean() - 0.4) < 0.02
        assert abs(deaths.mean() - 0.2) < 0.01

    def test_parametric_ignores_configured_mean(self):
        config = override_config(default_config(), {
            'stochasticity': {'parametric': True},
            'birth': {'mean': 5.0, 'minimum': 0.3, 'maximum': 0.31},
        })
        rates = resolve_mean_rates(config, np.random.default_rng(2))
        assert 0.3 <= rates.birth <= 0.31

    def test_degenerate_range(self):
        config = override_config(default_config(), {
            'stochasticity': {'parametric': True},
            'birth': {'minimum': 0.45, 'maximum': 0.45},
        })
        rates = resolve_mean_rates(config, np.random.default_rng(3))
        assert rates.birth == 0.45
