"""Tests for pva_sim.rates: environmental stochasticity rate sequences."""

import numpy as np

from pva_sim.config import default_config, override_config
from pva_sim.rates import generate_rate_sequences, reflected_normal
from pva_sim.types import MeanRates


def _env_config(**rate_overrides):
    overrides = {'stochasticity': {'environmental': True}}
    overrides.update(rate_overrides)
    return override_config(default_config(), overrides)


class TestGenerateRateSequences:
    def test_constant_without_environmental(self):
        seq = generate_rate_sequences(
            MeanRates(0.4, 0.3), 49, default_config(), np.random.default_rng(0),
        )
        assert len(seq) == 49
        np.testing.assert_array_equal(seq.birth, np.full(49, 0.4))
        np.testing.assert_array_equal(seq.death, np.full(49, 0.3))

    def test_no_draw_without_environmental(self):
        rng = np.random.default_rng(0)
        state = rng.bit_generator.state
        generate_rate_sequences(MeanRates(0.4, 0.3), 10, default_config(), rng)
        assert rng.bit_generator.state == state

    def test_environmental_never_negative(self):
        config = _env_config(birth={'sd': 1.0}, death={'sd': 1.0})
        seq = generate_rate_sequences(
            MeanRates(0.1, 0.1), 10_000, config, np.random.default_rng(1),
        )
        assert (seq.birth >= 0).all()
        assert (seq.death >= 0).all()

    def test_environmental_varies_by_year(self):
        seq = generate_rate_sequences(
            MeanRates(0.4, 0.3), 50, _env_config(), np.random.default_rng(2),
        )
        assert seq.birth.std() > 0
        assert seq.death.std() > 0

    def test_small_sd_mean_preserved(self):
        config = _env_config(birth={'sd': 0.05}, death={'sd': 0.05})
        seq = generate_rate_sequences(
            MeanRates(0.4, 0.3), 20_000, config, np.random.default_rng(3),
        )
        assert abs(seq.birth.mean() - 0.4) < 0.005
        assert abs(seq.death.mean() - 0.3) < 0.005

    def test_reflection_biases_mean_upward(self):
        """|Normal(0.1, 0.5)| has mean well above 0.1."""
        config = _env_config(birth={'sd': 0.5})
        seq = generate_rate_sequences(
            MeanRates(0.1, 0.3), 50_000, config, np.random.default_rng(4),
        )
        assert seq.birth.mean() > 0.3

    def test_independent_sds(self):
        config = _env_config(birth={'sd': 0.0}, death={'sd': 0.2})
        seq = generate_rate_sequences(
            MeanRates(0.4, 0.3), 1000, config, np.random.default_rng(5),
        )
        np.testing.assert_array_equal(seq.birth, np.full(1000, 0.4))
        assert abs(seq.death.std() - 0.2) < 0.04

    def test_zero_transitions(self):
        seq = generate_rate_sequences(
            MeanRates(0.4, 0.3), 0, _env_config(), np.random.default_rng(6),
        )
        assert len(seq) == 0


class TestReflectedNormal:
    def test_zero_sd_is_constant(self):
        np.testing.assert_array_equal(
            reflected_normal(0.25, 0.0, 5, np.random.default_rng(0)),
            np.full(5, 0.25),
        )

    def test_matches_abs_of_normal(self):
        a = reflected_normal(0.2, 0.3, 100, np.random.default_rng(9))
        b = np.abs(np.random.default_rng(9).normal(0.2, 0.3, size=100))
        np.testing.assert_array_equal(a, b)
