"""Tests for pva_sim.rng: per-replicate seeded streams."""

import numpy as np
import pytest

from pva_sim.errors import ConfigurationError
from pva_sim.rng import (
    create_replicate_rngs,
    master_seed_sequence,
    replicate_rng,
    replicate_seed_sequences,
)


class TestCreateReplicateRngs:
    def test_one_generator_per_replicate(self):
        rngs = create_replicate_rngs(42, n_replicates=5)
        assert len(rngs) == 5
        assert all(isinstance(r, np.random.Generator) for r in rngs)

    def test_streams_are_independent(self):
        rngs = create_replicate_rngs(42, n_replicates=10)
        vals = [r.random() for r in rngs]
        assert len(set(vals)) == len(vals), "replicate streams produced duplicate values"

    def test_reproducibility(self):
        a = create_replicate_rngs(42, n_replicates=4)
        b = create_replicate_rngs(42, n_replicates=4)
        for ra, rb in zip(a, b):
            np.testing.assert_array_equal(ra.random(100), rb.random(100))

    def test_different_seeds_differ(self):
        a = create_replicate_rngs(42, n_replicates=1)[0].random(10)
        b = create_replicate_rngs(43, n_replicates=1)[0].random(10)
        assert not np.array_equal(a, b)

    def test_adding_replicates_keeps_existing_streams(self):
        """Spawning is positional: replicate i's stream ignores the total count."""
        small = create_replicate_rngs(7, n_replicates=3)
        large = create_replicate_rngs(7, n_replicates=30)
        for i in range(3):
            np.testing.assert_array_equal(small[i].random(50), large[i].random(50))

    def test_zero_replicates(self):
        assert create_replicate_rngs(42, n_replicates=0) == []

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            replicate_seed_sequences(42, -1)


class TestMasterSeedSequence:
    def test_int_seed_entropy(self):
        assert master_seed_sequence(123).entropy == 123

    def test_none_draws_entropy(self):
        a = master_seed_sequence(None)
        b = master_seed_sequence(None)
        assert a.entropy != b.entropy

    def test_seed_sequence_passthrough(self):
        ss = np.random.SeedSequence(5)
        assert master_seed_sequence(ss) is ss

    def test_numpy_integer_seed(self):
        assert master_seed_sequence(np.int64(9)).entropy == 9

    @pytest.mark.parametrize("seed", [-1, 1.5, "42", True])
    def test_invalid_seed_rejected(self, seed):
        with pytest.raises(ConfigurationError, match="seed"):
            master_seed_sequence(seed)


class TestReplicateRng:
    def test_matches_create_replicate_rngs(self):
        children = replicate_seed_sequences(11, 3)
        direct = create_replicate_rngs(11, n_replicates=3)
        for child, rng in zip(children, direct):
            np.testing.assert_array_equal(replicate_rng(child).random(20), rng.random(20))
