"""Unit tests for production.py module."""

import numpy as np
import pytest

from solar_synth.config import SimulationConfig
from solar_synth.production import accumulate_yield, make_rng, production_rate


class FixedFractionRng:
    """Random source whose uniform draws sit at a fixed fraction of the interval."""

    def __init__(self, fraction):
        self.fraction = fraction

    def random(self):
        return self.fraction

    def uniform(self, low, high):
        return low + self.fraction * (high - low)

    def integers(self, low, high):
        return low


class TestProductionRate:
    """Test the noisy production model."""

    def test_noise_free_rate(self):
        """With zero noise the rate is lux * tilt * elec * 0.00035."""
        rate = production_rate(40_000, 1.0, 1.0, FixedFractionRng(0.5))
        assert rate == pytest.approx(14.0)

    def test_noise_extremes(self):
        """Noise spans [-0.25, 0.25] mL/min around the deterministic rate."""
        low = production_rate(40_000, 0.5, 0.8, FixedFractionRng(0.0))
        high = production_rate(40_000, 0.5, 0.8, FixedFractionRng(1.0))
        base = 40_000 * 0.5 * 0.8 * 0.00035
        assert low == pytest.approx(base - 0.25)
        assert high == pytest.approx(base + 0.25)

    def test_floored_at_zero(self):
        """Negative noise cannot push the rate below zero."""
        assert production_rate(10_000, 0.0, 1.0, FixedFractionRng(0.0)) == 0.0

    def test_noise_bounded_with_numpy_generator(self):
        rng = make_rng(42)
        base = 60_000 * 0.9 * 0.7 * 0.00035
        deviations = np.array([production_rate(60_000, 0.9, 0.7, rng) - base for _ in range(5000)])
        assert np.all(deviations >= -0.25 - 1e-12)
        assert np.all(deviations <= 0.25 + 1e-12)
        assert abs(float(np.mean(deviations))) < 0.02

    def test_seeded_generator_is_reproducible(self):
        a = [production_rate(50_000, 1.0, 1.0, make_rng(7)) for _ in range(3)]
        b = [production_rate(50_000, 1.0, 1.0, make_rng(7)) for _ in range(3)]
        assert a == b

    def test_custom_constants(self):
        config = SimulationConfig(rate_constant=0.001, noise_amplitude=0.0)
        assert production_rate(10_000, 1.0, 0.5, make_rng(0), config) == pytest.approx(5.0)


class TestAccumulateYield:
    """Test yield integration."""

    def test_one_minute_at_constant_rate(self):
        assert accumulate_yield(0.0, 12.0, 60.0) == pytest.approx(12.0)

    def test_zero_delta_is_identity(self):
        assert accumulate_yield(3.5, 20.0, 0.0) == 3.5

    def test_monotone_for_non_negative_inputs(self):
        """Arbitrary non-negative rates and deltas never decrease the total."""
        rng = np.random.default_rng(11)
        total = 0.0
        for _ in range(2000):
            rate = float(rng.uniform(0.0, 30.0)) * float(rng.integers(0, 2))
            dt = float(rng.exponential(0.02))
            new_total = accumulate_yield(total, rate, dt)
            assert new_total >= total
            total = new_total

    def test_irregular_steps_match_single_step(self):
        """Splitting a span into uneven steps integrates to the same total."""
        steps = [0.01, 0.3, 0.25, 0.19, 0.25]
        total = 0.0
        for dt in steps:
            total = accumulate_yield(total, 6.0, dt)
        assert total == pytest.approx(accumulate_yield(0.0, 6.0, sum(steps)))
