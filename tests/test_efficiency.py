"""Unit tests for efficiency.py module."""

import numpy as np
import pytest

from solar_synth.config import Configuration, SimulationConfig
from solar_synth.efficiency import (
    EfficiencyPair,
    compute_efficiencies,
    electrolyte_efficiency,
    tilt_efficiency,
)
from solar_synth.environment import EnvironmentSample, sample_environment


class TestTiltEfficiency:
    """Test the cosine tilt response."""

    @pytest.mark.parametrize("angle", [0.0, 12.5, 30.0, 42.4264, 60.0])
    def test_perfect_alignment(self, angle):
        """Zero mismatch gives efficiency exactly 1."""
        assert tilt_efficiency(angle, angle) == 1.0

    def test_non_increasing_in_mismatch(self):
        """Efficiency never rises as the mismatch grows over [0, 90] degrees."""
        diffs = np.linspace(0.0, 90.0, 901)
        effs = np.array([tilt_efficiency(float(d), 0.0) for d in diffs])
        assert np.all(np.diff(effs) <= 0.0)
        assert effs[-1] == pytest.approx(0.0, abs=1e-12)

    def test_zero_beyond_ninety(self):
        """Mismatch beyond 90 degrees clamps to zero."""
        assert tilt_efficiency(0.0, 95.0) == 0.0
        assert tilt_efficiency(150.0, 0.0) == 0.0
        assert tilt_efficiency(180.0, 0.0) == 0.0

    def test_symmetric_in_sign(self):
        assert tilt_efficiency(10.0, 30.0) == tilt_efficiency(50.0, 30.0)

    def test_quarter_day_alignment(self):
        """Tilt 42 against the t=90 sun elevation is almost perfectly aligned."""
        sun = sample_environment(90.0).sun_angle_deg
        assert tilt_efficiency(42.0, sun) == pytest.approx(0.99997, abs=1e-5)


class TestElectrolyteEfficiency:
    """Test the Gaussian electrolyte response."""

    def test_peak_is_exactly_one(self):
        assert electrolyte_efficiency(0.85) == 1.0

    def test_peak_is_global_maximum(self):
        """No concentration in [0, 2] beats the 0.85 % peak."""
        grid = np.linspace(0.0, 2.0, 2001)
        effs = np.array([electrolyte_efficiency(float(x)) for x in grid])
        assert np.max(effs) <= electrolyte_efficiency(0.85)
        assert grid[int(np.argmax(effs))] == pytest.approx(0.85, abs=1e-3)

    def test_floor_and_range(self):
        """Values stay inside [0.2, 1] over the domain and beyond."""
        for x in np.linspace(-5.0, 7.0, 601):
            eff = electrolyte_efficiency(float(x))
            assert 0.2 <= eff <= 1.0
        assert electrolyte_efficiency(50.0) == pytest.approx(0.2)

    def test_domain_edges(self):
        assert electrolyte_efficiency(0.0) == pytest.approx(0.33438, abs=1e-4)
        assert electrolyte_efficiency(2.0) == pytest.approx(0.23054, abs=1e-4)

    def test_symmetric_about_peak(self):
        for d in (0.05, 0.2, 0.5, 0.85):
            assert electrolyte_efficiency(0.85 - d) == pytest.approx(electrolyte_efficiency(0.85 + d))

    def test_single_peaked(self):
        """Strictly rising below the peak and strictly falling above it."""
        below = [electrolyte_efficiency(float(x)) for x in np.linspace(0.0, 0.85, 50)]
        above = [electrolyte_efficiency(float(x)) for x in np.linspace(0.85, 2.0, 50)]
        assert np.all(np.diff(below) > 0.0)
        assert np.all(np.diff(above) < 0.0)

    def test_custom_config(self):
        config = SimulationConfig(electrolyte_peak_pct=1.2, electrolyte_floor=0.5)
        assert electrolyte_efficiency(1.2, config) == 1.0
        assert electrolyte_efficiency(100.0, config) == pytest.approx(0.5)


class TestComputeEfficiencies:
    """Test the pairing of both factors for a configuration."""

    def test_pair_values(self):
        env = EnvironmentSample(lux=50_000, sun_angle_deg=30.0)
        pair = compute_efficiencies(Configuration(tilt_deg=30.0, electrolyte_pct=0.85), env)
        assert isinstance(pair, EfficiencyPair)
        assert pair.tilt_eff == 1.0
        assert pair.elec_eff == 1.0
        assert pair.combined == 1.0

    def test_pair_ranges(self):
        for t in np.linspace(0.0, 360.0, 73):
            env = sample_environment(float(t))
            for tilt in (0.0, 25.0, 60.0):
                for elec in (0.0, 1.0, 2.0):
                    pair = compute_efficiencies(Configuration(tilt, elec), env)
                    assert 0.0 <= pair.tilt_eff <= 1.0
                    assert 0.2 <= pair.elec_eff <= 1.0
