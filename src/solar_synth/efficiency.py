"""Dimensionless efficiency factors for panel tilt and electrolyte concentration."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .config import Configuration, SimulationConfig, clamp
from .environment import EnvironmentSample


@dataclass(frozen=True)
class EfficiencyPair:
    tilt_eff: float
    elec_eff: float

    @property
    def combined(self) -> float:
        return self.tilt_eff * self.elec_eff


def tilt_efficiency(tilt_deg: float, sun_angle_deg: float) -> float:
    """Cosine of the angular mismatch between panel tilt and sun elevation.

    Returns 1.0 at zero mismatch, falls off monotonically with the absolute
    difference and is clamped to 0 once the difference reaches 90 degrees.
    """
    diff = abs(tilt_deg - sun_angle_deg)
    return clamp(math.cos(math.radians(diff)), 0.0, 1.0)


def electrolyte_efficiency(pct: float, config: SimulationConfig | None = None) -> float:
    """Gaussian response centred on the optimal concentration.

    eff = floor + (1 - floor) * exp(-0.5 * ((pct - mu) / sigma)^2)

    With the defaults (floor 0.2, mu 0.85 %, sigma 0.45 %) the peak is exactly
    1.0 at 0.85 % and the curve never drops below 0.2.
    """
    config = config or SimulationConfig()
    z = (pct - config.electrolyte_peak_pct) / config.electrolyte_width_pct
    floor = config.electrolyte_floor
    return clamp(floor + (1.0 - floor) * math.exp(-0.5 * z * z), 0.0, 1.0)


def compute_efficiencies(
    configuration: Configuration,
    environment: EnvironmentSample,
    config: SimulationConfig | None = None,
) -> EfficiencyPair:
    return EfficiencyPair(
        tilt_eff=tilt_efficiency(configuration.tilt_deg, environment.sun_angle_deg),
        elec_eff=electrolyte_efficiency(configuration.electrolyte_pct, config),
    )
