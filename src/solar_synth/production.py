"""Hydrogen production rate and yield integration."""

from __future__ import annotations

from typing import Protocol

import numpy as np

from .config import SimulationConfig


class RandomSource(Protocol):
    """The subset of ``numpy.random.Generator`` the simulation draws from.

    Any object with these methods can stand in for the generator, which is
    how tests feed scripted sequences into production and suggestion logic.
    """

    def random(self) -> float: ...

    def uniform(self, low: float, high: float) -> float: ...

    def integers(self, low: int, high: int) -> int: ...


def make_rng(seed: int | None = None) -> np.random.Generator:
    return np.random.default_rng(seed)


def production_rate(
    lux: float,
    tilt_eff: float,
    elec_eff: float,
    rng: RandomSource,
    config: SimulationConfig | None = None,
) -> float:
    """Instantaneous H2 rate [mL/min] with uniform jitter, floored at zero."""
    config = config or SimulationConfig()
    noise = float(rng.uniform(-config.noise_amplitude, config.noise_amplitude))
    rate = lux * tilt_eff * elec_eff * config.rate_constant + noise
    return max(0.0, rate)


def accumulate_yield(total_ml: float, rate_ml_per_min: float, dt_sec: float) -> float:
    """Add ``rate * dt`` to the running total (rate is per minute, dt in seconds)."""
    return total_ml + rate_ml_per_min * (dt_sec / 60.0)
