"""Simulated daylight: irradiance and sun elevation as functions of time.

The environment is a pure, deterministic function of simulated time taken
modulo the day length. A clear-sky half-sine day curve is perturbed by two
low-frequency sinusoids ("clouds"), clamped to [0, 1] and mapped onto the
lux range. Sun elevation swings from 0 to ``sun_max_angle_deg`` and back
over one day. There is no hidden randomness, so identical time inputs give
identical samples.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .config import SimulationConfig, clamp


@dataclass(frozen=True)
class EnvironmentSample:
    """Environment at one instant.

    Attributes:
        lux: Integer irradiance in [lux_min, lux_max].
        sun_angle_deg: Sun elevation in [0, sun_max_angle_deg].
    """

    lux: int
    sun_angle_deg: float


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def day_phase(t_sec: float, config: SimulationConfig) -> float:
    """Fraction of the day elapsed at ``t_sec``, in [0, 1)."""
    return (t_sec % config.day_length_s) / config.day_length_s


def daylight_fraction(t_sec: float, config: SimulationConfig) -> float:
    """Clamped day curve plus cloud perturbation, in [0, 1]."""
    angle = day_phase(t_sec, config) * 2.0 * math.pi
    base = max(0.0, math.sin(angle))
    clouds = (
        config.cloud_amp_1 * math.sin(angle * config.cloud_freq_1 + config.cloud_phase_1)
        + config.cloud_amp_2 * math.sin(angle * config.cloud_freq_2 + config.cloud_phase_2)
    )
    return clamp(base + clouds, 0.0, 1.0)


def sun_angle(t_sec: float, config: SimulationConfig) -> float:
    phase = day_phase(t_sec, config)
    return max(0.0, math.sin(phase * math.pi) * config.sun_max_angle_deg)


def sample_environment(t_sec: float, config: SimulationConfig | None = None) -> EnvironmentSample:
    config = config or SimulationConfig()
    fraction = daylight_fraction(t_sec, config)
    lux = round_half_up(config.lux_min + fraction * (config.lux_max - config.lux_min))
    return EnvironmentSample(lux=lux, sun_angle_deg=sun_angle(t_sec, config))


def environment_profile(times: np.ndarray, config: SimulationConfig | None = None) -> tuple[np.ndarray, np.ndarray]:
    """Vectorized lux and sun-angle curves over an array of times.

    Used for plotting the full day cycle behind a recorded run; agrees with
    :func:`sample_environment` point for point.
    """
    config = config or SimulationConfig()
    times = np.asarray(times, dtype=float)
    angle = np.mod(times, config.day_length_s) / config.day_length_s * 2.0 * np.pi
    base = np.maximum(0.0, np.sin(angle))
    clouds = (
        config.cloud_amp_1 * np.sin(angle * config.cloud_freq_1 + config.cloud_phase_1)
        + config.cloud_amp_2 * np.sin(angle * config.cloud_freq_2 + config.cloud_phase_2)
    )
    fraction = np.clip(base + clouds, 0.0, 1.0)
    lux = np.floor(config.lux_min + fraction * (config.lux_max - config.lux_min) + 0.5).astype(int)
    sun = np.maximum(0.0, np.sin(angle / 2.0) * config.sun_max_angle_deg)
    return lux, sun
