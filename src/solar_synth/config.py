"""Configuration primitives for the Solar Synth hydrogen simulation."""

from __future__ import annotations

import math
from dataclasses import dataclass


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class SimulationConfig:
    """Holds tunable constants for the environment, production and learner.

    Key parameter groups:

    **Environment:**
    - day_length_s: Length of one simulated day (time is taken modulo this).
    - lux_min, lux_max: Irradiance range mapped from the clamped day curve.
    - sun_max_angle_deg: Peak sun elevation at solar noon.
    - cloud_*: Two low-frequency sinusoids perturbing the day curve.

    **Efficiency / Production:**
    - electrolyte_peak_pct, electrolyte_width_pct: Gaussian peak of the
      electrolyte response.
    - electrolyte_floor: Efficiency at the far edges of the electrolyte domain.
    - rate_constant: Scale from lux x efficiencies to mL/min.
    - noise_amplitude: Half-width of the uniform measurement jitter.

    **Configuration domain and bins:**
    - tilt_min_deg, tilt_max_deg, tilt_step_deg
    - electrolyte_min_pct, electrolyte_max_pct, electrolyte_step_pct

    **Learner defaults:**
    - epsilon, decision_cadence_s, cadence_min_s, cadence_max_s

    **Controller defaults:**
    - default_tilt_deg, default_electrolyte_pct: Configuration restored on Reset.
    - seed: Seed for the default random source.
    """

    day_length_s: float = 360.0
    lux_min: float = 10_000.0
    lux_max: float = 80_000.0
    sun_max_angle_deg: float = 60.0

    cloud_amp_1: float = 0.15
    cloud_freq_1: float = 2.4
    cloud_phase_1: float = 1.7
    cloud_amp_2: float = 0.08
    cloud_freq_2: float = 4.1
    cloud_phase_2: float = 0.3

    electrolyte_peak_pct: float = 0.85
    electrolyte_width_pct: float = 0.45
    electrolyte_floor: float = 0.2

    rate_constant: float = 0.00035
    noise_amplitude: float = 0.25

    tilt_min_deg: float = 0.0
    tilt_max_deg: float = 60.0
    tilt_step_deg: int = 5
    electrolyte_min_pct: float = 0.0
    electrolyte_max_pct: float = 2.0
    electrolyte_step_pct: float = 0.1

    epsilon: float = 0.2
    decision_cadence_s: float = 5.0
    cadence_min_s: float = 2.0
    cadence_max_s: float = 30.0

    default_tilt_deg: float = 30.0
    default_electrolyte_pct: float = 1.0
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.day_length_s <= 0:
            raise ValueError(
                f"day_length_s must be positive, got {self.day_length_s}.\n"
                f"The environment is periodic in simulated time and needs a non-zero period."
            )
        if self.lux_min >= self.lux_max:
            raise ValueError(
                f"lux_min must be below lux_max, got lux_min={self.lux_min}, lux_max={self.lux_max}."
            )
        if self.tilt_min_deg >= self.tilt_max_deg or self.electrolyte_min_pct >= self.electrolyte_max_pct:
            raise ValueError(
                "Configuration bounds must be strictly ordered.\n"
                f"Got tilt=[{self.tilt_min_deg}, {self.tilt_max_deg}], "
                f"electrolyte=[{self.electrolyte_min_pct}, {self.electrolyte_max_pct}]."
            )
        for name, span, step in (
            ("tilt", self.tilt_max_deg - self.tilt_min_deg, self.tilt_step_deg),
            ("electrolyte", self.electrolyte_max_pct - self.electrolyte_min_pct, self.electrolyte_step_pct),
        ):
            if step <= 0:
                raise ValueError(f"{name} bin step must be positive, got {step}.")
            ratio = span / step
            if abs(ratio - round(ratio)) > 1.0e-9:
                raise ValueError(
                    f"{name} bin step {step} does not divide the domain width {span}.\n"
                    f"Every bin must land exactly on a domain bound at both edges."
                )
        if not (0.0 <= self.epsilon <= 1.0):
            raise ValueError(f"epsilon must lie in [0, 1], got {self.epsilon}.")
        if not (0 < self.cadence_min_s <= self.decision_cadence_s <= self.cadence_max_s):
            raise ValueError(
                "decision_cadence_s must lie inside [cadence_min_s, cadence_max_s].\n"
                f"Got cadence={self.decision_cadence_s}, "
                f"bounds=[{self.cadence_min_s}, {self.cadence_max_s}]."
            )

    @property
    def n_tilt_bins(self) -> int:
        return int(round((self.tilt_max_deg - self.tilt_min_deg) / self.tilt_step_deg)) + 1

    @property
    def n_electrolyte_bins(self) -> int:
        return int(round((self.electrolyte_max_pct - self.electrolyte_min_pct) / self.electrolyte_step_pct)) + 1

    @property
    def n_bins(self) -> int:
        """Size of the discretized configuration space (13 x 21 by default)."""
        return self.n_tilt_bins * self.n_electrolyte_bins


@dataclass(frozen=True)
class Configuration:
    """Controllable parameter vector: panel tilt [deg] and electrolyte [%]."""

    tilt_deg: float
    electrolyte_pct: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.tilt_deg) and math.isfinite(self.electrolyte_pct)):
            raise ValueError(
                f"Configuration values must be finite, got tilt_deg={self.tilt_deg}, "
                f"electrolyte_pct={self.electrolyte_pct}."
            )

    @classmethod
    def clamped(cls, tilt_deg: float, electrolyte_pct: float, config: SimulationConfig) -> Configuration:
        if not (math.isfinite(tilt_deg) and math.isfinite(electrolyte_pct)):
            raise ValueError(
                f"Configuration values must be finite, got tilt_deg={tilt_deg}, "
                f"electrolyte_pct={electrolyte_pct}.\n"
                f"Out-of-range values are clamped, but NaN has no nearest bound."
            )
        return cls(
            tilt_deg=clamp(float(tilt_deg), config.tilt_min_deg, config.tilt_max_deg),
            electrolyte_pct=clamp(float(electrolyte_pct), config.electrolyte_min_pct, config.electrolyte_max_pct),
        )

    @classmethod
    def default(cls, config: SimulationConfig) -> Configuration:
        return cls.clamped(config.default_tilt_deg, config.default_electrolyte_pct, config)


@dataclass(frozen=True)
class LearnerConfig:
    """Exploration rate and minimum simulated time between decisions."""

    epsilon: float
    decision_cadence_s: float

    @classmethod
    def clamped(cls, epsilon: float, decision_cadence_s: float, config: SimulationConfig) -> LearnerConfig:
        # Unparsable cadence input falls back to the default.
        if not math.isfinite(decision_cadence_s):
            decision_cadence_s = config.decision_cadence_s
        if not math.isfinite(epsilon):
            epsilon = config.epsilon
        return cls(
            epsilon=clamp(float(epsilon), 0.0, 1.0),
            decision_cadence_s=clamp(float(decision_cadence_s), config.cadence_min_s, config.cadence_max_s),
        )

    @classmethod
    def default(cls, config: SimulationConfig) -> LearnerConfig:
        return cls(epsilon=config.epsilon, decision_cadence_s=config.decision_cadence_s)
