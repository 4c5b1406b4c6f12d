"""Tick-driven controller tying environment, production and learner together.

The controller owns the simulated clock, the cumulative yield and the current
configuration. Each call to :meth:`SolarSynthController.tick` runs one
synchronous step in a fixed order:

    environment -> efficiencies -> production -> integration
    -> (on a whole-second crossing) learner.record
    -> (when enabled and due) learner.suggest

and returns a :class:`Snapshot` for presentation. Any driver can supply the
ticks: a display timer, a headless loop, or a test.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from enum import Enum

from .config import Configuration, LearnerConfig, SimulationConfig
from .efficiency import EfficiencyPair, compute_efficiencies
from .environment import EnvironmentSample, sample_environment
from .learner import BanditLearner, BestObservation, Suggestion
from .production import RandomSource, accumulate_yield, make_rng, production_rate


def _get_verbosity() -> int:
    """Get verbosity level from environment: 0=quiet, 1=normal, 2=verbose."""
    return int(os.environ.get("SOLAR_SYNTH_VERBOSITY", "1"))


class RunState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the simulation after a tick.

    Attributes:
        time_s: Simulated elapsed time [s].
        state: Lifecycle state at the end of the tick.
        configuration: Configuration in force (after any learner decision),
            for writing back into the control surface.
        environment: Irradiance and sun elevation at ``time_s``.
        efficiencies: Tilt and electrolyte efficiency factors.
        rate_ml_per_min: Instantaneous production rate.
        total_ml: Cumulative yield.
        best: Best single raw reward recorded by the learner.
        best_changed: True only when ``best`` differs from the previously
            exposed snapshot.
        last_suggestion: Most recent learner decision, if any.
        explore_count, exploit_count: Decisions applied since the last reset.
    """

    time_s: float
    state: RunState
    configuration: Configuration
    environment: EnvironmentSample
    efficiencies: EfficiencyPair
    rate_ml_per_min: float
    total_ml: float
    best: BestObservation
    best_changed: bool
    last_suggestion: Suggestion | None
    explore_count: int
    exploit_count: int


class FrameClock:
    """Turns a wall-clock timestamp stream [ms] into tick deltas [s].

    The first timestamp after construction or :meth:`rearm` yields a zero
    delta so that a long gap before startup is not simulated. Backwards
    jumps are clamped to zero.
    """

    def __init__(self) -> None:
        self._last_ms: float | None = None

    def rearm(self) -> None:
        self._last_ms = None

    def delta(self, timestamp_ms: float) -> float:
        if self._last_ms is None:
            self._last_ms = timestamp_ms
            return 0.0
        dt = max(0.0, (timestamp_ms - self._last_ms) / 1000.0)
        self._last_ms = timestamp_ms
        return dt


class SolarSynthController:
    """Owns the simulation context and advances it one tick at a time.

    Args:
        config: Simulation constants. Defaults to ``SimulationConfig()``.
        rng: Random source for production noise and exploration. Defaults to
            a numpy generator seeded with ``config.seed``.
        learner: Learner instance; a fresh one is built when omitted.
        default_configuration: Configuration restored on Reset. Defaults to
            the configuration's default tilt and electrolyte.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        rng: RandomSource | None = None,
        learner: BanditLearner | None = None,
        default_configuration: Configuration | None = None,
    ) -> None:
        self.config = config or SimulationConfig()
        if not isinstance(self.config, SimulationConfig):
            raise TypeError(f"config must be a SimulationConfig instance, got {type(self.config)}")
        self.rng = rng if rng is not None else make_rng(self.config.seed)
        if learner is not None and learner.config != self.config:
            raise ValueError(
                "learner.config must match the controller config.\n"
                "Bins, cadence bounds and the default epsilon all come from the shared config."
            )
        self.learner = learner if learner is not None else BanditLearner(self.config)
        self.learner_enabled = False
        self.frame_clock = FrameClock()
        self._default_configuration = default_configuration or Configuration.default(self.config)
        self.state = RunState.STOPPED
        self._clear()

    def _clear(self) -> None:
        self.time_s = 0.0
        self.total_ml = 0.0
        self.configuration = Configuration.clamped(
            self._default_configuration.tilt_deg,
            self._default_configuration.electrolyte_pct,
            self.config,
        )
        self.last_suggestion: Suggestion | None = None
        self.explore_count = 0
        self.exploit_count = 0
        self._best_changed = True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self.state is RunState.RUNNING

    def start(self) -> None:
        if self.state is not RunState.RUNNING:
            # Wall-clock time spent stopped or paused is not simulated.
            self.frame_clock.rearm()
        self.state = RunState.RUNNING

    def pause(self) -> None:
        if self.state is RunState.RUNNING:
            self.state = RunState.PAUSED

    def reset(self, default_configuration: Configuration | None = None) -> None:
        """Stop and clear clock, yield, configuration and learner memory.

        Epsilon, cadence and the learner-enabled flag are control-surface
        settings and survive a reset.
        """
        if default_configuration is not None:
            self._default_configuration = default_configuration
        self.state = RunState.STOPPED
        self.learner.reset()
        self.frame_clock.rearm()
        self._clear()

    # ------------------------------------------------------------------
    # Control-surface inputs
    # ------------------------------------------------------------------

    def set_configuration(self, tilt_deg: float, electrolyte_pct: float) -> None:
        self.configuration = Configuration.clamped(tilt_deg, electrolyte_pct, self.config)

    def set_epsilon(self, epsilon: float) -> None:
        self.learner.set_epsilon(epsilon)

    def set_decision_cadence(self, cadence_s: float) -> None:
        self.learner.set_decision_cadence(cadence_s)

    def set_learner_enabled(self, enabled: bool) -> None:
        self.learner_enabled = bool(enabled)

    @property
    def learner_config(self) -> LearnerConfig:
        return self.learner.learner_config

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def tick_at(self, timestamp_ms: float) -> Snapshot:
        """Tick from a wall-clock timestamp, deriving the delta via :class:`FrameClock`."""
        return self.tick(self.frame_clock.delta(timestamp_ms))

    def tick(self, dt: float) -> Snapshot:
        if not (math.isfinite(dt) and dt >= 0.0):
            raise ValueError(
                f"Tick delta must be a finite, non-negative number of seconds, got {dt}.\n"
                f"Derive deltas from a monotonic clock (see FrameClock)."
            )

        if not self.running:
            environment, efficiencies, rate = self._observe()
            return self._snapshot(environment, efficiencies, rate)

        previous_time = self.time_s
        self.time_s += dt
        environment, efficiencies, rate = self._observe()
        self.total_ml = accumulate_yield(self.total_ml, rate, dt)

        if math.floor(self.time_s) != math.floor(previous_time):
            if self.learner.record(self.configuration, rate):
                self._best_changed = True

        if self.learner_enabled and self.time_s - self.learner.last_decision_time_s >= self.learner.decision_cadence_s:
            self._apply_suggestion()

        return self._snapshot(environment, efficiencies, rate)

    def _observe(self) -> tuple[EnvironmentSample, EfficiencyPair, float]:
        environment = sample_environment(self.time_s, self.config)
        efficiencies = compute_efficiencies(self.configuration, environment, self.config)
        rate = production_rate(
            environment.lux,
            efficiencies.tilt_eff,
            efficiencies.elec_eff,
            self.rng,
            self.config,
        )
        return environment, efficiencies, rate

    def _apply_suggestion(self) -> None:
        suggestion = self.learner.suggest(self.rng)
        self.configuration = suggestion.configuration
        self.learner.last_decision_time_s = self.time_s
        self.last_suggestion = suggestion
        if suggestion.reason == "explore":
            self.explore_count += 1
        else:
            self.exploit_count += 1
        if _get_verbosity() >= 2:
            print(
                f"[t={self.time_s:8.2f}s] {suggestion.reason:<7} -> "
                f"tilt={suggestion.bin.tilt_deg:g} deg, electrolyte={suggestion.bin.electrolyte_pct:g} %"
            )

    def _snapshot(self, environment: EnvironmentSample, efficiencies: EfficiencyPair, rate: float) -> Snapshot:
        best_changed = self._best_changed
        self._best_changed = False
        return Snapshot(
            time_s=self.time_s,
            state=self.state,
            configuration=self.configuration,
            environment=environment,
            efficiencies=efficiencies,
            rate_ml_per_min=rate,
            total_ml=self.total_ml,
            best=self.learner.best,
            best_changed=best_changed,
            last_suggestion=self.last_suggestion,
            explore_count=self.explore_count,
            exploit_count=self.exploit_count,
        )
