"""Epsilon-greedy learner over the discretized configuration space.

The learner keeps one incremental running average per bin (no reward history
is retained) and the single best raw reward it has ever been given. Note that
the best observation is the maximum over individual noisy rewards, not over
bin averages, so it is optimistic: one lucky sample can hold it indefinitely.

Exploitation picks the bin with the highest running average. Ties are broken
by ascending tilt, then ascending electrolyte, which is also the natural sort
order of :class:`Bin`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping

from .config import Configuration, LearnerConfig, SimulationConfig
from .production import RandomSource


@dataclass(frozen=True, order=True)
class Bin:
    """Canonical discretized configuration, usable directly as a mapping key."""

    tilt_deg: float
    electrolyte_pct: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.tilt_deg) and math.isfinite(self.electrolyte_pct)):
            raise ValueError(
                f"Bin coordinates must be finite, got tilt_deg={self.tilt_deg}, "
                f"electrolyte_pct={self.electrolyte_pct}."
            )

    def to_configuration(self) -> Configuration:
        return Configuration(tilt_deg=self.tilt_deg, electrolyte_pct=self.electrolyte_pct)

    def in_domain(self, config: SimulationConfig) -> bool:
        return (
            config.tilt_min_deg <= self.tilt_deg <= config.tilt_max_deg
            and config.electrolyte_min_pct <= self.electrolyte_pct <= config.electrolyte_max_pct
        )


def grid_bin(tilt_idx: int, elec_idx: int, config: SimulationConfig) -> Bin:
    """Bin at grid position (tilt_idx, elec_idx); indices outside the grid raise ValueError."""
    tilt_idx, elec_idx = int(tilt_idx), int(elec_idx)
    if not (0 <= tilt_idx < config.n_tilt_bins and 0 <= elec_idx < config.n_electrolyte_bins):
        raise ValueError(
            f"Bin index out of range: tilt_idx={tilt_idx} (0..{config.n_tilt_bins - 1}), "
            f"elec_idx={elec_idx} (0..{config.n_electrolyte_bins - 1}).\n"
            f"Clamp indices onto the grid before building a bin."
        )
    # Rounding keeps 0.1 * 3 equal to 0.3 so re-discretizing is a no-op.
    tilt = round(config.tilt_min_deg + tilt_idx * config.tilt_step_deg, 10)
    elec = round(config.electrolyte_min_pct + elec_idx * config.electrolyte_step_pct, 10)
    bin_ = Bin(tilt_deg=tilt, electrolyte_pct=elec)
    if not bin_.in_domain(config):
        raise ValueError(f"Bin {bin_} lies outside the configuration domain.")
    return bin_


def discretize(configuration: Configuration, config: SimulationConfig | None = None) -> Bin:
    """Snap a configuration to the nearest bin, halves rounding up.

    Out-of-range values land on the edge bins, so every configuration maps to
    exactly one in-domain bin.
    """
    config = config or SimulationConfig()
    tilt_idx = math.floor((configuration.tilt_deg - config.tilt_min_deg) / config.tilt_step_deg + 0.5)
    elec_idx = math.floor(
        (configuration.electrolyte_pct - config.electrolyte_min_pct) / config.electrolyte_step_pct + 0.5
    )
    tilt_idx = min(max(tilt_idx, 0), config.n_tilt_bins - 1)
    elec_idx = min(max(elec_idx, 0), config.n_electrolyte_bins - 1)
    return grid_bin(tilt_idx, elec_idx, config)


def random_bin(rng: RandomSource, config: SimulationConfig | None = None) -> Bin:
    """Draw a bin uniformly from the full grid."""
    config = config or SimulationConfig()
    tilt_idx = rng.integers(0, config.n_tilt_bins)
    elec_idx = rng.integers(0, config.n_electrolyte_bins)
    return grid_bin(tilt_idx, elec_idx, config)


@dataclass(slots=True)
class RewardRecord:
    count: int = 0
    average: float = 0.0

    def update(self, reward: float) -> None:
        self.average += (reward - self.average) / (self.count + 1)
        self.count += 1


@dataclass(frozen=True)
class BestObservation:
    bin: Bin | None = None
    reward: float = -math.inf

    @property
    def is_empty(self) -> bool:
        return self.bin is None


@dataclass(frozen=True)
class Suggestion:
    bin: Bin
    reason: Literal["explore", "exploit"]

    @property
    def configuration(self) -> Configuration:
        return self.bin.to_configuration()


class BanditLearner:
    """Epsilon-greedy bandit over configuration bins.

    The learner does not gate its own decisions: the controller compares the
    simulated clock against :attr:`last_decision_time_s` and
    :attr:`decision_cadence_s` and calls :meth:`suggest` when due.

    Attributes:
        config: Simulation constants (bin grid and learner bounds).
        learner_config: Current exploration rate and decision cadence.
        best: Best single raw reward recorded so far.
        last_decision_time_s: Simulated time of the last applied suggestion.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        learner_config: LearnerConfig | None = None,
    ) -> None:
        self.config = config or SimulationConfig()
        self.learner_config = learner_config or LearnerConfig.default(self.config)
        self._memory: dict[Bin, RewardRecord] = {}
        self.best = BestObservation()
        self.last_decision_time_s = 0.0

    @property
    def memory(self) -> Mapping[Bin, RewardRecord]:
        return MappingProxyType(self._memory)

    @property
    def epsilon(self) -> float:
        return self.learner_config.epsilon

    @property
    def decision_cadence_s(self) -> float:
        return self.learner_config.decision_cadence_s

    def set_epsilon(self, epsilon: float) -> None:
        self.learner_config = LearnerConfig.clamped(epsilon, self.decision_cadence_s, self.config)

    def set_decision_cadence(self, cadence_s: float) -> None:
        self.learner_config = LearnerConfig.clamped(self.epsilon, cadence_s, self.config)

    def discretize(self, configuration: Configuration) -> Bin:
        return discretize(configuration, self.config)

    def record(self, configuration: Configuration, reward: float) -> bool:
        """Fold one raw reward into its bin's running average.

        Returns True when the reward strictly beat the best observation and
        replaced it; ties keep the earlier best.
        """
        if not math.isfinite(reward):
            raise ValueError(
                f"reward must be a finite number, got {reward}.\n"
                f"Rewards are instantaneous production rates and are never NaN or infinite."
            )
        key = self.discretize(configuration)
        self._memory.setdefault(key, RewardRecord()).update(reward)
        if reward > self.best.reward:
            self.best = BestObservation(bin=key, reward=reward)
            return True
        return False

    def best_bin_by_average(self) -> Bin | None:
        if not self._memory:
            return None
        return min(self._memory, key=lambda b: (-self._memory[b].average, b))

    def suggest(self, rng: RandomSource) -> Suggestion:
        explore_draw = rng.random()
        if explore_draw < self.epsilon or not self._memory:
            return Suggestion(bin=random_bin(rng, self.config), reason="explore")
        return Suggestion(bin=self.best_bin_by_average(), reason="exploit")

    def ranked(self, limit: int | None = None) -> list[tuple[Bin, RewardRecord]]:
        """Bins ordered by running average (best first), same tie-break as exploitation."""
        items = sorted(self._memory.items(), key=lambda item: (-item[1].average, item[0]))
        return items if limit is None else items[:limit]

    def reset(self) -> None:
        self._memory.clear()
        self.best = BestObservation()
        self.last_decision_time_s = 0.0
