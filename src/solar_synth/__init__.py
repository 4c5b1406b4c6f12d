"""Solar Synth: a tunable solar-to-hydrogen simulation with an adaptive tuner.

A simulated photo-electrolysis rig produces hydrogen at a rate set by the
daylight curve, the panel tilt relative to the sun, and the electrolyte
concentration. An epsilon-greedy learner samples the production rate once
per simulated second, keeps running averages per (tilt, electrolyte) bin and
periodically moves the rig to a new configuration.

Main Components:
    - SimulationConfig: All tunable constants
    - sample_environment: Irradiance and sun elevation at a simulated time
    - tilt_efficiency, electrolyte_efficiency: Configuration response curves
    - production_rate, accumulate_yield: Noisy rate and yield integration
    - BanditLearner: Epsilon-greedy search over configuration bins
    - SolarSynthController: Tick-driven loop owning clock, yield and configuration

Quick Start:
    >>> from solar_synth import SolarSynthController
    >>>
    >>> controller = SolarSynthController()
    >>> controller.set_learner_enabled(True)
    >>> controller.start()
    >>> for _ in range(600):
    ...     snapshot = controller.tick(0.1)
    >>> print(f"{snapshot.total_ml:.1f} mL after {snapshot.time_s:.0f} s")

For headless runs with CSV and plot outputs, see solar_synth.simulation.run_headless
or `python -m solar_synth --help`.
"""

from .config import Configuration, LearnerConfig, SimulationConfig
from .controller import FrameClock, RunState, Snapshot, SolarSynthController
from .efficiency import EfficiencyPair, electrolyte_efficiency, tilt_efficiency
from .environment import EnvironmentSample, sample_environment
from .learner import BanditLearner, BestObservation, Bin, RewardRecord, Suggestion, discretize
from .production import accumulate_yield, production_rate

__all__ = [
    "SimulationConfig",
    "Configuration",
    "LearnerConfig",
    "EnvironmentSample",
    "sample_environment",
    "EfficiencyPair",
    "tilt_efficiency",
    "electrolyte_efficiency",
    "production_rate",
    "accumulate_yield",
    "Bin",
    "discretize",
    "RewardRecord",
    "BestObservation",
    "Suggestion",
    "BanditLearner",
    "RunState",
    "Snapshot",
    "FrameClock",
    "SolarSynthController",
]
