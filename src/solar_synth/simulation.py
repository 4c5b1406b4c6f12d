"""Headless driver running the controller over a span of simulated time."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from tqdm import tqdm

from .config import Configuration, SimulationConfig
from .controller import Snapshot, SolarSynthController
from .environment import environment_profile
from .reporting import format_best, summarize_memory

HISTORY_COLUMNS = (
    "time_s",
    "lux",
    "sun_angle_deg",
    "tilt_eff",
    "elec_eff",
    "rate_ml_per_min",
    "total_ml",
    "tilt_deg",
    "electrolyte_pct",
)


def _get_verbosity() -> int:
    """Get verbosity level from environment: 0=quiet, 1=normal, 2=verbose."""
    return int(os.environ.get("SOLAR_SYNTH_VERBOSITY", "1"))


@dataclass(slots=True)
class RunArtifacts:
    config: SimulationConfig
    controller: SolarSynthController
    history: dict[str, np.ndarray]
    final: Snapshot
    n_ticks: int
    memory_table: str

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({name: self.history[name] for name in HISTORY_COLUMNS})


def _row(snapshot: Snapshot) -> tuple:
    return (
        snapshot.time_s,
        snapshot.environment.lux,
        snapshot.environment.sun_angle_deg,
        snapshot.efficiencies.tilt_eff,
        snapshot.efficiencies.elec_eff,
        snapshot.rate_ml_per_min,
        snapshot.total_ml,
        snapshot.configuration.tilt_deg,
        snapshot.configuration.electrolyte_pct,
    )


class HeadlessRun:
    """Fixed-step (optionally jittered) tick source for a controller.

    A jitter of ``j`` scales each step by a factor drawn uniformly from
    [1 - j, 1 + j], mimicking an irregular display refresh. Step jitter uses
    its own generator so it does not perturb the controller's random stream.
    """

    def __init__(
        self,
        controller: SolarSynthController | None = None,
        step_s: float = 1.0 / 60.0,
        jitter: float = 0.0,
        jitter_seed: int | None = None,
    ) -> None:
        if step_s <= 0:
            raise ValueError(f"step_s must be positive, got {step_s}.")
        if not (0.0 <= jitter < 1.0):
            raise ValueError(
                f"jitter must lie in [0, 1), got {jitter}.\n"
                f"A jitter of 1 or more could produce zero or negative steps."
            )
        self.controller = controller or SolarSynthController()
        self.config = self.controller.config
        self.step_s = step_s
        self.jitter = jitter
        self._step_rng = np.random.default_rng(jitter_seed)

    def _next_step(self) -> float:
        if self.jitter == 0.0:
            return self.step_s
        return self.step_s * float(self._step_rng.uniform(1.0 - self.jitter, 1.0 + self.jitter))

    def run(self, duration_s: float, output_dir: str | Path | None = None) -> RunArtifacts:
        if duration_s < 0:
            raise ValueError(f"duration_s must be non-negative, got {duration_s}.")
        controller = self.controller
        verbosity = _get_verbosity()

        controller.start()
        rows: list[tuple] = []
        snapshot = controller.tick(0.0)
        rows.append(_row(snapshot))
        end_time = controller.time_s + duration_s

        pbar = tqdm(
            total=round(duration_s, 3),
            desc="Simulating",
            unit="s",
            disable=verbosity == 0,
            leave=False,
        )
        while controller.time_s < end_time:
            dt = min(self._next_step(), end_time - controller.time_s)
            snapshot = controller.tick(dt)
            rows.append(_row(snapshot))
            pbar.update(round(dt, 6))
            if verbosity >= 2 and snapshot.best_changed:
                best_tilt, best_elec, best_rate = format_best(snapshot.best)
                pbar.set_postfix({"best": f"{best_rate} @ {best_tilt}/{best_elec}"})
        pbar.close()
        controller.pause()

        columns = list(zip(*rows))
        history = {name: np.asarray(col, dtype=float) for name, col in zip(HISTORY_COLUMNS, columns)}
        artifacts = RunArtifacts(
            config=self.config,
            controller=controller,
            history=history,
            final=snapshot,
            n_ticks=len(rows) - 1,
            memory_table=summarize_memory(controller.learner),
        )

        if output_dir is not None:
            self.write_outputs(artifacts, Path(output_dir))
        return artifacts

    def write_outputs(self, artifacts: RunArtifacts, artifact_dir: Path) -> None:
        artifact_dir.mkdir(parents=True, exist_ok=True)
        if _get_verbosity() >= 1:
            print(f"Writing run outputs to {artifact_dir}...")
        artifacts.to_dataframe().to_csv(artifact_dir / "history.csv", index=False)
        (artifact_dir / "memory.txt").write_text(artifacts.memory_table)
        self._plot_production(artifacts, artifact_dir / "production.png")
        self._plot_configuration(artifacts, artifact_dir / "configuration.png")

    def _plot_production(self, artifacts: RunArtifacts, out_path: Path) -> None:
        history = artifacts.history
        fig, axes = plt.subplots(3, 1, figsize=(8.0, 8.0), sharex=True)
        axes[0].plot(history["time_s"], history["lux"], linewidth=1.5)
        axes[0].set_ylabel("Irradiance [lux]")
        axes[1].plot(history["time_s"], history["rate_ml_per_min"], linewidth=1.0, alpha=0.8)
        axes[1].set_ylabel("H2 rate [mL/min]")
        axes[2].plot(history["time_s"], history["total_ml"], linewidth=2.0)
        axes[2].set_ylabel("Cumulative H2 [mL]")
        axes[2].set_xlabel("Simulated time [s]")
        for ax in axes:
            ax.grid(True, alpha=0.3)
        axes[0].set_title(f"Solar Synth production ({artifacts.n_ticks} ticks)")
        plt.tight_layout()
        plt.savefig(out_path)
        plt.close(fig)

    def _plot_configuration(self, artifacts: RunArtifacts, out_path: Path) -> None:
        history = artifacts.history
        times = history["time_s"]
        _, sun = environment_profile(times, self.config)
        fig, axes = plt.subplots(2, 1, figsize=(8.0, 6.0), sharex=True)
        axes[0].plot(times, history["tilt_deg"], drawstyle="steps-post", label="Panel tilt")
        axes[0].plot(times, sun, "--", label="Sun elevation")
        axes[0].set_ylabel("Angle [deg]")
        axes[0].legend()
        axes[1].plot(times, history["electrolyte_pct"], drawstyle="steps-post")
        axes[1].axhline(self.config.electrolyte_peak_pct, color="red", alpha=0.5, linestyle=":")
        axes[1].set_ylabel("Electrolyte [%]")
        axes[1].set_xlabel("Simulated time [s]")
        for ax in axes:
            ax.grid(True, alpha=0.3)
        plt.tight_layout()
        plt.savefig(out_path)
        plt.close(fig)


def run_headless(
    duration_s: float,
    config: SimulationConfig | None = None,
    step_s: float = 1.0 / 60.0,
    jitter: float = 0.0,
    learner_enabled: bool = True,
    initial: Configuration | None = None,
    output_dir: str | Path | None = None,
) -> RunArtifacts:
    config = config or SimulationConfig()
    controller = SolarSynthController(config, default_configuration=initial)
    controller.set_learner_enabled(learner_enabled)
    runner = HeadlessRun(controller, step_s=step_s, jitter=jitter, jitter_seed=config.seed)
    return runner.run(duration_s, output_dir=output_dir)
