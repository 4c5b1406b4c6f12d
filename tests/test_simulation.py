"""Tests for the headless driver and the command-line entry point."""

import numpy as np
import pandas as pd
import pytest

from solar_synth.__main__ import main
from solar_synth.config import Configuration, SimulationConfig
from solar_synth.controller import RunState, SolarSynthController
from solar_synth.simulation import HISTORY_COLUMNS, HeadlessRun, run_headless


@pytest.fixture(autouse=True)
def quiet(monkeypatch):
    monkeypatch.setenv("SOLAR_SYNTH_VERBOSITY", "0")


class TestHeadlessRun:
    """Test fixed-step and jittered runs."""

    def test_fixed_step_run(self):
        artifacts = run_headless(30.0, config=SimulationConfig(seed=3), step_s=0.25)
        assert artifacts.n_ticks == 120
        assert artifacts.final.time_s == 30.0
        for name in HISTORY_COLUMNS:
            assert artifacts.history[name].shape == (121,)
        assert np.all(np.diff(artifacts.history["total_ml"]) >= 0.0)
        assert np.all(np.diff(artifacts.history["time_s"]) > 0.0)
        assert artifacts.controller.state is RunState.PAUSED

    def test_learner_moves_configuration(self):
        artifacts = run_headless(60.0, config=SimulationConfig(seed=5, epsilon=1.0), step_s=0.5)
        tilts = set(artifacts.history["tilt_deg"])
        assert len(tilts) > 1
        assert artifacts.final.explore_count == 12

    def test_learner_disabled(self):
        artifacts = run_headless(
            20.0,
            config=SimulationConfig(seed=1),
            step_s=0.5,
            learner_enabled=False,
            initial=Configuration(15.0, 0.6),
        )
        assert set(artifacts.history["tilt_deg"]) == {15.0}
        assert set(artifacts.history["electrolyte_pct"]) == {0.6}

    def test_jittered_run_reaches_duration(self):
        controller = SolarSynthController(SimulationConfig(seed=2))
        runner = HeadlessRun(controller, step_s=0.1, jitter=0.5, jitter_seed=9)
        artifacts = runner.run(25.0)
        assert artifacts.final.time_s == pytest.approx(25.0)
        steps = np.diff(artifacts.history["time_s"])
        assert np.all(steps[:-1] >= 0.05 - 1e-12)
        assert np.all(steps <= 0.15 + 1e-12)
        samples = sum(rec.count for rec in controller.learner.memory.values())
        assert samples == 25

    def test_same_seed_same_run(self):
        a = run_headless(20.0, config=SimulationConfig(seed=8), step_s=0.2)
        b = run_headless(20.0, config=SimulationConfig(seed=8), step_s=0.2)
        assert a.final.total_ml == b.final.total_ml
        assert np.array_equal(a.history["tilt_deg"], b.history["tilt_deg"])

    def test_dataframe_export(self):
        artifacts = run_headless(5.0, config=SimulationConfig(seed=0), step_s=0.5)
        frame = artifacts.to_dataframe()
        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == list(HISTORY_COLUMNS)
        assert len(frame) == 11

    def test_writes_outputs(self, tmp_path):
        out = tmp_path / "run"
        run_headless(10.0, config=SimulationConfig(seed=0), step_s=0.5, output_dir=out)
        for name in ("history.csv", "memory.txt", "production.png", "configuration.png"):
            assert (out / name).is_file()
        frame = pd.read_csv(out / "history.csv")
        assert len(frame) == 21
        assert "Bins visited" in (out / "memory.txt").read_text()

    @pytest.mark.parametrize("kwargs", [{"step_s": 0.0}, {"step_s": -1.0}, {"jitter": 1.0}, {"jitter": -0.1}])
    def test_invalid_runner_arguments(self, kwargs):
        with pytest.raises(ValueError):
            HeadlessRun(SolarSynthController(), **kwargs)

    def test_negative_duration(self):
        with pytest.raises(ValueError, match="duration_s"):
            HeadlessRun(SolarSynthController()).run(-1.0)


class TestCommandLine:
    """Test python -m solar_synth."""

    def test_quiet_prints_total(self, capsys):
        main(["--duration", "10", "--step", "0.5", "--seed", "1", "-q"])
        out = capsys.readouterr().out.strip()
        assert float(out) >= 0.0

    def test_normal_summary(self, capsys):
        main(["--duration", "12", "--step", "0.5", "--seed", "1", "--epsilon", "5", "--cadence", "1"])
        out = capsys.readouterr().out
        assert "Run Summary" in out
        assert "epsilon=1, cadence=2s" in out
        assert "Decisions (explore/exploit): 6/0" in out

    def test_output_dir(self, tmp_path, capsys):
        main(["--duration", "4", "--step", "0.5", "--seed", "1", "--no-learner", "--output-dir", str(tmp_path)])
        assert (tmp_path / "history.csv").is_file()
        assert "Results written to" in capsys.readouterr().out

    def test_invalid_step_exits(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--duration", "4", "--step", "0", "-q"])
        assert excinfo.value.code == 1
        assert "Invalid input" in capsys.readouterr().err
