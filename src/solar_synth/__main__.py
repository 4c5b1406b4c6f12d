"""Command-line entry point for running a headless Solar Synth simulation."""

from __future__ import annotations

import argparse
import os
import sys
import time
from dataclasses import replace
from pathlib import Path

from .config import Configuration, LearnerConfig, SimulationConfig
from .reporting import readout_lines
from .simulation import RunArtifacts, run_headless


def format_duration(seconds: float) -> str:
    """Format wall-clock duration in seconds to human-readable string."""
    if seconds < 60:
        return f"{seconds:.2f}s"
    minutes = int(seconds // 60)
    secs = seconds % 60
    return f"{minutes}m {secs:.1f}s"


def print_header(text: str, width: int = 70) -> None:
    """Print a formatted section header."""
    print("\n" + "=" * width)
    print(f"  {text}")
    print("=" * width)


def print_summary(artifacts: RunArtifacts, elapsed: float) -> None:
    final = artifacts.final
    labels = readout_lines(final)
    print_header("Run Summary")

    print(f"\nRuntime: {format_duration(elapsed)}  ({artifacts.n_ticks} ticks)")

    print("\n--- Readouts ---")
    print(f"  Elapsed:                    {labels['time']}")
    print(f"  Irradiance:                 {labels['lux']} lux")
    print(f"  H2 rate:                    {labels['rate']} mL/min")
    print(f"  Cumulative H2:              {labels['total']} mL")
    print(f"  Configuration:              tilt {labels['tilt']}, electrolyte {labels['electrolyte']}")

    print("\n--- Learner ---")
    print(f"  Decisions (explore/exploit): {final.explore_count}/{final.exploit_count}")
    print(f"  Best tilt:                  {labels['best_tilt']}")
    print(f"  Best electrolyte:           {labels['best_elec']}")
    print(f"  Best rate:                  {labels['best_rate']}")
    print("\n" + artifacts.memory_table)


def build_parser() -> argparse.ArgumentParser:
    defaults = SimulationConfig()
    parser = argparse.ArgumentParser(
        description="Run the Solar Synth hydrogen simulation with the epsilon-greedy tuner.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                              # One simulated day with the learner on
  %(prog)s --duration 720 --epsilon 0.1 # Two days, greedier learner
  %(prog)s --no-learner --tilt 40       # Fixed configuration baseline
  %(prog)s --output-dir runs/ -v        # Write CSV and plots, verbose
        """,
    )
    parser.add_argument("--duration", type=float, default=defaults.day_length_s,
                        help="Simulated seconds to run (default: one day, %(default)s).")
    parser.add_argument("--step", type=float, default=1.0 / 60.0,
                        help="Tick length in simulated seconds (default: 1/60).")
    parser.add_argument("--jitter", type=float, default=0.0,
                        help="Relative tick-length jitter in [0, 1) (default: 0).")
    parser.add_argument("--epsilon", type=float, default=defaults.epsilon,
                        help="Exploration rate, clamped to [0, 1] (default: %(default)s).")
    parser.add_argument("--cadence", type=float, default=defaults.decision_cadence_s,
                        help="Seconds between learner decisions, clamped to [2, 30] (default: %(default)s).")
    parser.add_argument("--no-learner", action="store_true",
                        help="Keep the initial configuration for the whole run.")
    parser.add_argument("--tilt", type=float, default=defaults.default_tilt_deg,
                        help="Initial panel tilt in degrees (default: %(default)s).")
    parser.add_argument("--electrolyte", type=float, default=defaults.default_electrolyte_pct,
                        help="Initial electrolyte concentration in %% (default: %(default)s).")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for production noise and exploration.")
    parser.add_argument("--output-dir", type=Path, default=None,
                        help="Directory for history.csv, memory.txt and plots (default: none).")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print every learner decision and track the best observation.")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Suppress all output except the final yield.")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    if args.quiet:
        os.environ["SOLAR_SYNTH_VERBOSITY"] = "0"
    elif args.verbose:
        os.environ["SOLAR_SYNTH_VERBOSITY"] = "2"
    else:
        os.environ["SOLAR_SYNTH_VERBOSITY"] = "1"

    start_time = time.time()
    try:
        base = SimulationConfig(seed=args.seed)
        learner_config = LearnerConfig.clamped(args.epsilon, args.cadence, base)
        config = replace(
            base,
            epsilon=learner_config.epsilon,
            decision_cadence_s=learner_config.decision_cadence_s,
        )
        initial = Configuration.clamped(args.tilt, args.electrolyte, config)

        if not args.quiet:
            print_header("Solar Synth Headless Run")
            print(f"\nDuration: {args.duration:g} s, step: {args.step:.4f} s, jitter: {args.jitter:g}")
            print(f"Learner: {'off' if args.no_learner else f'epsilon={config.epsilon:g}, cadence={config.decision_cadence_s:g}s'}")

        artifacts = run_headless(
            args.duration,
            config=config,
            step_s=args.step,
            jitter=args.jitter,
            learner_enabled=not args.no_learner,
            initial=initial,
            output_dir=args.output_dir,
        )
        elapsed = time.time() - start_time

        if args.quiet:
            print(f"{artifacts.final.total_ml:.1f}")
        else:
            print_summary(artifacts, elapsed)
            print_header("Run Complete")
            if args.output_dir is not None:
                print(f"Results written to: {args.output_dir.resolve()}\n")

    except ImportError as e:
        elapsed = time.time() - start_time
        print(
            f"\nError after {format_duration(elapsed)}:\n"
            f"Missing required dependency: {e}\n"
            f"Please install required packages: pip install numpy pandas matplotlib tabulate tqdm",
            file=sys.stderr,
        )
        sys.exit(1)
    except ValueError as e:
        elapsed = time.time() - start_time
        print(
            f"\nError after {format_duration(elapsed)}:\n"
            f"Invalid input: {e}",
            file=sys.stderr,
        )
        sys.exit(1)
    except OSError as e:
        elapsed = time.time() - start_time
        print(
            f"\nError after {format_duration(elapsed)}:\n"
            f"Could not write outputs: {e}",
            file=sys.stderr,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
