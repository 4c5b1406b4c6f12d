"""Reporting utilities: readout labels and learner memory tables."""

from __future__ import annotations

import math

from tabulate import tabulate

from .controller import Snapshot
from .learner import BanditLearner, BestObservation

PLACEHOLDER = "—"


def format_elapsed(seconds: float) -> str:
    """Format simulated time as ``m:ss``."""
    minutes = int(seconds // 60)
    secs = int(math.floor(seconds % 60))
    return f"{minutes}:{secs:02d}"


def format_lux(lux: int) -> str:
    return f"{lux:,}"


def format_rate(rate_ml_per_min: float) -> str:
    return f"{rate_ml_per_min:.2f}"


def format_yield(total_ml: float) -> str:
    return f"{total_ml:.1f}"


def format_best(best: BestObservation) -> tuple[str, str, str]:
    """Best tilt, electrolyte and rate labels, or placeholders before any record."""
    if best.is_empty:
        return PLACEHOLDER, PLACEHOLDER, PLACEHOLDER
    return f"{best.bin.tilt_deg:g}", f"{best.bin.electrolyte_pct:g}", f"{best.reward:.2f}"


def readout_lines(snapshot: Snapshot) -> dict[str, str]:
    best_tilt, best_elec, best_rate = format_best(snapshot.best)
    return {
        "time": format_elapsed(snapshot.time_s),
        "lux": format_lux(snapshot.environment.lux),
        "rate": format_rate(snapshot.rate_ml_per_min),
        "total": format_yield(snapshot.total_ml),
        "tilt": f"{snapshot.configuration.tilt_deg:g}°",
        "electrolyte": f"{snapshot.configuration.electrolyte_pct:g}%",
        "tilt_eff": f"{snapshot.efficiencies.tilt_eff * 100:.0f}%",
        "elec_eff": f"{snapshot.efficiencies.elec_eff * 100:.0f}%",
        "best_tilt": best_tilt,
        "best_elec": best_elec,
        "best_rate": best_rate,
    }


def summarize_memory(learner: BanditLearner, limit: int | None = 10) -> str:
    rows: list[tuple] = []
    for bin_, record in learner.ranked(limit):
        rows.append(
            (
                f"{bin_.tilt_deg:g}",
                f"{bin_.electrolyte_pct:g}",
                record.count,
                f"{record.average:.3f}",
            )
        )
    table = tabulate(
        rows,
        headers=["Tilt [deg]", "Electrolyte [%]", "Samples", "Mean rate [mL/min]"],
        tablefmt="github",
        disable_numparse=True,
    )
    best_tilt, best_elec, best_rate = format_best(learner.best)
    overall = (
        f"Bins visited: {len(learner.memory)}/{learner.config.n_bins}; "
        f"best single reward: {best_rate} at tilt={best_tilt}, electrolyte={best_elec}"
    )
    return table + "\n" + overall
