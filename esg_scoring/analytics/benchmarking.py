"""Peer benchmarking and target tracking."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from scipy import stats

from ..scoring.weighted_scorer import round_half_up

ON_TRACK_RATIO = 0.8

DEFAULT_SECTOR_BENCHMARKS: dict[str, dict[str, Any]] = {
    "scope1Emissions": {"median": 5000, "top25": 2000, "distribution": [1000, 2000, 5000, 8000, 12000]},
    "femaleEmployeesPercentage": {"median": 30, "top25": 45, "distribution": [15, 25, 30, 40, 50]},
    "independentDirectorsPercentage": {"median": 40, "top25": 60, "distribution": [20, 35, 40, 55, 70]},
}


def percentile_rank(value: float, distribution: Sequence[float]) -> int:
    """Share of peers strictly below ``value``, as a whole percentage."""
    if not distribution:
        return 0
    return round_half_up(float(stats.percentileofscore(distribution, value, kind="strict")))


def benchmark_metrics(
    metrics: Mapping[str, float],
    benchmarks: Mapping[str, Mapping[str, Any]] | None = None,
) -> dict[str, dict[str, Any]]:
    """Compare company metrics with sector median and top quartile.

    Performance is "leading" at or below the top-quartile value, "average" at
    or below the median and "lagging" otherwise. Metrics without a benchmark
    are skipped.
    """
    benchmarks = DEFAULT_SECTOR_BENCHMARKS if benchmarks is None else benchmarks
    out = {}
    for metric, value in metrics.items():
        peer = benchmarks.get(metric)
        if not peer:
            continue
        if value <= peer["top25"]:
            performance = "leading"
        elif value <= peer["median"]:
            performance = "average"
        else:
            performance = "lagging"
        out[metric] = {
            "company": value,
            "sectorMedian": peer["median"],
            "sectorTop25": peer["top25"],
            "percentile": percentile_rank(value, peer.get("distribution", [])),
            "performance": performance,
        }
    return out


@dataclass(frozen=True)
class Target:
    metric: str
    value: float
    baseline_value: float
    baseline_year: int
    deadline_year: int

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> Target:
        return cls(
            metric=cfg["metric"],
            value=float(cfg["value"]),
            baseline_value=float(cfg["baseline"]["value"]),
            baseline_year=int(cfg["baseline"]["year"]),
            deadline_year=int(cfg["deadline"]["year"]),
        )


def target_progress(current: float | None, baseline: float, target: float) -> int:
    """Percentage of the way from baseline to target (0 if either is unset)."""
    if not baseline or not target or target == baseline:
        return 0
    return round_half_up(((current or 0) - baseline) / (target - baseline) * 100)


def is_on_track(current: float | None, target: Target, as_of_year: int) -> bool:
    """On track when progress is at least 80% of the time-proportional expectation."""
    span = target.deadline_year - target.baseline_year
    elapsed = (as_of_year - target.baseline_year) / span if span else 1.0
    progress = target_progress(current, target.baseline_value, target.value)
    return progress >= elapsed * 100 * ON_TRACK_RATIO


def track_targets(
    targets: Sequence[Target],
    metrics: Mapping[str, float],
    *,
    as_of_year: int,
) -> list[dict[str, Any]]:
    rows = []
    for t in targets:
        current = metrics.get(t.metric)
        rows.append({
            "metric": t.metric,
            "target": t.value,
            "current": current or 0,
            "progress": target_progress(current, t.baseline_value, t.value),
            "deadline": t.deadline_year,
            "onTrack": is_on_track(current, t, as_of_year),
        })
    return rows
