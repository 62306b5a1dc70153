"""Scenario analysis, peer benchmarking and target tracking."""

from .benchmarking import Target, benchmark_metrics, is_on_track, percentile_rank, target_progress, track_targets
from .scenarios import scenario_analysis

__all__ = [
    "Target",
    "benchmark_metrics",
    "is_on_track",
    "percentile_rank",
    "scenario_analysis",
    "target_progress",
    "track_targets",
]
