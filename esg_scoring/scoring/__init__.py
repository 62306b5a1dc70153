"""Category weighting and benchmark-relative ESG scoring."""

from .benchmark_scorer import BenchmarkScorer, esg_rating, normalize_metric_score
from .weighted_scorer import DEFAULT_CATEGORY_WEIGHTS, weighted_mean, weighted_score

__all__ = [
    "BenchmarkScorer",
    "DEFAULT_CATEGORY_WEIGHTS",
    "esg_rating",
    "normalize_metric_score",
    "weighted_mean",
    "weighted_score",
]
