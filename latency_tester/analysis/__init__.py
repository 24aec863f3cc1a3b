"""Analysis modules for latency measurements."""

from .aggregator import StatisticsAggregator, aggregate, mean_jitter, percentile
from .quality import QualityAnalyzer, QualityThresholds, TierRule, classify, compare

__all__ = [
    "StatisticsAggregator",
    "aggregate",
    "mean_jitter",
    "percentile",
    "QualityAnalyzer",
    "QualityThresholds",
    "TierRule",
    "classify",
    "compare",
]
