"""Data models for latency tester."""

from .statistics import Statistics, DataStatus
from .sample import Sample, TestResult, MultiEndpointResult
from .quality import QualityTier, QualityReport, RankingEntry, ComparisonResult

__all__ = [
    "Statistics",
    "DataStatus",
    "Sample",
    "TestResult",
    "MultiEndpointResult",
    "QualityTier",
    "QualityReport",
    "RankingEntry",
    "ComparisonResult",
]
