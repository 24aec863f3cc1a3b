"""Reduction of raw probe samples to summary statistics."""

from typing import Iterable, List, Optional, Sequence
import statistics

from ..models.sample import Sample
from ..models.statistics import DataStatus, Statistics


def mean_jitter(latencies: Sequence[float]) -> float:
    """
    Mean absolute difference between consecutive latencies.

    Order matters: the values are taken in the order the probes ran, not
    sorted. Fewer than two values give 0.0.
    """
    if len(latencies) < 2:
        return 0.0

    deltas = [
        abs(latencies[i] - latencies[i - 1])
        for i in range(1, len(latencies))
    ]
    return statistics.fmean(deltas)


def percentile(values: Iterable[float], p: float) -> Optional[float]:
    """Percentile at index int(n * p / 100) of the sorted values. None when empty."""
    ordered = sorted(values)
    if not ordered:
        return None
    idx = int(len(ordered) * p / 100)
    return ordered[min(idx, len(ordered) - 1)]


def aggregate(samples: Sequence[Sample]) -> Statistics:
    """
    Summarize an ordered sequence of samples.

    Pure function: the same sequence always yields the same Statistics.
    An empty sequence yields a NO_DATA result rather than raising.
    """
    total = len(samples)
    if total == 0:
        return Statistics.no_data()

    latencies: List[float] = [s.latency_ms for s in samples if s.success]
    failed = total - len(latencies)
    packet_loss = (failed / total) * 100

    if not latencies:
        return Statistics(
            packet_loss=100.0,
            total=total,
            successful=0,
            failed=failed,
            status=DataStatus.OK,
        )

    return Statistics(
        avg=statistics.fmean(latencies),
        min=min(latencies),
        max=max(latencies),
        jitter=mean_jitter(latencies),
        packet_loss=packet_loss,
        total=total,
        successful=len(latencies),
        failed=failed,
        status=DataStatus.OK,
    )


class StatisticsAggregator:
    """Object wrapper around aggregate() for callers that inject collaborators."""

    def aggregate(self, samples: Sequence[Sample]) -> Statistics:
        return aggregate(samples)

    def p95(self, samples: Sequence[Sample]) -> Optional[float]:
        return percentile((s.latency_ms for s in samples if s.success), 95)
