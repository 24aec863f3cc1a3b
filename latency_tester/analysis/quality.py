"""Connection quality grading and multi-endpoint comparison."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..models.quality import ComparisonResult, QualityReport, QualityTier, RankingEntry
from ..models.sample import MultiEndpointResult
from ..models.statistics import DataStatus, Statistics


@dataclass(frozen=True)
class TierRule:
    """Upper bounds (exclusive) a Statistics snapshot must meet for a tier."""
    tier: QualityTier
    avg_below: float
    loss_below: float  # 0 means the batch must be lossless
    jitter_below: float

    def loss_ok(self, packet_loss: float) -> bool:
        if self.loss_below == 0:
            return packet_loss == 0
        return packet_loss < self.loss_below

    def matches(self, stats: Statistics) -> bool:
        return (
            stats.avg < self.avg_below
            and self.loss_ok(stats.packet_loss)
            and stats.jitter < self.jitter_below
        )

    def violations(self, stats: Statistics) -> List[str]:
        """Describe each metric of ``stats`` outside this rule's bounds."""
        issues = []
        if not self.loss_ok(stats.packet_loss):
            issues.append(f"high packet loss ({stats.packet_loss:.2f}%)")
        if stats.avg >= self.avg_below:
            issues.append(f"high latency ({stats.avg:.1f}ms)")
        if stats.jitter >= self.jitter_below:
            issues.append(f"high jitter ({stats.jitter:.1f}ms)")
        return issues


DEFAULT_RULES: Tuple[TierRule, ...] = (
    TierRule(QualityTier.EXCELLENT, avg_below=50, loss_below=0, jitter_below=5),
    TierRule(QualityTier.GOOD, avg_below=100, loss_below=1, jitter_below=20),
    TierRule(QualityTier.FAIR, avg_below=200, loss_below=5, jitter_below=40),
)

RECOMMENDATIONS: Dict[QualityTier, str] = {
    QualityTier.EXCELLENT: (
        "Excellent connection. Suitable for real-time traffic such as VoIP, "
        "video conferencing and gaming."
    ),
    QualityTier.GOOD: (
        "Good connection. Suitable for most applications; latency-sensitive "
        "traffic may see occasional degradation."
    ),
    QualityTier.FAIR: (
        "Fair connection. Browsing and streaming work, but expect noticeable "
        "delay in calls and games. Consider QoS or a wired link."
    ),
    QualityTier.POOR: (
        "Poor connection. Investigate the route to this endpoint and contact "
        "the network provider if the problem persists."
    ),
    QualityTier.UNKNOWN: (
        "No successful probes. The endpoint is unreachable or every request "
        "timed out; check the address, DNS and firewall rules."
    ),
}

NO_DATA_RECOMMENDATION = "Insufficient data: no probes were run."


@dataclass
class QualityThresholds:
    """Ordered tier rules. The first matching rule wins; anything else is Poor."""
    rules: Tuple[TierRule, ...] = field(default=DEFAULT_RULES)

    def tier_for(self, stats: Statistics) -> QualityTier:
        if not stats.has_latency:
            return QualityTier.UNKNOWN
        for rule in self.rules:
            if rule.matches(stats):
                return rule.tier
        return QualityTier.POOR


def _issues(stats: Statistics, thresholds: QualityThresholds) -> List[str]:
    """Describe the metrics that pushed a batch into the Poor tier.

    Poor means the last, loosest rule did not match, so at least one metric
    is outside its bounds.
    """
    if not thresholds.rules:
        return []
    return thresholds.rules[-1].violations(stats)


def classify(stats: Statistics, thresholds: Optional[QualityThresholds] = None) -> QualityReport:
    """
    Grade a Statistics snapshot.

    Tiers are evaluated in order Excellent, Good, Fair and the first match
    wins. Statistics without any successful sample grade as Unknown.
    """
    if stats.is_no_data:
        return QualityReport(
            tier=QualityTier.UNKNOWN,
            recommendation=NO_DATA_RECOMMENDATION,
            status=DataStatus.NO_DATA,
        )

    thresholds = thresholds or QualityThresholds()
    tier = thresholds.tier_for(stats)
    recommendation = RECOMMENDATIONS[tier]

    if tier is QualityTier.POOR:
        issues = _issues(stats, thresholds)
        if issues:
            recommendation = f"{recommendation} Observed {', '.join(issues)}."

    return QualityReport(tier=tier, recommendation=recommendation)


def compare(
    results: MultiEndpointResult,
    thresholds: Optional[QualityThresholds] = None,
) -> ComparisonResult:
    """
    Rank endpoints by average latency.

    Only endpoints with at least one successful sample are ranked. Ties on
    average fall back to lower packet loss, then to input order.
    """
    thresholds = thresholds or QualityThresholds()

    candidates = []
    no_data = []
    for order, (endpoint, result) in enumerate(results.items()):
        stats = result.summary
        if stats is None or not stats.has_latency:
            no_data.append(endpoint)
            continue
        candidates.append((stats.avg, stats.packet_loss, order, endpoint, stats))

    candidates.sort(key=lambda c: (c[0], c[1], c[2]))

    ranking = [
        RankingEntry(
            position=position,
            endpoint=endpoint,
            avg=stats.avg,
            packet_loss=stats.packet_loss,
            jitter=stats.jitter,
            tier=thresholds.tier_for(stats),
        )
        for position, (_, _, _, endpoint, stats) in enumerate(candidates, start=1)
    ]

    if not ranking:
        return ComparisonResult(
            no_data=no_data,
            status=DataStatus.NO_DATA,
            recommendation="Insufficient data: no endpoint answered any probe.",
        )

    return ComparisonResult(
        ranking=ranking,
        best=ranking[0].endpoint,
        no_data=no_data,
        status=DataStatus.OK,
        recommendation=_comparison_recommendation(ranking, no_data),
    )


def _comparison_recommendation(ranking: List[RankingEntry], no_data: List[str]) -> str:
    """Generate actionable recommendation for a ranking."""
    best = ranking[0]
    parts = [
        f"Use {best.endpoint} for latency-sensitive traffic "
        f"({best.avg:.1f}ms average, {best.tier.value})."
    ]

    if len(ranking) > 1:
        runner_up = ranking[1]
        delta = runner_up.avg - best.avg
        parts.append(f"{runner_up.endpoint} is {delta:.1f}ms slower on average.")

    if no_data:
        parts.append(f"Unreachable: {', '.join(no_data)}.")

    return " ".join(parts)


class QualityAnalyzer:
    """Grades statistics and compares endpoints using one threshold table."""

    def __init__(self, thresholds: Optional[QualityThresholds] = None):
        self.thresholds = thresholds or QualityThresholds()

    def classify(self, stats: Statistics) -> QualityReport:
        return classify(stats, self.thresholds)

    def compare(self, results: MultiEndpointResult) -> ComparisonResult:
        return compare(results, self.thresholds)
