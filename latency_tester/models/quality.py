"""Quality grading data structures."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .statistics import DataStatus


class QualityTier(Enum):
    """Connection quality tiers, best first."""
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    UNKNOWN = "Unknown"

    @property
    def rank(self) -> int:
        """Position in the tier order (0 is best)."""
        return list(QualityTier).index(self)


@dataclass(frozen=True)
class QualityReport:
    """Quality tier and advice derived from one Statistics snapshot."""
    tier: QualityTier
    recommendation: str
    status: DataStatus = DataStatus.OK

    def to_dict(self) -> Dict:
        return {
            "tier": self.tier.value,
            "recommendation": self.recommendation,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class RankingEntry:
    """One endpoint's place in a comparison."""
    position: int
    endpoint: str
    avg: float
    packet_loss: float
    jitter: float
    tier: QualityTier

    def to_dict(self) -> Dict:
        return {
            "position": self.position,
            "endpoint": self.endpoint,
            "avg_ms": self.avg,
            "packet_loss_percent": self.packet_loss,
            "jitter_ms": self.jitter,
            "tier": self.tier.value,
        }


@dataclass
class ComparisonResult:
    """Ranking of several endpoints by average latency."""
    ranking: List[RankingEntry] = field(default_factory=list)
    best: Optional[str] = None
    no_data: List[str] = field(default_factory=list)
    status: DataStatus = DataStatus.NO_DATA
    recommendation: str = ""

    @property
    def is_no_data(self) -> bool:
        return self.status is DataStatus.NO_DATA

    def to_dict(self) -> Dict:
        return {
            "status": self.status.value,
            "best": self.best,
            "ranking": [entry.to_dict() for entry in self.ranking],
            "no_data": list(self.no_data),
            "recommendation": self.recommendation,
        }
