"""Probe sample and batch result data structures."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple

from ..errors import InvalidArgumentError
from .statistics import Statistics


@dataclass(frozen=True)
class Sample:
    """The recorded outcome of one probe (after any retries)."""
    endpoint: str
    timestamp: datetime
    success: bool
    latency_ms: Optional[float] = None  # None unless success
    attempts: int = 1
    error: Optional[str] = None

    def __post_init__(self):
        if not self.success and self.latency_ms is not None:
            raise InvalidArgumentError("failed sample cannot carry a latency")
        if self.success:
            if self.latency_ms is None:
                raise InvalidArgumentError("successful sample requires latency_ms")
            if self.latency_ms <= 0:
                raise InvalidArgumentError(f"latency_ms must be positive, got {self.latency_ms}")

    @classmethod
    def ok(cls, endpoint: str, latency_ms: float, attempts: int = 1,
           timestamp: Optional[datetime] = None) -> "Sample":
        """Create a successful sample."""
        return cls(
            endpoint=endpoint,
            timestamp=timestamp or datetime.now(),
            success=True,
            latency_ms=float(latency_ms),
            attempts=attempts,
        )

    @classmethod
    def failed(cls, endpoint: str, error: Optional[str] = None, attempts: int = 1,
               timestamp: Optional[datetime] = None) -> "Sample":
        """Create a failed sample."""
        return cls(
            endpoint=endpoint,
            timestamp=timestamp or datetime.now(),
            success=False,
            attempts=attempts,
            error=error,
        )

    def to_dict(self) -> Dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "success": self.success,
            "latency_ms": self.latency_ms,
            "attempts": self.attempts,
            "error": self.error,
        }


@dataclass
class TestResult:
    """All samples collected for one endpoint, plus their summary."""
    endpoint: str
    requested_count: int
    samples: List[Sample] = field(default_factory=list)
    summary: Optional[Statistics] = None
    partial: bool = False
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    # Not a pytest test class despite the name.
    __test__ = False

    def add_sample(self, sample: Sample) -> None:
        """Append a sample in probe order."""
        if self.is_finalized:
            raise RuntimeError(f"result for {self.endpoint} is already finalized")
        self.samples.append(sample)

    def finalize(self, summary: Statistics, partial: bool = False) -> None:
        """Attach the summary and mark the batch complete."""
        self.summary = summary
        self.partial = partial or len(self.samples) < self.requested_count
        self.finished_at = datetime.now()

    @property
    def is_finalized(self) -> bool:
        return self.summary is not None

    @property
    def latencies(self) -> List[float]:
        """Successful latencies in probe order."""
        return [s.latency_ms for s in self.samples if s.success]

    @property
    def duration(self) -> float:
        """Wall-clock duration of the batch in seconds."""
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def to_dict(self) -> Dict:
        return {
            "endpoint": self.endpoint,
            "requested_count": self.requested_count,
            "partial": self.partial,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "summary": self.summary.to_dict() if self.summary else None,
            "samples": [s.to_dict() for s in self.samples],
        }


class MultiEndpointResult:
    """
    Ordered mapping of endpoint name to TestResult.

    Insertion order is test order. Endpoint keys are unique.
    """

    def __init__(self, results: Optional[List[TestResult]] = None):
        self._results: Dict[str, TestResult] = {}
        for result in results or []:
            self.add(result)

    def add(self, result: TestResult) -> None:
        if result.endpoint in self._results:
            raise InvalidArgumentError(f"duplicate endpoint: {result.endpoint}")
        self._results[result.endpoint] = result

    def endpoints(self) -> List[str]:
        return list(self._results)

    def items(self) -> List[Tuple[str, TestResult]]:
        return list(self._results.items())

    def results(self) -> List[TestResult]:
        return list(self._results.values())

    @property
    def partial(self) -> bool:
        """True if any endpoint batch was cut short."""
        return any(r.partial for r in self._results.values())

    def __getitem__(self, endpoint: str) -> TestResult:
        return self._results[endpoint]

    def __contains__(self, endpoint: object) -> bool:
        return endpoint in self._results

    def __iter__(self) -> Iterator[str]:
        return iter(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __repr__(self) -> str:
        return f"MultiEndpointResult({self.endpoints()!r})"

    def to_dict(self) -> Dict:
        return {endpoint: result.to_dict() for endpoint, result in self._results.items()}
