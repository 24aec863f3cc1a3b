"""Aggregate statistics data structures."""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional


class DataStatus(Enum):
    """Whether a derived value had any samples to work from."""
    OK = "ok"
    NO_DATA = "no_data"


@dataclass(frozen=True)
class Statistics:
    """
    Summary of one batch of probes.

    Latency figures cover successful samples only. When every sample failed
    they are None and packet_loss is 100. When there were no samples at all
    the status is NO_DATA and packet_loss is None as well.
    """
    avg: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    jitter: Optional[float] = None
    packet_loss: Optional[float] = None

    total: int = 0
    successful: int = 0
    failed: int = 0

    status: DataStatus = DataStatus.NO_DATA

    @classmethod
    def no_data(cls) -> "Statistics":
        """Statistics for an empty sample set."""
        return cls(status=DataStatus.NO_DATA)

    @property
    def is_no_data(self) -> bool:
        return self.status is DataStatus.NO_DATA

    @property
    def has_latency(self) -> bool:
        """True if at least one probe succeeded."""
        return self.avg is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary."""
        data = asdict(self)
        data["status"] = self.status.value
        return data
