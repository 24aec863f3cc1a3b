"""JSON export functionality."""

import json
from datetime import datetime
from typing import Dict, Optional, Union
from pathlib import Path

from ..analysis.aggregator import percentile
from ..analysis.quality import classify
from ..models.quality import ComparisonResult
from ..models.sample import MultiEndpointResult, TestResult

Results = Union[TestResult, MultiEndpointResult]


def as_multi(results: Results) -> MultiEndpointResult:
    """Wrap a single TestResult so exporters handle one shape."""
    if isinstance(results, TestResult):
        return MultiEndpointResult([results])
    return results


def endpoint_record(result: TestResult, include_samples: bool = True) -> Dict:
    """Build the exported record for one endpoint."""
    summary = result.summary
    quality = classify(summary) if summary is not None else None

    record = {
        "endpoint": result.endpoint,
        "requested_count": result.requested_count,
        "sample_count": len(result.samples),
        "partial": result.partial,
        "started_at": result.started_at.isoformat(),
        "finished_at": result.finished_at.isoformat() if result.finished_at else None,
        "duration_s": result.duration,
        "summary": summary.to_dict() if summary else None,
        "p95_latency_ms": percentile(result.latencies, 95),
        "quality": quality.to_dict() if quality else None,
    }
    if include_samples:
        record["samples"] = [s.to_dict() for s in result.samples]
    return record


class JSONExporter:
    """Export test results to JSON format."""

    def __init__(self, output_dir: str = "./reports", indent: int = 2):
        self.output_dir = Path(output_dir)
        self.indent = indent

    def build(
        self,
        results: Results,
        comparison: Optional[ComparisonResult] = None,
        include_samples: bool = True,
    ) -> Dict:
        """Build the JSON-ready document."""
        multi = as_multi(results)
        data = {
            "export_time": datetime.now().isoformat(),
            "partial": multi.partial,
            "endpoints": {
                endpoint: endpoint_record(result, include_samples)
                for endpoint, result in multi.items()
            },
        }
        if comparison is not None:
            data["comparison"] = comparison.to_dict()
        return data

    def to_json(
        self,
        results: Results,
        comparison: Optional[ComparisonResult] = None,
        include_samples: bool = True,
    ) -> str:
        """Serialize results to a JSON string."""
        return json.dumps(self.build(results, comparison, include_samples), indent=self.indent)

    def export(
        self,
        results: Results,
        comparison: Optional[ComparisonResult] = None,
        filename: Optional[str] = None,
    ) -> str:
        """Write results to a JSON file and return its path."""
        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"latency_{timestamp}.json"

        self.output_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.output_dir / filename
        with open(filepath, 'w') as f:
            f.write(self.to_json(results, comparison))

        return str(filepath)
