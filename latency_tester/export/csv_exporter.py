"""CSV export functionality."""

import csv
import io
from datetime import datetime
from typing import Optional
from pathlib import Path

from .json_exporter import Results, as_multi

SAMPLE_COLUMNS = [
    "endpoint",
    "index",
    "timestamp",
    "success",
    "latency_ms",
    "attempts",
    "error",
]


class CSVExporter:
    """Export raw samples to CSV, one row per probe, for spreadsheet analysis."""

    def __init__(self, output_dir: str = "./reports"):
        self.output_dir = Path(output_dir)

    def to_csv(self, results: Results) -> str:
        """Serialize samples of every endpoint to a CSV string."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(SAMPLE_COLUMNS)

        for endpoint, result in as_multi(results).items():
            for index, sample in enumerate(result.samples):
                writer.writerow([
                    endpoint,
                    index,
                    sample.timestamp.isoformat(),
                    sample.success,
                    f"{sample.latency_ms:.3f}" if sample.success else "",
                    sample.attempts,
                    sample.error or "",
                ])

        return buffer.getvalue()

    def export(self, results: Results, filename: Optional[str] = None) -> str:
        """Write samples to a CSV file and return its path."""
        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"latency_samples_{timestamp}.csv"

        self.output_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.output_dir / filename
        with open(filepath, 'w', newline='') as f:
            f.write(self.to_csv(results))

        return str(filepath)
