"""Unified export entry point and plain-text summary."""

from datetime import datetime
from typing import Callable, Dict, List, Optional
from pathlib import Path

from ..analysis.aggregator import percentile
from ..analysis.quality import classify
from ..errors import InvalidArgumentError
from ..models.quality import ComparisonResult
from .csv_exporter import CSVExporter
from .json_exporter import JSONExporter, Results, as_multi

Formatter = Callable[[Results, Optional[ComparisonResult]], str]

_FORMATS: Dict[str, Formatter] = {}
_EXTENSIONS: Dict[str, str] = {}


def register_format(name: str, formatter: Formatter, extension: Optional[str] = None) -> None:
    """Register a serializer under ``name`` (case-insensitive)."""
    key = name.lower()
    _FORMATS[key] = formatter
    _EXTENSIONS[key] = extension or key


def available_formats() -> List[str]:
    return sorted(_FORMATS)


def export_results(
    results: Results,
    format: str = "json",
    comparison: Optional[ComparisonResult] = None,
) -> str:
    """Serialize results to text in the requested format."""
    formatter = _FORMATS.get(format.lower())
    if formatter is None:
        raise InvalidArgumentError(
            f"unknown export format {format!r}; available: {', '.join(available_formats())}"
        )
    return formatter(results, comparison)


def write_report(
    results: Results,
    format: str = "json",
    output_dir: str = "./reports",
    comparison: Optional[ComparisonResult] = None,
    base_filename: Optional[str] = None,
) -> str:
    """Export results and write them to ``output_dir``. Returns the file path."""
    content = export_results(results, format, comparison)

    if base_filename is None:
        base_filename = f"latency_report_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    filepath = directory / f"{base_filename}.{_EXTENSIONS[format.lower()]}"
    with open(filepath, 'w', newline='') as f:
        f.write(content)

    return str(filepath)


def build_summary(results: Results, comparison: Optional[ComparisonResult] = None) -> str:
    """Generate a quick text summary for console output or logs."""
    lines = [
        "=" * 60,
        "LATENCY TEST SUMMARY",
        "=" * 60,
        f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "",
    ]

    for endpoint, result in as_multi(results).items():
        stats = result.summary
        lines.append(f"Endpoint: {endpoint}{' (partial)' if result.partial else ''}")

        if stats is None or stats.is_no_data:
            lines.extend(["  No data: no probes were run.", ""])
            continue

        report = classify(stats)
        lines.append(f"  Samples: {stats.total} ({stats.failed} failed)")
        lines.append(f"  Duration: {result.duration:.2f}s")
        lines.append(f"  Packet Loss: {stats.packet_loss:.2f}%")
        if stats.has_latency:
            p95 = percentile(result.latencies, 95)
            lines.append(
                f"  Latency: avg {stats.avg:.2f}ms, min {stats.min:.2f}ms, "
                f"max {stats.max:.2f}ms (P95: {p95:.2f}ms)"
            )
            lines.append(f"  Jitter: {stats.jitter:.2f}ms")
        lines.append(f"  Quality: {report.tier.value}")
        lines.append(f"  Recommendation: {report.recommendation}")
        lines.append("")

    if comparison is not None:
        lines.extend(["-" * 60, "COMPARISON RESULT", "-" * 60])
        if comparison.is_no_data:
            lines.append("  No endpoint answered any probe.")
        for entry in comparison.ranking:
            lines.append(
                f"  {entry.position}. {entry.endpoint}: {entry.avg:.2f}ms, "
                f"loss {entry.packet_loss:.2f}%, {entry.tier.value}"
            )
        lines.append("")
        lines.append(f"  Recommendation: {comparison.recommendation}")

    lines.append("=" * 60)
    return "\n".join(lines)


register_format("json", lambda results, comparison: JSONExporter().to_json(results, comparison))
register_format("csv", lambda results, comparison: CSVExporter().to_csv(results))
register_format("text", build_summary, extension="txt")
