"""Command-line interface for latency tester."""

import argparse
import logging
import signal
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text
from rich import box

from . import __version__
from .analysis.quality import QualityAnalyzer
from .config import TesterConfig
from .errors import InvalidArgumentError
from .export.report import available_formats, write_report
from .logging_config import configure_logging
from .models.quality import ComparisonResult, QualityTier
from .models.sample import MultiEndpointResult, Sample
from .probing.prober import Prober
from .probing.runner import BatchRunner
from .probing.transport import HttpTransport, SimulatedTransport

logger = logging.getLogger(__name__)

console = Console()

TIER_STYLES = {
    QualityTier.EXCELLENT: "bold green",
    QualityTier.GOOD: "green",
    QualityTier.FAIR: "yellow",
    QualityTier.POOR: "red",
    QualityTier.UNKNOWN: "dim",
}


class TesterApp:
    """Main application coordinator."""

    def __init__(self, config: Optional[TesterConfig] = None, show_progress: bool = True):
        self.config = (config or TesterConfig()).validate()
        self.analyzer = QualityAnalyzer()

        if self.config.transport.simulate:
            self.transport = SimulatedTransport()
        else:
            self.transport = HttpTransport(
                method=self.config.transport.method,
                verify_tls=self.config.transport.verify_tls,
            )

        self.prober = Prober(
            self.transport,
            timeout_ms=self.config.timeout_ms,
            retries=self.config.retries,
        )
        self.runner = BatchRunner(
            self.prober,
            interval_ms=self.config.interval_ms,
            on_sample=self._print_sample if show_progress else None,
        )

    def run(self, endpoints: List[str]) -> MultiEndpointResult:
        """Run a batch for every endpoint."""
        return self.runner.run_many(
            endpoints,
            self.config.count,
            max_workers=self.config.max_workers,
        )

    def stop(self) -> None:
        """Cancel between probes; collected samples are kept."""
        self.runner.cancel()

    def close(self) -> None:
        if isinstance(self.transport, HttpTransport):
            self.transport.close()

    @staticmethod
    def _print_sample(endpoint: str, sample: Sample, index: int) -> None:
        if sample.success:
            console.print(f"[dim]{endpoint} #{index + 1}: {sample.latency_ms:.2f} ms[/dim]")
        else:
            console.print(f"[dim]{endpoint} #{index + 1}:[/dim] [red]failed ({sample.error})[/red]")

    def get_stats_table(self, results: MultiEndpointResult) -> Table:
        """Create Rich table with per-endpoint statistics."""
        table = Table(
            title="Endpoint Latency Statistics",
            box=box.ROUNDED,
            show_header=True,
            header_style="bold cyan",
        )

        table.add_column("Endpoint", style="bold")
        table.add_column("Samples", justify="right")
        table.add_column("Avg", justify="right")
        table.add_column("Min", justify="right")
        table.add_column("Max", justify="right")
        table.add_column("Jitter", justify="right")
        table.add_column("Loss %", justify="right")
        table.add_column("Quality", justify="right")

        for endpoint, result in results.items():
            stats = result.summary
            report = self.analyzer.classify(stats)

            samples = f"{len(result.samples)}/{result.requested_count}"
            if stats.is_no_data:
                table.add_row(endpoint, samples, "-", "-", "-", "-", "-", Text("No data", style="dim"))
                continue

            loss = stats.packet_loss
            if loss == 0:
                loss_style = "green"
            elif loss < 5:
                loss_style = "yellow"
            else:
                loss_style = "red"

            def ms(value):
                return f"{value:.2f} ms" if value is not None else "-"

            table.add_row(
                endpoint,
                samples,
                ms(stats.avg),
                ms(stats.min),
                ms(stats.max),
                ms(stats.jitter),
                Text(f"{loss:.2f}%", style=loss_style),
                Text(report.tier.value, style=TIER_STYLES[report.tier]),
            )

        return table

    def get_comparison_panel(self, comparison: ComparisonResult) -> Panel:
        """Create ranking panel for a multi-endpoint run."""
        if comparison.is_no_data:
            content = Text("No endpoint answered any probe.", style="red")
            return Panel(content, title="Endpoint Ranking", border_style="red")

        lines = []
        for entry in comparison.ranking:
            style = "bold green" if entry.endpoint == comparison.best else "white"
            lines.append(
                Text(f"{entry.position}. {entry.endpoint:30}", style=style)
                + Text(f"{entry.avg:8.2f} ms  ")
                + Text(f"{entry.packet_loss:6.2f}%  ")
                + Text(entry.tier.value, style=TIER_STYLES[entry.tier])
            )
        for endpoint in comparison.no_data:
            lines.append(Text(f"-  {endpoint:30}unreachable", style="dim"))

        lines.append(Text(""))
        lines.append(Text(comparison.recommendation, style="cyan"))

        return Panel(Text("\n").join(lines), title="Endpoint Ranking", border_style="cyan")


def build_config(args) -> TesterConfig:
    """Load config file and apply command-line overrides."""
    config = TesterConfig.load(args.config)

    if args.count is not None:
        config.count = args.count
    if args.interval is not None:
        config.interval_ms = args.interval
    if args.timeout is not None:
        config.timeout_ms = args.timeout
    if args.retries is not None:
        config.retries = args.retries
    if getattr(args, "parallel", None) is not None:
        config.max_workers = args.parallel
    if args.simulate:
        config.transport.simulate = True
    if args.method:
        config.transport.method = args.method
    if args.export:
        config.export.format = args.export
    if args.output:
        config.export.output_dir = args.output

    return config


def run_endpoints(args, endpoints: List[str]) -> int:
    """Run tests against endpoints, print results and optionally export."""
    config = build_config(args)
    app = TesterApp(config, show_progress=not args.quiet)

    # Signal handler for graceful cancellation between probes
    def signal_handler(sig, frame):
        console.print("\n[yellow]Stopping after current probe...[/yellow]")
        app.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    console.print(
        f"[green]Testing {', '.join(endpoints)}: {config.count} probes each, "
        f"interval {config.interval_ms:g}ms, timeout {config.timeout_ms:g}ms[/green]"
    )

    try:
        results = app.run(endpoints)
    finally:
        app.close()

    if results.partial:
        console.print("[yellow]Run cancelled: statistics cover the samples collected so far.[/yellow]")

    console.print()
    console.print(app.get_stats_table(results))

    comparison = None
    if len(results) > 1:
        comparison = app.analyzer.compare(results)
        console.print(app.get_comparison_panel(comparison))
    else:
        report = app.analyzer.classify(results.results()[0].summary)
        console.print(f"[cyan]Recommendation:[/cyan] {report.recommendation}")

    if args.export or args.output:
        path = write_report(
            results,
            format=config.export.format,
            output_dir=config.export.output_dir,
            comparison=comparison,
        )
        console.print(f"[bold green]Report written:[/bold green] {path}")

    if all(not r.summary.has_latency for r in results.results()):
        return 1
    return 0


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-n", "--count", type=int, help="Probes per endpoint (default: 10)")
    parser.add_argument("-i", "--interval", type=float, help="Delay between probes in ms (default: 1000)")
    parser.add_argument("-t", "--timeout", type=float, help="Per-probe timeout in ms (default: 5000)")
    parser.add_argument("-r", "--retries", type=int, help="Retries before a probe counts as failed (default: 3)")
    parser.add_argument("-m", "--method", help="HTTP method used for probes (default: HEAD)")
    parser.add_argument("-c", "--config", help="Path to configuration file")
    parser.add_argument("--simulate", action="store_true", help="Use simulated round trips instead of HTTP")
    parser.add_argument("--export", choices=available_formats(), help="Export results in this format")
    parser.add_argument("-o", "--output", help="Output directory for exported reports")
    parser.add_argument("-q", "--quiet", action="store_true", help="Do not print every probe")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable INFO logging")


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="latency-tester",
        description="Measure endpoint latency, jitter and packet loss, and grade connection quality.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    test_parser = subparsers.add_parser("test", help="Test a single endpoint")
    test_parser.add_argument("endpoint", help="Host name or URL to probe")
    add_common_arguments(test_parser)

    compare_parser = subparsers.add_parser("compare", help="Test and rank several endpoints")
    compare_parser.add_argument("endpoints", nargs="+", help="Host names or URLs to probe")
    compare_parser.add_argument("-p", "--parallel", type=int, help="Endpoints tested at once (default: 1)")
    add_common_arguments(compare_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    configure_logging("INFO" if args.verbose else None)

    endpoints = [args.endpoint] if args.command == "test" else args.endpoints

    try:
        exit_code = run_endpoints(args, endpoints)
    except InvalidArgumentError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(2)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
