"""Tests for result export and text summaries."""

import csv
import io
import json
import os

import pytest

from latency_tester.analysis.aggregator import aggregate
from latency_tester.analysis.quality import compare
from latency_tester.errors import InvalidArgumentError
from latency_tester.export import (
    CSVExporter,
    JSONExporter,
    available_formats,
    build_summary,
    export_results,
    register_format,
    write_report,
)
from latency_tester.export import report as report_module
from latency_tester.models.sample import MultiEndpointResult, TestResult


@pytest.fixture
def finished(make_samples):
    def _make(endpoint, latencies, requested=None):
        result = TestResult(endpoint=endpoint, requested_count=requested or len(latencies))
        for sample in make_samples(latencies, endpoint=endpoint):
            result.add_sample(sample)
        result.finalize(aggregate(result.samples))
        return result

    return _make


class TestJSONExport:
    """Test the JSON serialization."""

    def test_single_result(self, finished):
        data = json.loads(export_results(finished("example.com", [10.0, 20.0, 15.0]), "json"))

        record = data["endpoints"]["example.com"]
        assert record["sample_count"] == 3
        assert record["summary"]["avg"] == 15.0
        assert record["summary"]["jitter"] == 7.5
        assert record["quality"]["tier"] == "Good"
        assert len(record["samples"]) == 3
        assert data["partial"] is False

    def test_multi_result_keeps_order_and_comparison(self, finished):
        multi = MultiEndpointResult([
            finished("b", [80.0]),
            finished("a", [None, None]),
            finished("c", [20.0]),
        ])

        data = json.loads(export_results(multi, "json", comparison=compare(multi)))

        assert list(data["endpoints"]) == ["b", "a", "c"]
        assert data["endpoints"]["a"]["summary"]["packet_loss"] == 100.0
        assert data["endpoints"]["a"]["summary"]["avg"] is None
        assert data["endpoints"]["a"]["quality"]["tier"] == "Unknown"
        assert data["comparison"]["best"] == "c"
        assert data["comparison"]["no_data"] == ["a"]

    def test_partial_result_flagged(self, finished):
        data = json.loads(export_results(finished("x", [10.0], requested=5), "json"))

        assert data["partial"] is True
        assert data["endpoints"]["x"]["partial"] is True

    def test_exporter_writes_file(self, finished, tmp_path):
        exporter = JSONExporter(output_dir=str(tmp_path / "out"))

        path = exporter.export(finished("x", [10.0]), filename="result.json")

        with open(path) as f:
            assert json.load(f)["endpoints"]["x"]["sample_count"] == 1

    def test_record_includes_duration(self, finished):
        record = json.loads(export_results(finished("x", [10.0]), "json"))["endpoints"]["x"]

        assert record["duration_s"] >= 0.0

    def test_format_name_case_insensitive(self, finished):
        assert json.loads(export_results(finished("x", [1.0]), "JSON"))


class TestCSVExport:
    """Test the per-sample CSV serialization."""

    def test_one_row_per_sample(self, finished):
        multi = MultiEndpointResult([finished("a", [10.0, None]), finished("b", [5.5])])

        rows = list(csv.DictReader(io.StringIO(export_results(multi, "csv"))))

        assert [(r["endpoint"], r["index"]) for r in rows] == [("a", "0"), ("a", "1"), ("b", "0")]
        assert rows[0]["latency_ms"] == "10.000"
        assert rows[1]["success"] == "False"
        assert rows[1]["latency_ms"] == ""
        assert rows[1]["error"] == "timeout"

    def test_exporter_writes_file(self, finished, tmp_path):
        exporter = CSVExporter(output_dir=str(tmp_path / "out"))

        path = exporter.export(finished("x", [10.0, None]), filename="samples.csv")

        with open(path, newline="") as f:
            rows = list(csv.DictReader(f))
        assert [r["success"] for r in rows] == ["True", "False"]

    def test_default_filename_is_timestamped(self, finished, tmp_path):
        path = CSVExporter(output_dir=str(tmp_path)).export(finished("x", [10.0]))

        assert os.path.basename(path).startswith("latency_samples_")
        assert path.endswith(".csv")


class TestFormatRegistry:
    """Test format lookup and extension."""

    def test_unknown_format(self, finished):
        with pytest.raises(InvalidArgumentError, match="unknown export format"):
            export_results(finished("x", [1.0]), "xml")

    def test_builtin_formats(self):
        assert {"json", "csv", "text"} <= set(available_formats())

    def test_register_new_format(self, finished, monkeypatch):
        monkeypatch.setattr(report_module, "_FORMATS", dict(report_module._FORMATS))
        monkeypatch.setattr(report_module, "_EXTENSIONS", dict(report_module._EXTENSIONS))

        register_format("count", lambda results, comparison: str(len(results.samples)))

        assert export_results(finished("x", [1.0, 2.0]), "count") == "2"

    def test_write_report(self, finished, tmp_path):
        path = write_report(
            finished("x", [1.0]),
            format="text",
            output_dir=str(tmp_path),
            base_filename="summary",
        )

        assert path.endswith("summary.txt")
        with open(path) as f:
            assert "LATENCY TEST SUMMARY" in f.read()


class TestSummary:
    """Test the plain-text summary."""

    def test_summary_contents(self, finished):
        multi = MultiEndpointResult([finished("fast", [10.0, 12.0]), finished("dead", [None])])

        text = build_summary(multi, compare(multi))

        assert "Endpoint: fast" in text
        assert "Duration: " in text
        assert "Packet Loss: 0.00%" in text
        assert "Jitter: 2.00ms" in text
        assert "Quality: Excellent" in text
        assert "Quality: Unknown" in text
        assert "1. fast" in text

    def test_summary_no_data(self, finished):
        text = build_summary(finished("x", [], requested=3))

        assert "Endpoint: x (partial)" in text
        assert "No data" in text
