"""Tests for configuration loading and validation."""

import pytest
import yaml

from latency_tester.config import TesterConfig
from latency_tester.errors import InvalidArgumentError


class TestFromDict:
    """Test dictionary-based configuration."""

    def test_defaults(self):
        config = TesterConfig.from_dict({})

        assert config.timeout_ms == 5000
        assert config.retries == 3
        assert config.interval_ms == 1000
        assert config.count == 10
        assert config.transport.method == "HEAD"
        assert config.export.format == "json"

    def test_camel_case_option_names(self):
        config = TesterConfig.from_dict({"timeoutMs": 200, "retries": 1, "intervalMs": 50})

        assert config.timeout_ms == 200
        assert config.retries == 1
        assert config.interval_ms == 50

    def test_unknown_options_ignored(self):
        config = TesterConfig.from_dict({"colour": "blue", "retries": 5})

        assert config.retries == 5
        assert not hasattr(config, "colour")

    def test_partial_options_fall_back_to_defaults(self):
        config = TesterConfig.from_dict({"timeout_ms": 750})

        assert config.timeout_ms == 750
        assert config.retries == 3
        assert config.interval_ms == 1000

    def test_nested_sections(self):
        config = TesterConfig.from_dict({
            "transport": {"method": "GET", "simulate": True},
            "export": {"format": "csv"},
        })

        assert config.transport.method == "GET"
        assert config.transport.simulate is True
        assert config.transport.verify_tls is True
        assert config.export.format == "csv"
        assert config.export.output_dir == "./reports"

    def test_none_is_defaults(self):
        assert TesterConfig.from_dict(None).to_dict() == TesterConfig().to_dict()


class TestValidate:
    """Test validation of option ranges."""

    @pytest.mark.parametrize("data", [
        {"timeout_ms": -1},
        {"interval_ms": -0.5},
        {"retries": -1},
        {"count": 0},
        {"count": 2.5},
        {"max_workers": 0},
        {"timeout_ms": "fast"},
    ])
    def test_invalid_values(self, data):
        with pytest.raises(InvalidArgumentError):
            TesterConfig.from_dict(data).validate()

    def test_valid_returns_self(self):
        config = TesterConfig()
        assert config.validate() is config


class TestYaml:
    """Test YAML file loading and saving."""

    def test_round_trip_through_file(self, tmp_path):
        path = tmp_path / "conf" / "latency-tester.yaml"
        config = TesterConfig.from_dict({"timeout_ms": 300, "transport": {"method": "GET"}})

        config.save_yaml(str(path))
        loaded = TesterConfig.from_yaml(str(path))

        assert loaded.to_dict() == config.to_dict()

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert TesterConfig.from_yaml(str(path)).timeout_ms == 5000

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text(yaml.dump([1, 2, 3]))

        with pytest.raises(InvalidArgumentError):
            TesterConfig.from_yaml(str(path))

    def test_load_missing_explicit_path(self, tmp_path):
        with pytest.raises(InvalidArgumentError, match="not found"):
            TesterConfig.load(str(tmp_path / "missing.yaml"))

    def test_load_searches_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / "latency-tester.yaml").write_text("retries: 7\n")
        monkeypatch.chdir(tmp_path)

        assert TesterConfig.load().retries == 7

    def test_load_without_files_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))

        assert TesterConfig.load().to_dict() == TesterConfig().to_dict()
