"""Configuration management for latency tester."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from pathlib import Path
import os

import yaml

from .errors import InvalidArgumentError


# Option names as they appear in JSON-style configs, mapped to field names
_ALIASES = {
    "timeoutMs": "timeout_ms",
    "intervalMs": "interval_ms",
    "testsPerEndpoint": "count",
    "tests_per_endpoint": "count",
}


@dataclass
class TransportConfig:
    """Probe transport configuration."""
    method: str = "HEAD"
    verify_tls: bool = True
    simulate: bool = False  # use SimulatedTransport instead of HTTP


@dataclass
class ExportConfig:
    """Export configuration."""
    format: str = "json"  # json, csv, text
    output_dir: str = "./reports"


@dataclass
class TesterConfig:
    """Main configuration container."""
    timeout_ms: float = 5000
    retries: int = 3
    interval_ms: float = 1000
    count: int = 10
    max_workers: int = 1
    transport: TransportConfig = field(default_factory=TransportConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TesterConfig":
        """Create config from dictionary. Unknown keys are ignored."""
        data = {_ALIASES.get(k, k): v for k, v in (data or {}).items()}
        config = cls()

        config.timeout_ms = data.get("timeout_ms", config.timeout_ms)
        config.retries = data.get("retries", config.retries)
        config.interval_ms = data.get("interval_ms", config.interval_ms)
        config.count = data.get("count", config.count)
        config.max_workers = data.get("max_workers", config.max_workers)

        if "transport" in data:
            tr = data["transport"] or {}
            config.transport = TransportConfig(
                method=tr.get("method", "HEAD"),
                verify_tls=tr.get("verify_tls", True),
                simulate=tr.get("simulate", False),
            )

        if "export" in data:
            exp = data["export"] or {}
            config.export = ExportConfig(
                format=exp.get("format", "json"),
                output_dir=exp.get("output_dir", "./reports"),
            )

        return config

    @classmethod
    def from_yaml(cls, path: str) -> "TesterConfig":
        """Load config from YAML file."""
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        if data is not None and not isinstance(data, dict):
            raise InvalidArgumentError(f"config file {path} must contain a mapping")
        return cls.from_dict(data or {})

    @classmethod
    def load(cls, path: Optional[str] = None) -> "TesterConfig":
        """Load config from file or use defaults."""
        if path and not os.path.exists(path):
            raise InvalidArgumentError(f"config file not found: {path}")

        search_paths = [
            path,
            "latency-tester.yaml",
            "latency-tester.yml",
            os.path.expanduser("~/.config/latency-tester/config.yaml"),
        ]

        for config_path in search_paths:
            if config_path and os.path.exists(config_path):
                return cls.from_yaml(config_path)

        return cls()

    def validate(self) -> "TesterConfig":
        """Raise InvalidArgumentError for out-of-range values."""
        for name in ("timeout_ms", "interval_ms"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                raise InvalidArgumentError(f"{name} must be a non-negative number, got {value!r}")

        for name, minimum in (("retries", 0), ("count", 1), ("max_workers", 1)):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
                raise InvalidArgumentError(f"{name} must be an integer >= {minimum}, got {value!r}")

        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "timeout_ms": self.timeout_ms,
            "retries": self.retries,
            "interval_ms": self.interval_ms,
            "count": self.count,
            "max_workers": self.max_workers,
            "transport": {
                "method": self.transport.method,
                "verify_tls": self.transport.verify_tls,
                "simulate": self.transport.simulate,
            },
            "export": {
                "format": self.export.format,
                "output_dir": self.export.output_dir,
            },
        }

    def save_yaml(self, path: str) -> None:
        """Save config to YAML file."""
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)
