"""Shared fixtures: a manual clock and a scripted transport."""

from datetime import datetime, timedelta

import pytest

from latency_tester.errors import ProbeError
from latency_tester.models.sample import Sample
from latency_tester.probing.prober import Prober


class FakeClock:
    """Monotonic clock that only moves when told to (seconds)."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000.0


class ScriptedTransport:
    """Transport that replays a script of outcomes per call.

    Each outcome is either a latency in ms (the clock advances by it and the
    call succeeds) or an exception instance (raised). Once the script runs
    out, ``default`` is replayed.
    """

    def __init__(self, clock: FakeClock, outcomes=None, default=None):
        self.clock = clock
        self.outcomes = list(outcomes or [])
        self.default = default
        self.calls = []

    def send(self, endpoint: str, timeout_s: float) -> None:
        self.calls.append((endpoint, timeout_s))
        outcome = self.outcomes.pop(0) if self.outcomes else self.default
        if isinstance(outcome, BaseException):
            raise outcome
        self.clock.advance_ms(outcome)


class PerEndpointTransport:
    """Transport whose behaviour depends on the endpoint name."""

    def __init__(self, clock: FakeClock, behaviour):
        self.clock = clock
        self.behaviour = behaviour  # endpoint -> latency ms, or None to fail
        self.calls = []

    def send(self, endpoint: str, timeout_s: float) -> None:
        self.calls.append(endpoint)
        latency = self.behaviour[endpoint]
        if latency is None:
            raise ProbeError("connection refused")
        self.clock.advance_ms(latency)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_prober(clock):
    """Build a Prober over a ScriptedTransport sharing the fake clock."""

    def _make(outcomes=None, default=10.0, retries=0, timeout_ms=1000):
        transport = ScriptedTransport(clock, outcomes, default)
        prober = Prober(transport, timeout_ms=timeout_ms, retries=retries, clock=clock)
        return prober, transport

    return _make


@pytest.fixture
def per_endpoint_prober(clock):
    def _make(behaviour, retries=0):
        transport = PerEndpointTransport(clock, behaviour)
        return Prober(transport, timeout_ms=1000, retries=retries, clock=clock), transport

    return _make


@pytest.fixture
def make_samples():
    """Build samples from latencies; None marks a failed probe."""

    def _make(latencies, endpoint="example.com"):
        base = datetime(2024, 1, 1, 12, 0, 0)
        samples = []
        for i, latency in enumerate(latencies):
            ts = base + timedelta(seconds=i)
            if latency is None:
                samples.append(Sample.failed(endpoint, error="timeout", timestamp=ts))
            else:
                samples.append(Sample.ok(endpoint, latency, timestamp=ts))
        return samples

    return _make
