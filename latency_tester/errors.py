"""Exception types for latency tester."""


class LatencyTesterError(Exception):
    """Base class for all latency tester errors."""


class InvalidArgumentError(LatencyTesterError, ValueError):
    """A usage or configuration value is malformed.

    Raised synchronously, before any network activity takes place.
    """


class ProbeError(LatencyTesterError):
    """A single probe attempt failed (timeout, connection or server error).

    Never escapes the Prober: the final outcome is recorded as a failed sample.
    """
