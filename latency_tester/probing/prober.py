"""Single timed probe with retries."""

import logging
import time
from datetime import datetime
from typing import Callable, Optional

from ..errors import InvalidArgumentError, ProbeError
from ..models.sample import Sample
from .transport import Transport

logger = logging.getLogger(__name__)

# Smallest latency recorded for an answer the clock could not resolve
MIN_LATENCY_MS = 0.001


def validate_endpoint(endpoint: str) -> str:
    """Return the stripped endpoint, or raise if it is empty."""
    if not isinstance(endpoint, str) or not endpoint.strip():
        raise InvalidArgumentError("endpoint cannot be empty")
    return endpoint.strip()


def validate_non_negative(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise InvalidArgumentError(f"{name} must be a non-negative number, got {value!r}")


class Prober:
    """
    Issues one timed request to an endpoint.

    A failed attempt is retried up to ``retries`` more times. Only the final
    outcome is recorded, and a successful retry reports its own round trip,
    not the time spent on earlier attempts. Probe failures never propagate:
    they come back as a Sample with success=False.
    """

    def __init__(
        self,
        transport: Transport,
        timeout_ms: float = 5000,
        retries: int = 3,
        clock: Callable[[], float] = time.perf_counter,
    ):
        validate_non_negative("timeout_ms", timeout_ms)
        if isinstance(retries, bool) or not isinstance(retries, int) or retries < 0:
            raise InvalidArgumentError(f"retries must be a non-negative integer, got {retries!r}")

        self.transport = transport
        self.timeout_ms = timeout_ms
        self.retries = retries
        self._clock = clock

    def measure(self, endpoint: str, timeout_ms: Optional[float] = None) -> Sample:
        """Probe the endpoint once (with retries) and return the outcome."""
        endpoint = validate_endpoint(endpoint)
        if timeout_ms is None:
            timeout_ms = self.timeout_ms
        validate_non_negative("timeout_ms", timeout_ms)

        timeout_s = timeout_ms / 1000.0
        timestamp = datetime.now()
        attempts = self.retries + 1
        last_error = None

        for attempt in range(1, attempts + 1):
            start = self._clock()
            try:
                self.transport.send(endpoint, timeout_s)
            except ProbeError as e:
                last_error = str(e)
                logger.debug(
                    "Probe attempt failed: endpoint=%s, attempt=%d/%d, error=%s",
                    endpoint, attempt, attempts, e,
                )
                continue
            except Exception as e:
                # Recorded like a ProbeError, with the exception type
                last_error = f"{type(e).__name__}: {e}"
                logger.warning(
                    "Probe transport error: endpoint=%s, attempt=%d/%d, error=%s",
                    endpoint, attempt, attempts, e, exc_info=True,
                )
                continue

            elapsed_ms = max((self._clock() - start) * 1000.0, MIN_LATENCY_MS)
            if elapsed_ms > timeout_ms:
                last_error = f"response after {elapsed_ms:.1f}ms exceeded timeout"
                logger.debug(
                    "Probe attempt too slow: endpoint=%s, attempt=%d/%d, elapsed=%.2fms",
                    endpoint, attempt, attempts, elapsed_ms,
                )
                continue

            logger.debug(
                "Probe succeeded: endpoint=%s, attempt=%d, latency=%.2fms",
                endpoint, attempt, elapsed_ms,
            )
            return Sample.ok(endpoint, elapsed_ms, attempts=attempt, timestamp=timestamp)

        logger.info("Probe failed: endpoint=%s, attempts=%d, error=%s", endpoint, attempts, last_error)
        return Sample.failed(endpoint, error=last_error, attempts=attempts, timestamp=timestamp)
