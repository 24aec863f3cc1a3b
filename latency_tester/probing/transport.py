"""Probe transports: the collaborators that actually send a request."""

import logging
import random
import time
from typing import Callable, Optional, Protocol

import requests

from ..errors import ProbeError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Protocol defining the interface for probe transports.

    ``send`` returns once the endpoint has answered and raises on timeout or
    any other failure. Timing is measured by the caller.
    """

    def send(self, endpoint: str, timeout_s: float) -> None:
        ...


class HttpTransport:
    """Transport that issues one HTTP request per probe using requests.

    Any response proves the endpoint answered, except a server error (5xx),
    which counts as a failed probe.
    """

    def __init__(
        self,
        method: str = "HEAD",
        verify_tls: bool = True,
        session: Optional[requests.Session] = None,
    ):
        self.method = method.upper()
        self.verify_tls = verify_tls
        self._session = session or requests.Session()

    @staticmethod
    def normalize_url(endpoint: str) -> str:
        """Prepend http:// when the endpoint has no scheme."""
        endpoint = endpoint.strip()
        if "://" not in endpoint:
            return f"http://{endpoint}"
        return endpoint

    def send(self, endpoint: str, timeout_s: float) -> None:
        url = self.normalize_url(endpoint)
        try:
            response = self._session.request(
                self.method,
                url,
                timeout=timeout_s,
                verify=self.verify_tls,
                allow_redirects=False,
            )
        except requests.Timeout as e:
            raise ProbeError(f"timeout after {timeout_s:.3f}s") from e
        except requests.RequestException as e:
            raise ProbeError(f"request failed: {e}") from e

        if response.status_code >= 500:
            raise ProbeError(f"server error: HTTP {response.status_code}")

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class SimulatedTransport:
    """Generates fake round trips for dry runs and testing."""

    def __init__(
        self,
        seed: Optional[int] = None,
        base_latency_ms: float = 25.0,
        latency_variance_ms: float = 5.0,
        loss_probability: float = 0.02,
        sleep: Callable[[float], None] = time.sleep,
    ):
        # Per-instance generator, reproducible from seed
        self._random = random.Random(seed)
        self.base_latency_ms = base_latency_ms
        self.latency_variance_ms = latency_variance_ms
        self.loss_probability = loss_probability
        self._sleep = sleep

    def send(self, endpoint: str, timeout_s: float) -> None:
        if self._random.random() < self.loss_probability:
            self._sleep(timeout_s)
            raise ProbeError("simulated packet loss")

        latency_ms = max(0.1, self._random.gauss(self.base_latency_ms, self.latency_variance_ms))
        if latency_ms / 1000.0 > timeout_s:
            self._sleep(timeout_s)
            raise ProbeError(f"timeout after {timeout_s:.3f}s")

        self._sleep(latency_ms / 1000.0)


class CallableTransport:
    """Adapter that implements Transport with a plain function."""

    def __init__(self, func: Callable[[str, float], None]):
        self._func = func

    def send(self, endpoint: str, timeout_s: float) -> None:
        self._func(endpoint, timeout_s)
