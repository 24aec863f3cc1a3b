"""Batch probing of one or many endpoints."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence

from ..analysis.aggregator import aggregate
from ..errors import InvalidArgumentError
from ..models.sample import MultiEndpointResult, Sample, TestResult
from .prober import Prober, validate_endpoint, validate_non_negative

logger = logging.getLogger(__name__)

SampleCallback = Callable[[str, Sample, int], None]


def validate_count(count) -> int:
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        raise InvalidArgumentError(f"count must be a positive integer, got {count!r}")
    return count


class BatchRunner:
    """
    Runs fixed-size batches of probes.

    Probes against one endpoint are strictly sequential, separated by
    ``interval_ms`` measured from the end of one probe to the start of the
    next. Cancellation is honoured between probes, never mid-probe.
    """

    def __init__(
        self,
        prober: Prober,
        interval_ms: float = 1000,
        on_sample: Optional[SampleCallback] = None,
    ):
        validate_non_negative("interval_ms", interval_ms)
        self.prober = prober
        self.interval_ms = interval_ms
        self.on_sample = on_sample
        self._cancel = threading.Event()

    def cancel(self) -> None:
        """Request cancellation; running batches stop before their next probe."""
        logger.info("Cancellation requested")
        self._cancel.set()

    def reset(self) -> None:
        """Clear a previous cancellation so the runner can be reused."""
        self._cancel.clear()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def run(
        self,
        endpoint: str,
        count: int,
        interval_ms: Optional[float] = None,
    ) -> TestResult:
        """Probe ``endpoint`` ``count`` times and return the finalized result."""
        endpoint = validate_endpoint(endpoint)
        count = validate_count(count)
        if interval_ms is None:
            interval_ms = self.interval_ms
        validate_non_negative("interval_ms", interval_ms)

        return self._run_batch(endpoint, count, interval_ms)

    def _run_batch(self, endpoint: str, count: int, interval_ms: float) -> TestResult:
        result = TestResult(endpoint=endpoint, requested_count=count)
        interval_s = interval_ms / 1000.0

        logger.info("Batch started: endpoint=%s, count=%d, interval=%sms", endpoint, count, interval_ms)

        for index in range(count):
            if index > 0 and interval_s > 0:
                # Event.wait returns early (True) once cancel() is called
                self._cancel.wait(interval_s)
            if self._cancel.is_set():
                logger.info(
                    "Batch cancelled: endpoint=%s, completed=%d/%d",
                    endpoint, len(result.samples), count,
                )
                break

            sample = self.prober.measure(endpoint)
            result.add_sample(sample)

            if self.on_sample is not None:
                self.on_sample(endpoint, sample, index)

        result.finalize(aggregate(result.samples))

        logger.info(
            "Batch finished: endpoint=%s, samples=%d, loss=%s%%, partial=%s",
            endpoint,
            len(result.samples),
            result.summary.packet_loss,
            result.partial,
        )
        return result

    def run_many(
        self,
        endpoints: Sequence[str],
        tests_per_endpoint: int,
        interval_ms: Optional[float] = None,
        max_workers: int = 1,
    ) -> MultiEndpointResult:
        """
        Run an independent batch for each endpoint.

        Results keep the input order. A dead endpoint only shows up as 100%
        packet loss in its own summary. With ``max_workers > 1`` the batches
        run in parallel threads; each one still probes sequentially.
        """
        names = self._validate_endpoints(endpoints)
        count = validate_count(tests_per_endpoint)
        if interval_ms is None:
            interval_ms = self.interval_ms
        validate_non_negative("interval_ms", interval_ms)
        if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
            raise InvalidArgumentError(f"max_workers must be a positive integer, got {max_workers!r}")

        if max_workers == 1 or len(names) == 1:
            slots = {name: self._run_batch(name, count, interval_ms) for name in names}
        else:
            slots = self._run_parallel(names, count, interval_ms, max_workers)

        return MultiEndpointResult([slots[name] for name in names])

    def _run_parallel(
        self, names: List[str], count: int, interval_ms: float, max_workers: int
    ) -> Dict[str, TestResult]:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="batch") as pool:
            futures = {name: pool.submit(self._run_batch, name, count, interval_ms) for name in names}
            return {name: future.result() for name, future in futures.items()}

    @staticmethod
    def _validate_endpoints(endpoints: Sequence[str]) -> List[str]:
        if isinstance(endpoints, str):
            raise InvalidArgumentError("endpoints must be a sequence of strings, not a string")

        names = [validate_endpoint(e) for e in endpoints]
        if not names:
            raise InvalidArgumentError("at least one endpoint is required")

        seen = set()
        for name in names:
            if name in seen:
                raise InvalidArgumentError(f"duplicate endpoint: {name}")
            seen.add(name)
        return names
