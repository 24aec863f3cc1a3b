"""Probing: transports, the single-probe Prober and the BatchRunner."""

from .transport import Transport, HttpTransport, SimulatedTransport, CallableTransport
from .prober import Prober
from .runner import BatchRunner

__all__ = [
    "Transport",
    "HttpTransport",
    "SimulatedTransport",
    "CallableTransport",
    "Prober",
    "BatchRunner",
]
