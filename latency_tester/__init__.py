"""
Latency Tester - Endpoint Latency and Quality Measurement Tool

Measures round-trip latency to network endpoints, aggregates repeated
probes into average, jitter and packet loss, and grades the connection
quality of each endpoint.
"""

__version__ = "1.0.0"
__author__ = "Network Team"
