"""Meter adapters implementing core ports."""

from metricbind.adapters.in_memory import InMemoryMeter
from metricbind.adapters.opentelemetry import OpenTelemetryMeter

__all__ = [
    "InMemoryMeter",
    "OpenTelemetryMeter",
]
