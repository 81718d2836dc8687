"""In-memory meter adapter."""

import threading
from collections.abc import Sequence

from opentelemetry.context import Context

from metricbind.core.models import (
    Attributes,
    Domain,
    InstrumentKind,
    LeafSpec,
    Measurement,
)


class _InMemoryInstrument:
    """Raw instrument appending every call to its meter."""

    def __init__(self, meter: "InMemoryMeter", identifier: str, spec: LeafSpec) -> None:
        self._meter = meter
        self._identifier = identifier
        self._spec = spec

    def add(
        self, amount: int | float, attributes: Attributes, context: Context | None
    ) -> None:
        self._meter._append(Measurement(self._identifier, self._spec, amount, attributes))

    def record(
        self, amount: int | float, attributes: Attributes, context: Context | None
    ) -> None:
        self._meter._append(Measurement(self._identifier, self._spec, amount, attributes))


class InMemoryMeter:
    """In-memory implementation of MeterPort.

    Keeps every creation request and every measurement in lists. Suitable
    for testing and for checking which attributes a tree attaches.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._measurements: list[Measurement] = []
        self._created: list[tuple[str, LeafSpec, tuple[float, ...]]] = []

    def create_add_instrument(
        self, domain: Domain, kind: InstrumentKind, identifier: str
    ) -> _InMemoryInstrument:
        """Create a counter or up/down counter."""
        spec = LeafSpec(domain, kind)
        with self._lock:
            self._created.append((identifier, spec, ()))
        return _InMemoryInstrument(self, identifier, spec)

    def create_record_instrument(
        self,
        domain: Domain,
        kind: InstrumentKind,
        identifier: str,
        boundaries: Sequence[float],
    ) -> _InMemoryInstrument:
        """Create a gauge or histogram."""
        spec = LeafSpec(domain, kind)
        with self._lock:
            self._created.append((identifier, spec, tuple(boundaries)))
        return _InMemoryInstrument(self, identifier, spec)

    def _append(self, measurement: Measurement) -> None:
        with self._lock:
            self._measurements.append(measurement)

    @property
    def measurements(self) -> list[Measurement]:
        """Snapshot of all measurements, in call order."""
        with self._lock:
            return list(self._measurements)

    @property
    def created(self) -> list[tuple[str, LeafSpec, tuple[float, ...]]]:
        """Snapshot of ``(identifier, spec, boundaries)`` creation requests."""
        with self._lock:
            return list(self._created)

    def for_identifier(self, identifier: str) -> list[Measurement]:
        """Measurements recorded by instruments with the given identifier."""
        return [m for m in self.measurements if m.identifier == identifier]

    def clear(self) -> None:
        """Drop recorded measurements. Creation requests are kept."""
        with self._lock:
            self._measurements.clear()
