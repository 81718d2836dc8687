"""Port interfaces for metric backends.

These protocols define the contracts a backend must implement. The binder
depends only on these interfaces, not on a concrete metrics library.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from opentelemetry.context import Context

from metricbind.core.models import Attributes, Domain, InstrumentKind


@runtime_checkable
class AddInstrument(Protocol):
    """Raw backend instrument accepting deltas (counters)."""

    def add(
        self, amount: int | float, attributes: Attributes, context: Context | None
    ) -> None:
        """Add a delta with the given attributes."""
        ...


@runtime_checkable
class RecordInstrument(Protocol):
    """Raw backend instrument accepting point-in-time values (gauges, histograms)."""

    def record(
        self, amount: int | float, attributes: Attributes, context: Context | None
    ) -> None:
        """Record a value with the given attributes."""
        ...


@runtime_checkable
class MeterPort(Protocol):
    """Port for instrument creation.

    Adapters implementing this protocol create raw instruments on demand.
    Examples: InMemoryMeter, OpenTelemetryMeter.
    """

    def create_add_instrument(
        self, domain: Domain, kind: InstrumentKind, identifier: str
    ) -> AddInstrument:
        """Create a counter or up/down counter.

        Args:
            domain: Numeric domain of the instrument.
            kind: COUNTER or UP_DOWN_COUNTER.
            identifier: Instrument name.

        Returns:
            A raw instrument accepting add() calls.
        """
        ...

    def create_record_instrument(
        self,
        domain: Domain,
        kind: InstrumentKind,
        identifier: str,
        boundaries: Sequence[float],
    ) -> RecordInstrument:
        """Create a gauge or histogram.

        Args:
            domain: Numeric domain of the instrument.
            kind: GAUGE or HISTOGRAM.
            identifier: Instrument name.
            boundaries: Explicit histogram bucket boundaries. Empty means
                the backend chooses its defaults. Always empty for gauges.

        Returns:
            A raw instrument accepting record() calls.
        """
        ...
