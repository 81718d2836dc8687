"""OpenTelemetry meter adapter.

Creates instruments through an ``opentelemetry.metrics.Meter``. Which SDK,
readers and exporters sit behind that meter is the application's choice
(see ``metricbind.adapters.prometheus`` for a ready-made setup).
"""

from collections.abc import Sequence
from typing import Any

from opentelemetry import metrics
from opentelemetry.context import Context

from metricbind.core.models import Attributes, Domain, InstrumentKind


def _to_mapping(attributes: Attributes) -> dict[str, str]:
    """Convert ordered attributes to an OpenTelemetry attribute mapping.

    Later duplicates override earlier ones, so call-site attributes win over
    the ones baked into a handle.
    """
    return {key: value for key, value in attributes}


class _OTelAdd:
    def __init__(self, instrument: Any) -> None:
        self._instrument = instrument

    def add(
        self, amount: int | float, attributes: Attributes, context: Context | None
    ) -> None:
        self._instrument.add(amount, attributes=_to_mapping(attributes), context=context)


class _OTelRecord:
    def __init__(self, instrument: Any) -> None:
        self._instrument = instrument

    def record(
        self, amount: int | float, attributes: Attributes, context: Context | None
    ) -> None:
        self._instrument.record(
            amount, attributes=_to_mapping(attributes), context=context
        )


class _OTelGauge:
    """Synchronous gauges expose set() rather than record()."""

    def __init__(self, instrument: Any) -> None:
        self._instrument = instrument

    def record(
        self, amount: int | float, attributes: Attributes, context: Context | None
    ) -> None:
        self._instrument.set(amount, attributes=_to_mapping(attributes), context=context)


class OpenTelemetryMeter:
    """MeterPort implementation on top of an OpenTelemetry Meter.

    Example:
        ```python
        from opentelemetry import metrics

        meter = OpenTelemetryMeter(metrics.get_meter("checkout"))
        samplers = bind(Samplers, meter=meter)
        ```
    """

    def __init__(self, meter: metrics.Meter) -> None:
        """Wrap an OpenTelemetry meter.

        Args:
            meter: Meter obtained from a MeterProvider.
        """
        self._meter = meter

    @classmethod
    def from_global(cls, name: str, version: str | None = None) -> "OpenTelemetryMeter":
        """Wrap the meter of the globally configured MeterProvider."""
        return cls(metrics.get_meter(name, version))

    @property
    def meter(self) -> metrics.Meter:
        """The wrapped OpenTelemetry meter."""
        return self._meter

    def create_add_instrument(
        self, domain: Domain, kind: InstrumentKind, identifier: str
    ) -> _OTelAdd:
        """Create a Counter or UpDownCounter."""
        if kind is InstrumentKind.COUNTER:
            return _OTelAdd(self._meter.create_counter(identifier))
        if kind is InstrumentKind.UP_DOWN_COUNTER:
            return _OTelAdd(self._meter.create_up_down_counter(identifier))
        raise ValueError(f"{kind.value} is not an adding instrument")

    def create_record_instrument(
        self,
        domain: Domain,
        kind: InstrumentKind,
        identifier: str,
        boundaries: Sequence[float],
    ) -> _OTelRecord | _OTelGauge:
        """Create a Gauge or Histogram.

        Non-empty boundaries are passed as the histogram's explicit bucket
        boundaries advisory; empty ones leave the SDK defaults in place.
        """
        if kind is InstrumentKind.GAUGE:
            return _OTelGauge(self._meter.create_gauge(identifier))
        if kind is InstrumentKind.HISTOGRAM:
            advisory = list(boundaries) if boundaries else None
            return _OTelRecord(
                self._meter.create_histogram(
                    identifier, explicit_bucket_boundaries_advisory=advisory
                )
            )
        raise ValueError(f"{kind.value} is not a recording instrument")
