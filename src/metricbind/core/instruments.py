"""Instrument leaf types and the handles bound into them.

A blueprint declares leaves by annotating fields with one of the eight leaf
types below. Binding replaces each leaf with a handle: an ``AddHandle`` or
``RecordHandle`` wrapping a backend instrument, or a ``NoopHandle`` when no
backend is configured.
"""

from collections.abc import Iterable
from typing import Generic, Protocol, TypeVar, runtime_checkable

from opentelemetry.context import Context

from metricbind.core.models import Attribute, Attributes, Domain, InstrumentKind, LeafSpec
from metricbind.core.ports import AddInstrument, RecordInstrument

N = TypeVar("N", int, float)
N_contra = TypeVar("N_contra", int, float, contravariant=True)


@runtime_checkable
class Adder(Protocol[N_contra]):
    """Capability of counter-like leaves: accumulate deltas."""

    def add(
        self,
        amount: N_contra,
        attributes: Iterable[Attribute] | None = None,
        *,
        context: Context | None = None,
    ) -> None: ...


@runtime_checkable
class Recorder(Protocol[N_contra]):
    """Capability of gauge and histogram leaves: record point-in-time values."""

    def record(
        self,
        amount: N_contra,
        attributes: Iterable[Attribute] | None = None,
        *,
        context: Context | None = None,
    ) -> None: ...


class I64Counter(Adder[int], Protocol):
    """Monotonic integer counter."""


class I64UpDownCounter(Adder[int], Protocol):
    """Integer counter that accepts negative deltas."""


class F64Counter(Adder[float], Protocol):
    """Monotonic floating point counter."""


class F64UpDownCounter(Adder[float], Protocol):
    """Floating point counter that accepts negative deltas."""


class I64Gauge(Recorder[int], Protocol):
    """Integer point-in-time value."""


class I64Histogram(Recorder[int], Protocol):
    """Integer value distribution."""


class F64Gauge(Recorder[float], Protocol):
    """Floating point point-in-time value."""


class F64Histogram(Recorder[float], Protocol):
    """Floating point value distribution."""


_LEAF_SPECS: dict[type, LeafSpec] = {
    I64Counter: LeafSpec(Domain.INTEGER, InstrumentKind.COUNTER),
    I64UpDownCounter: LeafSpec(Domain.INTEGER, InstrumentKind.UP_DOWN_COUNTER),
    I64Gauge: LeafSpec(Domain.INTEGER, InstrumentKind.GAUGE),
    I64Histogram: LeafSpec(Domain.INTEGER, InstrumentKind.HISTOGRAM),
    F64Counter: LeafSpec(Domain.REAL, InstrumentKind.COUNTER),
    F64UpDownCounter: LeafSpec(Domain.REAL, InstrumentKind.UP_DOWN_COUNTER),
    F64Gauge: LeafSpec(Domain.REAL, InstrumentKind.GAUGE),
    F64Histogram: LeafSpec(Domain.REAL, InstrumentKind.HISTOGRAM),
}

LEAF_TYPES: tuple[type, ...] = tuple(_LEAF_SPECS)


def leaf_spec_for(tp: object) -> LeafSpec | None:
    """Return the LeafSpec of a leaf type, or None if tp is not a leaf type."""
    try:
        return _LEAF_SPECS.get(tp)  # type: ignore[arg-type]
    except TypeError:
        # unhashable annotation
        return None


def merge_attributes(
    baked: Attributes, call_site: Iterable[Attribute] | None
) -> Attributes:
    """Concatenate baked-in attributes with call-site ones, baked first."""
    if not call_site:
        return baked
    return baked + tuple(Attribute(*pair) for pair in call_site)


class _BoundHandle:
    """Identity shared by live handles."""

    __slots__ = ("_identifier", "_spec", "_attributes")

    def __init__(self, identifier: str, spec: LeafSpec, attributes: Attributes) -> None:
        self._identifier = identifier
        self._spec = spec
        self._attributes = tuple(attributes)

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def spec(self) -> LeafSpec:
        return self._spec

    @property
    def attributes(self) -> Attributes:
        """Attributes attached to every measurement of this handle."""
        return self._attributes

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self._spec.name}, {self._identifier!r}, "
            f"attributes={list(self._attributes)!r})"
        )


class AddHandle(_BoundHandle, Generic[N]):
    """Counter handle with a fixed attribute set.

    Example:
        ```python
        handle.add(1)
        handle.add(1, attrs("status", "ok"))
        ```
    """

    __slots__ = ("_instrument",)

    def __init__(
        self,
        instrument: AddInstrument,
        identifier: str,
        spec: LeafSpec,
        attributes: Attributes,
    ) -> None:
        super().__init__(identifier, spec, attributes)
        self._instrument = instrument

    def add(
        self,
        amount: N,
        attributes: Iterable[Attribute] | None = None,
        *,
        context: Context | None = None,
    ) -> None:
        """Add a delta.

        Args:
            amount: Delta to add. Counter deltas should be non-negative; this
                is not checked here.
            attributes: Call-site attributes, appended after the baked-in ones.
            context: Execution context passed to the backend. None uses the
                backend's current context.
        """
        self._instrument.add(
            amount, merge_attributes(self._attributes, attributes), context
        )


class RecordHandle(_BoundHandle, Generic[N]):
    """Gauge or histogram handle with a fixed attribute set."""

    __slots__ = ("_instrument",)

    def __init__(
        self,
        instrument: RecordInstrument,
        identifier: str,
        spec: LeafSpec,
        attributes: Attributes,
    ) -> None:
        super().__init__(identifier, spec, attributes)
        self._instrument = instrument

    def record(
        self,
        amount: N,
        attributes: Iterable[Attribute] | None = None,
        *,
        context: Context | None = None,
    ) -> None:
        """Record a point-in-time value.

        Args:
            amount: Value to record.
            attributes: Call-site attributes, appended after the baked-in ones.
            context: Execution context passed to the backend. None uses the
                backend's current context.
        """
        self._instrument.record(
            amount, merge_attributes(self._attributes, attributes), context
        )


class NoopHandle(_BoundHandle):
    """Handle used when no backend is configured. Every call is discarded."""

    __slots__ = ()

    def add(
        self,
        amount: int | float,
        attributes: Iterable[Attribute] | None = None,
        *,
        context: Context | None = None,
    ) -> None:
        pass

    def record(
        self,
        amount: int | float,
        attributes: Iterable[Attribute] | None = None,
        *,
        context: Context | None = None,
    ) -> None:
        pass


Handle = AddHandle | RecordHandle | NoopHandle
