"""Kind dispatcher: turn a leaf declaration into a bound handle."""

from collections.abc import Sequence

from metricbind.core.errors import BackendCreationError, UnsupportedInstrumentKindError
from metricbind.core.instruments import AddHandle, Handle, NoopHandle, RecordHandle
from metricbind.core.models import Attributes, InstrumentKind, LeafSpec
from metricbind.core.ports import MeterPort


def create_leaf(
    spec: LeafSpec,
    identifier: str,
    boundaries: Sequence[float],
    attributes: Attributes,
    meter: MeterPort | None,
    path: str = "<leaf>",
) -> Handle:
    """Create the handle for one instrument leaf.

    Args:
        spec: Domain and kind of the leaf.
        identifier: Instrument identifier.
        boundaries: Histogram boundaries; ignored for every other kind.
        attributes: Attributes baked into the handle.
        meter: Backend to create the instrument with. None yields a no-op handle.
        path: Dotted field path, used in error messages.

    Returns:
        AddHandle for counters, RecordHandle for gauges and histograms,
        NoopHandle when meter is None.

    Raises:
        UnsupportedInstrumentKindError: If spec is not one of the eight variants.
        BackendCreationError: If the meter fails to create the instrument.
    """
    if not isinstance(spec, LeafSpec) or not isinstance(spec.kind, InstrumentKind):
        raise UnsupportedInstrumentKindError(path, f"unsupported kind found: {spec!r}")

    if meter is None:
        return NoopHandle(identifier, spec, attributes)

    try:
        if spec.kind.is_additive:
            add_instrument = meter.create_add_instrument(spec.domain, spec.kind, identifier)
        else:
            bounds = tuple(boundaries) if spec.kind is InstrumentKind.HISTOGRAM else ()
            record_instrument = meter.create_record_instrument(
                spec.domain, spec.kind, identifier, bounds
            )
    except Exception as exc:
        raise BackendCreationError(path, identifier, str(exc) or type(exc).__name__) from exc

    if spec.kind.is_additive:
        if add_instrument is None:
            raise BackendCreationError(path, identifier, "meter returned no instrument")
        return AddHandle(add_instrument, identifier, spec, attributes)

    if record_instrument is None:
        raise BackendCreationError(path, identifier, "meter returned no instrument")
    return RecordHandle(record_instrument, identifier, spec, attributes)
