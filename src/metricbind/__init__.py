"""metricbind - declarative binding of metric instrument trees.

Declare instruments as fields of a dataclass, bind the class once, and use
the returned instance's fields as ready-to-use counters, gauges and
histograms:

    ```python
    from dataclasses import dataclass

    from metricbind import F64Histogram, I64Counter, bind, instrument

    @dataclass
    class Samplers:
        requests: I64Counter = instrument("requests")
        latency: F64Histogram = instrument("latency", buckets="0.1,0.5,1")

    samplers = bind(Samplers)
    samplers.requests.add(1)
    ```
"""

from metricbind.adapters.in_memory import InMemoryMeter
from metricbind.adapters.opentelemetry import OpenTelemetryMeter
from metricbind.core.binder import (
    LeafInfo,
    bind,
    bind_into,
    iter_handles,
    iter_leaves,
    must_bind,
)
from metricbind.core.config import DEFAULT_TAG_KEYS, TagKeys
from metricbind.core.dispatch import create_leaf
from metricbind.core.errors import (
    BackendCreationError,
    BindError,
    InvalidBlueprintShapeError,
    InvalidBoundaryTokenError,
    MissingIdentifierError,
    OddAttributeCountError,
    UnsupportedInstrumentKindError,
)
from metricbind.core.instruments import (
    AddHandle,
    Adder,
    F64Counter,
    F64Gauge,
    F64Histogram,
    F64UpDownCounter,
    I64Counter,
    I64Gauge,
    I64Histogram,
    I64UpDownCounter,
    NoopHandle,
    RecordHandle,
    Recorder,
)
from metricbind.core.logs import get_logger
from metricbind.core.models import (
    Attribute,
    Attributes,
    Domain,
    InstrumentKind,
    LeafSpec,
    Measurement,
    attrs,
)
from metricbind.core.ports import AddInstrument, MeterPort, RecordInstrument
from metricbind.core.tags import instrument, subtree

__all__ = [
    # Binding
    "bind",
    "bind_into",
    "must_bind",
    "iter_leaves",
    "iter_handles",
    "LeafInfo",
    "create_leaf",
    # Declaration
    "instrument",
    "subtree",
    "TagKeys",
    "DEFAULT_TAG_KEYS",
    # Leaf types
    "I64Counter",
    "I64UpDownCounter",
    "I64Gauge",
    "I64Histogram",
    "F64Counter",
    "F64UpDownCounter",
    "F64Gauge",
    "F64Histogram",
    "Adder",
    "Recorder",
    # Handles
    "AddHandle",
    "RecordHandle",
    "NoopHandle",
    # Models
    "Attribute",
    "Attributes",
    "attrs",
    "Domain",
    "InstrumentKind",
    "LeafSpec",
    "Measurement",
    # Ports
    "MeterPort",
    "AddInstrument",
    "RecordInstrument",
    # Adapters
    "InMemoryMeter",
    "OpenTelemetryMeter",
    # Errors
    "BindError",
    "MissingIdentifierError",
    "InvalidBoundaryTokenError",
    "OddAttributeCountError",
    "UnsupportedInstrumentKindError",
    "BackendCreationError",
    "InvalidBlueprintShapeError",
    # Logging
    "get_logger",
]
