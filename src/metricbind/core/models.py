"""Core domain models for instrument trees."""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from metricbind.core.errors import OddAttributeCountError


class Attribute(NamedTuple):
    """A single key-value pair attached to measurements.

    Attributes:
        key: Attribute name (e.g., layer).
        value: Attribute value.
    """

    key: str
    value: str


# Ordered, not deduplicated.
Attributes = tuple[Attribute, ...]


def attrs(*pairs: str, **named: str) -> Attributes:
    """Build an attribute tuple from alternating keys and values.

    Positional arguments are read as key, value, key, value... Keyword
    arguments follow the positional ones in the order given.

    Example:
        ```python
        attrs("layer", "1", "region", "eu")
        attrs(layer="1")
        ```

    Raises:
        OddAttributeCountError: If an odd number of positional strings is given.
    """
    if len(pairs) % 2 != 0:
        raise OddAttributeCountError("<attrs>", len(pairs))
    built = [Attribute(str(pairs[i]), str(pairs[i + 1])) for i in range(0, len(pairs), 2)]
    built.extend(Attribute(key, str(value)) for key, value in named.items())
    return tuple(built)


class Domain(Enum):
    """Numeric domain of an instrument."""

    INTEGER = "I64"
    REAL = "F64"


class InstrumentKind(Enum):
    """Kind of instrument a leaf declares."""

    COUNTER = "Counter"
    UP_DOWN_COUNTER = "UpDownCounter"
    GAUGE = "Gauge"
    HISTOGRAM = "Histogram"

    @property
    def is_additive(self) -> bool:
        """True for kinds that accept deltas (add) rather than values (record)."""
        return self in (InstrumentKind.COUNTER, InstrumentKind.UP_DOWN_COUNTER)


@dataclass(frozen=True)
class LeafSpec:
    """Domain and kind pair identifying one of the eight leaf variants."""

    domain: Domain
    kind: InstrumentKind

    @property
    def name(self) -> str:
        """Leaf type name, e.g. ``I64Histogram``."""
        return f"{self.domain.value}{self.kind.value}"


@dataclass(frozen=True)
class Measurement:
    """A single recorded measurement, as seen by a backend.

    Attributes:
        identifier: Instrument identifier.
        spec: Domain and kind of the instrument.
        value: The added delta or recorded value.
        attributes: Attributes forwarded with the call, baked-in ones first.
    """

    identifier: str
    spec: LeafSpec
    value: int | float
    attributes: Attributes = field(default_factory=tuple)

    @property
    def labels(self) -> dict[str, str]:
        """Attributes as a mapping; later duplicates override earlier ones."""
        return dict(self.attributes)
