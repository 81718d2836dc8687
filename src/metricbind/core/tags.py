"""Tag resolver: parse per-field metadata into binding configuration.

Blueprint fields carry their configuration as ``dataclasses.field`` metadata.
The ``instrument`` and ``subtree`` helpers write it; the ``resolve_*``
functions read it. The resolvers are pure and know nothing about the tree;
the ``path`` argument only labels errors.
"""

import dataclasses
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from metricbind.core.config import DEFAULT_TAG_KEYS, TagKeys
from metricbind.core.errors import (
    InvalidBoundaryTokenError,
    MissingIdentifierError,
    OddAttributeCountError,
)
from metricbind.core.models import Attribute, Attributes


def instrument(
    id: str,
    buckets: str | Iterable[float] | None = None,
    *,
    keys: TagKeys = DEFAULT_TAG_KEYS,
    **field_kwargs: Any,
) -> Any:
    """Declare an instrument leaf field.

    Example:
        ```python
        @dataclass
        class Samplers:
            requests: I64Counter = instrument("requests")
            latency: F64Histogram = instrument("latency", buckets="0.1,0.5,1")
        ```

    Args:
        id: Instrument identifier.
        buckets: Histogram boundaries, comma-separated or as numbers.
        keys: Metadata keys to write.
        **field_kwargs: Forwarded to ``dataclasses.field``.
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[keys.identifier] = id
    if buckets is not None:
        metadata[keys.buckets] = buckets
    field_kwargs.setdefault("default", None)
    return dataclasses.field(metadata=metadata, **field_kwargs)


def subtree(
    attrs: str | Iterable[Attribute | tuple[str, str]] | None = None,
    *,
    keys: TagKeys = DEFAULT_TAG_KEYS,
    **field_kwargs: Any,
) -> Any:
    """Declare a nested blueprint field, optionally with local attributes.

    Args:
        attrs: Alternating keys and values, e.g. ``"sub,nested"``.
        keys: Metadata keys to write.
        **field_kwargs: Forwarded to ``dataclasses.field``.
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    if attrs is not None:
        metadata[keys.attrs] = attrs
    field_kwargs.setdefault("default", None)
    return dataclasses.field(metadata=metadata, **field_kwargs)


def resolve_identifier(
    metadata: Mapping[str, Any], path: str, keys: TagKeys = DEFAULT_TAG_KEYS
) -> str:
    """Return the identifier tag.

    Raises:
        MissingIdentifierError: If the tag is absent or empty. Whitespace is
            not stripped and counts as an identifier.
    """
    identifier = metadata.get(keys.identifier)
    if identifier is None or identifier == "":
        raise MissingIdentifierError(path, keys.identifier)
    return str(identifier)


def resolve_boundaries(
    metadata: Mapping[str, Any], path: str, keys: TagKeys = DEFAULT_TAG_KEYS
) -> tuple[float, ...]:
    """Return the histogram boundaries in declaration order.

    Absent or empty tags give ``()``, meaning backend defaults.

    Raises:
        InvalidBoundaryTokenError: If a token is not a float.
    """
    raw = metadata.get(keys.buckets)
    if raw is None or raw == "":
        return ()
    if isinstance(raw, str):
        tokens: list[Any] = raw.split(",")
        raw_text = raw
    else:
        try:
            tokens = list(raw)
        except TypeError:
            raise InvalidBoundaryTokenError(path, repr(raw), repr(raw)) from None
        raw_text = ",".join(str(t) for t in tokens)

    bounds: list[float] = []
    for token in tokens:
        if isinstance(token, str):
            token = token.strip()
        try:
            bounds.append(float(token))
        except (TypeError, ValueError):
            raise InvalidBoundaryTokenError(path, raw_text, str(token)) from None
    return tuple(bounds)


def resolve_attributes(
    metadata: Mapping[str, Any], path: str, keys: TagKeys = DEFAULT_TAG_KEYS
) -> Attributes:
    """Return the local attributes of a sub-tree, in declaration order.

    Raises:
        OddAttributeCountError: If the tag does not hold key/value pairs.
    """
    raw = metadata.get(keys.attrs)
    if raw is None or raw == "":
        return ()
    if not isinstance(raw, str):
        return _attribute_pairs(raw, path)

    tokens = raw.split(",")
    if len(tokens) % 2 != 0:
        raise OddAttributeCountError(path, len(tokens))
    return tuple(
        Attribute(tokens[i].strip(), tokens[i + 1].strip())
        for i in range(0, len(tokens), 2)
    )


def _attribute_pairs(raw: Any, path: str) -> Attributes:
    """Read attributes given as a mapping or as a sequence of pairs."""
    if isinstance(raw, Mapping):
        return tuple(Attribute(str(k), str(v)) for k, v in raw.items())
    try:
        pairs = list(raw)
    except TypeError:
        raise OddAttributeCountError(path, 1, repr(raw)) from None

    built: list[Attribute] = []
    for pair in pairs:
        # A bare string would otherwise unpack character by character.
        if isinstance(pair, str | bytes) or not isinstance(pair, Sequence):
            raise OddAttributeCountError(path, len(pairs), repr(raw))
        if len(pair) != 2:
            raise OddAttributeCountError(path, len(pair), repr(raw))
        built.append(Attribute(str(pair[0]), str(pair[1])))
    return tuple(built)
