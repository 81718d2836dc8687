"""Tree walker: bind a blueprint dataclass into a tree of instrument handles.

A blueprint is a dataclass whose fields are either instrument leaves (annotated
with one of the leaf types such as ``I64Counter``) or nested blueprints.
Binding walks the fields depth-first. Nested blueprints add their ``attrs``
tag to the attributes inherited from their ancestors; leaves get exactly the
attributes accumulated by their ancestors.

Example:
    ```python
    @dataclass
    class Nested:
        gauge: F64Gauge = instrument("example_nested_gauge")

    @dataclass
    class Samplers:
        requests: I64Counter = instrument("requests")
        nested: Nested = subtree(attrs="sub,nested")

    samplers = bind(Samplers, Attribute("layer", "1"), meter=meter)
    samplers.requests.add(1)
    samplers.nested.gauge.record(0.5)
    ```
"""

import dataclasses
import types
import typing
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any, TypeVar

from metricbind.core.config import DEFAULT_TAG_KEYS, TagKeys
from metricbind.core.dispatch import create_leaf
from metricbind.core.errors import (
    BindError,
    InvalidBlueprintShapeError,
    UnsupportedInstrumentKindError,
)
from metricbind.core.instruments import (
    AddHandle,
    Handle,
    NoopHandle,
    RecordHandle,
    leaf_spec_for,
)
from metricbind.core.logs import get_logger
from metricbind.core.models import Attribute, Attributes, InstrumentKind, LeafSpec
from metricbind.core.ports import MeterPort
from metricbind.core.tags import (
    resolve_attributes,
    resolve_boundaries,
    resolve_identifier,
)

logger = get_logger(__name__)

T = TypeVar("T")

_HANDLE_TYPES = (AddHandle, RecordHandle, NoopHandle)

# Marks a field the walker leaves alone.
_SKIP = object()


@dataclass(frozen=True)
class LeafInfo:
    """Resolved configuration of one instrument leaf.

    Attributes:
        path: Dotted field path from the blueprint root.
        identifier: Instrument identifier.
        spec: Domain and kind of the leaf.
        boundaries: Histogram boundaries (empty for other kinds).
        attributes: Attributes baked into the leaf's handle.
    """

    path: str
    identifier: str
    spec: LeafSpec
    boundaries: tuple[float, ...]
    attributes: Attributes


LeafFactory = Callable[[LeafInfo], Handle]


def _normalize(base_attributes: Iterable[Attribute | tuple[str, str]]) -> Attributes:
    return tuple(Attribute(str(key), str(value)) for key, value in base_attributes)


def _unwrap_optional(annotation: Any) -> Any:
    """Return X for ``X | None`` / ``Optional[X]``, otherwise the annotation."""
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_blueprint(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


class _Walker:
    """Depth-first walk over a blueprint, building handles with a factory."""

    def __init__(self, factory: LeafFactory, keys: TagKeys) -> None:
        self._factory = factory
        self._keys = keys
        self._stack: list[type] = []

    def build(self, cls: type[T], inherited: Attributes, path: str) -> T:
        """Allocate and populate a new instance of cls."""
        values: dict[str, Any] = {}
        late: dict[str, Any] = {}
        for field, value in self._walk_fields(cls, inherited, path):
            (values if field.init else late)[field.name] = value

        try:
            instance = cls(**values)
        except TypeError as exc:
            raise InvalidBlueprintShapeError(
                path, f"cannot construct {cls.__name__}: {exc}"
            ) from exc
        for name, value in late.items():
            object.__setattr__(instance, name, value)
        return instance

    def populate(self, instance: T, inherited: Attributes, path: str) -> T:
        """Populate an existing instance in place."""
        cls = type(instance)
        for field, value in self._walk_fields(cls, inherited, path):
            object.__setattr__(instance, field.name, value)
        return instance

    def _walk_fields(
        self, cls: type, inherited: Attributes, path: str
    ) -> Iterator[tuple[dataclasses.Field[Any], Any]]:
        # Values are produced eagerly so a failure aborts before any field
        # of this node is assigned.
        if cls in self._stack:
            chain = " -> ".join(c.__name__ for c in (*self._stack, cls))
            raise InvalidBlueprintShapeError(path, f"recursive blueprint: {chain}")

        hints = self._type_hints(cls, path)
        self._stack.append(cls)
        try:
            bound: list[tuple[dataclasses.Field[Any], Any]] = []
            for field in dataclasses.fields(cls):
                if field.name.startswith("_"):
                    continue
                annotation = hints.get(field.name, field.type)
                value = self._bind_field(
                    field, annotation, inherited, f"{path}.{field.name}"
                )
                if value is not _SKIP:
                    bound.append((field, value))
        finally:
            self._stack.pop()
        return iter(bound)

    def _bind_field(
        self,
        field: dataclasses.Field[Any],
        annotation: Any,
        inherited: Attributes,
        path: str,
    ) -> Any:
        target = _unwrap_optional(annotation)

        if _is_blueprint(target):
            local = resolve_attributes(field.metadata, path, self._keys)
            return self.build(target, inherited + local, path)

        spec = leaf_spec_for(target)
        if spec is not None:
            identifier = resolve_identifier(field.metadata, path, self._keys)
            boundaries: tuple[float, ...] = ()
            if spec.kind is InstrumentKind.HISTOGRAM:
                boundaries = resolve_boundaries(field.metadata, path, self._keys)
            info = LeafInfo(path, identifier, spec, boundaries, inherited)
            return self._factory(info)

        if self._keys.identifier in field.metadata:
            raise UnsupportedInstrumentKindError(
                path, f"field declares an instrument but has type {annotation!r}"
            )
        return _SKIP

    @staticmethod
    def _type_hints(cls: type, path: str) -> dict[str, Any]:
        try:
            return typing.get_type_hints(cls)
        except NameError as exc:
            raise InvalidBlueprintShapeError(
                path, f"cannot resolve annotations of {cls.__name__}: {exc}"
            ) from exc


def _meter_factory(meter: MeterPort | None) -> LeafFactory:
    def factory(info: LeafInfo) -> Handle:
        handle = create_leaf(
            info.spec,
            info.identifier,
            info.boundaries,
            info.attributes,
            meter,
            info.path,
        )
        logger.debug(
            "bound %s %s as %r with %d attribute(s)",
            info.spec.name,
            info.path,
            info.identifier,
            len(info.attributes),
        )
        return handle

    return factory


def _check_blueprint(blueprint: Any) -> None:
    if not _is_blueprint(blueprint):
        name = getattr(blueprint, "__name__", type(blueprint).__name__)
        raise InvalidBlueprintShapeError(
            name, f"expected a dataclass type, got {blueprint!r}"
        )


def bind(
    blueprint: type[T],
    *base_attributes: Attribute | tuple[str, str],
    meter: MeterPort | None = None,
    keys: TagKeys = DEFAULT_TAG_KEYS,
) -> T:
    """Allocate a blueprint and bind every instrument leaf in it.

    Args:
        blueprint: Dataclass type describing the tree.
        *base_attributes: Attributes attached to every leaf of the tree.
        meter: Backend creating the instruments. None binds no-op handles.
        keys: Metadata keys to read tags from.

    Returns:
        A new blueprint instance whose leaves are ready-to-use handles.

    Raises:
        BindError: On the first invalid field; nothing is returned.
    """
    _check_blueprint(blueprint)
    if meter is None:
        logger.debug("no meter given, binding %s with no-op handles", blueprint.__name__)
    walker = _Walker(_meter_factory(meter), keys)
    return walker.build(blueprint, _normalize(base_attributes), blueprint.__name__)


def must_bind(
    blueprint: type[T],
    *base_attributes: Attribute | tuple[str, str],
    meter: MeterPort | None = None,
    keys: TagKeys = DEFAULT_TAG_KEYS,
) -> T:
    """Like bind(), but raises RuntimeError on failure.

    Meant for module-level or startup code where a broken blueprint is a
    programming error.
    """
    try:
        return bind(blueprint, *base_attributes, meter=meter, keys=keys)
    except BindError as exc:
        raise RuntimeError(f"binding {blueprint!r} failed: {exc}") from exc


def bind_into(
    instance: T,
    *base_attributes: Attribute | tuple[str, str],
    meter: MeterPort | None = None,
    keys: TagKeys = DEFAULT_TAG_KEYS,
) -> T:
    """Bind the leaves of an existing blueprint instance in place.

    Nested blueprints are always allocated fresh. On error the instance may
    be partially bound and should be discarded.
    """
    cls = type(instance)
    _check_blueprint(cls)
    if getattr(cls, "__dataclass_params__").frozen:
        raise InvalidBlueprintShapeError(
            cls.__name__, "cannot bind a frozen instance in place; use bind()"
        )
    walker = _Walker(_meter_factory(meter), keys)
    return walker.populate(instance, _normalize(base_attributes), cls.__name__)


def iter_leaves(
    blueprint: type,
    *base_attributes: Attribute | tuple[str, str],
    keys: TagKeys = DEFAULT_TAG_KEYS,
) -> Iterator[LeafInfo]:
    """Resolve every leaf of a blueprint without creating instruments.

    Validates the blueprint exactly like bind() does.

    Yields:
        LeafInfo per leaf, in depth-first declaration order.
    """
    _check_blueprint(blueprint)
    found: list[LeafInfo] = []

    def collect(info: LeafInfo) -> Handle:
        found.append(info)
        return NoopHandle(info.identifier, info.spec, info.attributes)

    _Walker(collect, keys).build(
        blueprint, _normalize(base_attributes), blueprint.__name__
    )
    yield from found


def iter_handles(instance: object, path: str | None = None) -> Iterator[tuple[str, Handle]]:
    """Yield ``(path, handle)`` for every handle in a bound tree."""
    if path is None:
        path = type(instance).__name__
    for field in dataclasses.fields(instance):  # type: ignore[arg-type]
        if field.name.startswith("_"):
            continue
        value = getattr(instance, field.name, None)
        field_path = f"{path}.{field.name}"
        if isinstance(value, _HANDLE_TYPES):
            yield field_path, value
        elif dataclasses.is_dataclass(value) and not isinstance(value, type):
            yield from iter_handles(value, field_path)
