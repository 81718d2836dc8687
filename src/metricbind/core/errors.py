"""Exceptions raised while binding a blueprint.

Every error carries the dotted path of the field being bound when it was
raised, e.g. ``Samplers.nested.counter``.
"""


class BindError(Exception):
    """Base class for all binding failures."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.reason = message


class MissingIdentifierError(BindError, ValueError):
    """An instrument leaf has no (or an empty) identifier tag."""

    def __init__(self, path: str, tag: str = "id") -> None:
        super().__init__(path, f"missing {tag!r} tag on instrument field")


class InvalidBoundaryTokenError(BindError, ValueError):
    """A histogram boundary token could not be parsed as a float."""

    def __init__(self, path: str, raw: str, token: str) -> None:
        super().__init__(path, f"failed parsing buckets [{raw}]: invalid token {token!r}")
        self.raw = raw
        self.token = token


class OddAttributeCountError(BindError, ValueError):
    """An attribute list does not hold alternating keys and values."""

    def __init__(self, path: str, count: int, raw: str | None = None) -> None:
        detail = f"invalid number of attributes: {count}"
        if raw is not None:
            detail = f"{detail} in {raw}"
        super().__init__(path, detail)
        self.count = count
        self.raw = raw


class UnsupportedInstrumentKindError(BindError, TypeError):
    """A field is declared as an instrument but its type is not a leaf type."""


class BackendCreationError(BindError, RuntimeError):
    """The meter failed to create an instrument."""

    def __init__(self, path: str, identifier: str, detail: str) -> None:
        super().__init__(path, f"backend failed creating instrument {identifier!r}: {detail}")
        self.identifier = identifier


class InvalidBlueprintShapeError(BindError, TypeError):
    """The blueprint is not a bindable dataclass."""
