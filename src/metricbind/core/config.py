"""Configuration objects."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TagKeys:
    """Field-metadata keys read by the tag resolver.

    Attributes:
        identifier: Key of the required instrument identifier.
        buckets: Key of the optional histogram boundary list.
        attrs: Key of the optional sub-tree attribute list.
    """

    identifier: str = "id"
    buckets: str = "buckets"
    attrs: str = "attrs"


DEFAULT_TAG_KEYS = TagKeys()
