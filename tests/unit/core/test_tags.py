"""Tests for the tag resolver."""

import dataclasses

import pytest
from hypothesis import given
from hypothesis import strategies as st

from metricbind import (
    Attribute,
    InvalidBoundaryTokenError,
    MissingIdentifierError,
    OddAttributeCountError,
    TagKeys,
    instrument,
    subtree,
)
from metricbind.core.tags import (
    resolve_attributes,
    resolve_boundaries,
    resolve_identifier,
)

pytestmark = [pytest.mark.core, pytest.mark.tier(0)]

# Tokens without separators or surrounding whitespace.
_token = st.text(
    alphabet=st.characters(exclude_characters=",", exclude_categories=("Cs", "Zs", "Cc")),
    min_size=1,
    max_size=12,
).filter(lambda s: s == s.strip())


class TestResolveIdentifier:
    """Tests for resolve_identifier()."""

    @pytest.mark.tra("Core.Tags.Identifier.Present")
    def test_returns_identifier(self) -> None:
        """The id tag is returned as is."""
        assert resolve_identifier({"id": "requests"}, "S.f") == "requests"

    @pytest.mark.tra("Core.Tags.Identifier.Missing")
    def test_missing_raises(self) -> None:
        """A missing id tag raises MissingIdentifierError naming the field."""
        with pytest.raises(MissingIdentifierError, match="S.f"):
            resolve_identifier({}, "S.f")

    @pytest.mark.tra("Core.Tags.Identifier.Empty")
    def test_empty_raises(self) -> None:
        """An empty id tag is treated as missing."""
        with pytest.raises(MissingIdentifierError):
            resolve_identifier({"id": ""}, "S.f")

    @pytest.mark.tra("Core.Tags.Identifier.Whitespace")
    def test_whitespace_is_kept(self) -> None:
        """Only an empty identifier is missing; whitespace is taken as is."""
        assert resolve_identifier({"id": " "}, "S.f") == " "

    def test_custom_key(self) -> None:
        """Custom TagKeys change which metadata key is read."""
        keys = TagKeys(identifier="name")
        assert resolve_identifier({"name": "x"}, "S.f", keys) == "x"
        with pytest.raises(MissingIdentifierError, match="'name'"):
            resolve_identifier({"id": "x"}, "S.f", keys)


class TestResolveBoundaries:
    """Tests for resolve_boundaries()."""

    @pytest.mark.tra("Core.Tags.Boundaries.Parse")
    def test_parses_in_order(self) -> None:
        """Boundaries are parsed in declaration order."""
        assert resolve_boundaries({"buckets": "1.0,2.0,3.0"}, "S.h") == (1.0, 2.0, 3.0)

    @pytest.mark.tra("Core.Tags.Boundaries.Whitespace")
    def test_tokens_are_trimmed(self) -> None:
        """Whitespace around tokens is ignored and order is not sorted."""
        assert resolve_boundaries(
            {"buckets": "1.0,0.5874697321, 5.343, 0.9"}, "S.h"
        ) == (1.0, 0.5874697321, 5.343, 0.9)

    @pytest.mark.tra("Core.Tags.Boundaries.Absent")
    def test_absent_gives_empty(self) -> None:
        """No tag means backend defaults, represented by an empty tuple."""
        assert resolve_boundaries({}, "S.h") == ()
        assert resolve_boundaries({"buckets": ""}, "S.h") == ()

    @pytest.mark.tra("Core.Tags.Boundaries.Invalid")
    def test_bad_token_raises(self) -> None:
        """An unparsable token raises InvalidBoundaryTokenError with the raw tag."""
        with pytest.raises(InvalidBoundaryTokenError) as exc_info:
            resolve_boundaries({"buckets": "1.0,bad"}, "S.h")
        assert exc_info.value.raw == "1.0,bad"
        assert exc_info.value.token == "bad"
        assert "1.0,bad" in str(exc_info.value)

    def test_trailing_comma_is_invalid(self) -> None:
        """An empty token is not a number."""
        with pytest.raises(InvalidBoundaryTokenError):
            resolve_boundaries({"buckets": "1.0,"}, "S.h")

    @pytest.mark.tra("Core.Tags.Boundaries.NotIterable")
    def test_non_iterable_raises_with_path(self) -> None:
        """A bare number is not a boundary list and names the field."""
        with pytest.raises(InvalidBoundaryTokenError) as exc_info:
            resolve_boundaries({"buckets": 5}, "S.h")
        assert exc_info.value.path == "S.h"
        assert exc_info.value.raw == "5"

    def test_sequence_of_numbers(self) -> None:
        """Boundaries may be given as numbers instead of a string."""
        assert resolve_boundaries({"buckets": [1, 2.5]}, "S.h") == (1.0, 2.5)

    @given(st.lists(st.floats(allow_nan=False, allow_infinity=False), min_size=1))
    def test_repr_roundtrip(self, bounds: list[float]) -> None:
        """Any list of finite floats written with repr() parses back unchanged."""
        raw = ",".join(repr(b) for b in bounds)
        assert resolve_boundaries({"buckets": raw}, "S.h") == tuple(bounds)


class TestResolveAttributes:
    """Tests for resolve_attributes()."""

    @pytest.mark.tra("Core.Tags.Attributes.Parse")
    def test_parses_pairs_in_order(self) -> None:
        """Alternating tokens become ordered key/value pairs."""
        assert resolve_attributes({"attrs": "k1,v1,k2,v2"}, "S.s") == (
            Attribute("k1", "v1"),
            Attribute("k2", "v2"),
        )

    @pytest.mark.tra("Core.Tags.Attributes.Odd")
    def test_odd_count_raises(self) -> None:
        """An odd token count raises OddAttributeCountError."""
        with pytest.raises(OddAttributeCountError) as exc_info:
            resolve_attributes({"attrs": "k1,v1,k2"}, "S.s")
        assert exc_info.value.count == 3
        assert exc_info.value.path == "S.s"

    @pytest.mark.tra("Core.Tags.Attributes.Absent")
    def test_absent_gives_empty(self) -> None:
        """No tag means no local attributes."""
        assert resolve_attributes({}, "S.s") == ()

    def test_tokens_are_trimmed(self) -> None:
        """Whitespace around keys and values is dropped."""
        assert resolve_attributes({"attrs": " sub , nested "}, "S.s") == (
            Attribute("sub", "nested"),
        )

    def test_duplicates_are_kept(self) -> None:
        """Repeated keys are kept in order."""
        assert resolve_attributes({"attrs": "k,1,k,2"}, "S.s") == (
            Attribute("k", "1"),
            Attribute("k", "2"),
        )

    def test_sequence_of_pairs(self) -> None:
        """Attributes may be given as pairs instead of a string."""
        assert resolve_attributes({"attrs": [("a", "b")]}, "S.s") == (
            Attribute("a", "b"),
        )

    def test_malformed_pair_raises(self) -> None:
        """A pair with three items is rejected."""
        with pytest.raises(OddAttributeCountError):
            resolve_attributes({"attrs": [("a", "b", "c")]}, "S.s")

    @pytest.mark.tra("Core.Tags.Attributes.Mapping")
    def test_mapping_uses_items(self) -> None:
        """A mapping contributes its keys and values, in insertion order."""
        assert resolve_attributes({"attrs": {"ab": "cd", "k": "v"}}, "S.s") == (
            Attribute("ab", "cd"),
            Attribute("k", "v"),
        )

    @pytest.mark.tra("Core.Tags.Attributes.StringItems")
    def test_string_items_are_not_split_into_characters(self) -> None:
        """Bare strings in a sequence are rejected rather than unpacked."""
        with pytest.raises(OddAttributeCountError) as exc_info:
            resolve_attributes({"attrs": ["ab", "cd"]}, "S.s")
        assert exc_info.value.path == "S.s"
        assert "ab" in str(exc_info.value)

    @pytest.mark.tra("Core.Tags.Attributes.NotIterable")
    def test_non_iterable_raises_with_path(self) -> None:
        """A tag that is not a string, mapping or sequence is a BindError."""
        with pytest.raises(OddAttributeCountError) as exc_info:
            resolve_attributes({"attrs": 5}, "S.s")
        assert exc_info.value.path == "S.s"
        assert exc_info.value.raw == "5"

    @given(st.lists(st.tuples(_token, _token), max_size=8))
    def test_pairs_roundtrip(self, pairs: list[tuple[str, str]]) -> None:
        """Joined pairs parse back to the same ordered pairs."""
        raw = ",".join(f"{k},{v}" for k, v in pairs)
        assert resolve_attributes({"attrs": raw}, "S.s") == tuple(
            Attribute(k, v) for k, v in pairs
        )


class TestFieldHelpers:
    """Tests for instrument() and subtree()."""

    def test_instrument_writes_metadata(self) -> None:
        """instrument() stores id and buckets and defaults the field to None."""
        f = instrument("latency", buckets="1,2")
        assert f.metadata == {"id": "latency", "buckets": "1,2"}
        assert f.default is None

    def test_instrument_without_buckets(self) -> None:
        """No buckets argument writes no buckets tag."""
        assert "buckets" not in instrument("requests").metadata

    def test_subtree_writes_attrs(self) -> None:
        """subtree() stores attrs under the attrs key."""
        f = subtree(attrs="sub,nested")
        assert f.metadata == {"attrs": "sub,nested"}

    def test_extra_metadata_is_kept(self) -> None:
        """Caller metadata is merged with the tags."""
        f = instrument("x", metadata={"owner": "team-a"})
        assert f.metadata == {"owner": "team-a", "id": "x"}

    def test_custom_keys(self) -> None:
        """Tags are written under the configured keys."""
        keys = TagKeys(identifier="name", attrs="labels")
        assert instrument("x", keys=keys).metadata == {"name": "x"}
        assert subtree(attrs="a,b", keys=keys).metadata == {"labels": "a,b"}

    def test_field_kwargs_forwarded(self) -> None:
        """Extra keyword arguments reach dataclasses.field()."""
        f = instrument("x", init=False, repr=False)
        assert isinstance(f, dataclasses.Field)
        assert f.init is False
        assert f.repr is False
