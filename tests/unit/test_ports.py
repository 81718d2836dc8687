"""Tests for port interfaces."""

from collections.abc import Sequence

import pytest

from metricbind import AddInstrument, MeterPort, RecordInstrument

pytestmark = [pytest.mark.core]


class TestMeterPort:
    """Tests for MeterPort protocol."""

    def test_protocol_has_creation_methods(self) -> None:
        """MeterPort declares both creation methods."""
        assert hasattr(MeterPort, "create_add_instrument")
        assert hasattr(MeterPort, "create_record_instrument")

    def test_class_implementing_protocol_is_recognized(self) -> None:
        """Any class with both creation methods satisfies MeterPort."""

        class FakeMeter:
            def create_add_instrument(self, domain, kind, identifier):
                return None

            def create_record_instrument(
                self, domain, kind, identifier, boundaries: Sequence[float]
            ):
                return None

        assert isinstance(FakeMeter(), MeterPort)

    def test_partial_implementation_is_rejected(self) -> None:
        """A class missing one creation method is not a MeterPort."""
        class AddOnly:
            def create_add_instrument(self, domain, kind, identifier):
                return None

        assert not isinstance(AddOnly(), MeterPort)


class TestInstrumentPorts:
    """Tests for raw instrument protocols."""

    def test_add_and_record_are_distinct(self) -> None:
        """Adding and recording instruments are separate protocols."""
        class Adds:
            def add(self, amount, attributes, context) -> None:
                pass

        class Records:
            def record(self, amount, attributes, context) -> None:
                pass

        assert isinstance(Adds(), AddInstrument)
        assert not isinstance(Adds(), RecordInstrument)
        assert isinstance(Records(), RecordInstrument)
        assert not isinstance(Records(), AddInstrument)
