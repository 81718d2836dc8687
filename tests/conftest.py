"""Shared test fixtures for all test modules."""

import pytest

from metricbind import InMemoryMeter


@pytest.fixture
def meter() -> InMemoryMeter:
    """Provide an empty in-memory meter."""
    return InMemoryMeter()


class FailingMeter:
    """Meter whose instrument creation always fails."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or RuntimeError("backend unavailable")

    def create_add_instrument(self, domain, kind, identifier):
        raise self.error

    def create_record_instrument(self, domain, kind, identifier, boundaries):
        raise self.error


class NoneMeter:
    """Meter that returns no instrument at all."""

    def create_add_instrument(self, domain, kind, identifier):
        return None

    def create_record_instrument(self, domain, kind, identifier, boundaries):
        return None


@pytest.fixture
def failing_meter() -> FailingMeter:
    """Provide a meter that raises on every creation."""
    return FailingMeter()


@pytest.fixture
def none_meter() -> NoneMeter:
    """Provide a meter that returns None on every creation."""
    return NoneMeter()
