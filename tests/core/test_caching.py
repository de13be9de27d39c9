"""
Tests for the read-through accident cache.
"""

from unittest.mock import MagicMock

from mock_data import make_accident

from roadsafety.repositories import CachingAccidentProvider
from roadsafety.repositories.base import AccidentProvider


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def _inner():
    inner = MagicMock(spec=AccidentProvider)
    inner.all.return_value = [make_accident(1, 100), make_accident(2, 200)]
    return inner


class TestCachingAccidentProvider:
    """Test TTL caching of accident reads."""

    def test_reads_through_once_within_ttl(self):
        inner, clock = _inner(), FakeClock()
        provider = CachingAccidentProvider(inner, ttl_seconds=60, clock=clock)

        first = provider.all()
        clock.now = 59.0
        second = provider.all()

        assert first == second
        inner.all.assert_called_once()

    def test_expires_after_ttl(self):
        inner, clock = _inner(), FakeClock()
        provider = CachingAccidentProvider(inner, ttl_seconds=60, clock=clock)

        provider.all()
        clock.now = 60.0
        provider.all()

        assert inner.all.call_count == 2

    def test_no_ttl_caches_until_invalidated(self):
        inner, clock = _inner(), FakeClock()
        provider = CachingAccidentProvider(inner, ttl_seconds=None, clock=clock)

        provider.all()
        clock.now = 1e9
        provider.all()
        assert inner.all.call_count == 1

        provider.invalidate()
        provider.all()
        assert inner.all.call_count == 2

    def test_returns_copies(self):
        provider = CachingAccidentProvider(_inner())

        provider.all().clear()

        assert len(provider.all()) == 2
