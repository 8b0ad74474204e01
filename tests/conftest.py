"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from kvspace.cache.registry import SpaceRegistry
from kvspace.cache.space import SpaceCache


class FakeClock:
    """
    Controllable clock for deterministic expiry tests.

    Usage:
        clock = FakeClock()
        clock.advance(seconds=5)
        now = clock()
    """

    def __init__(self, start: datetime = None):
        self._now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        with self._lock:
            return self._now

    def advance(self, **delta) -> datetime:
        """Move the clock forward by timedelta(**delta)."""
        with self._lock:
            self._now += timedelta(**delta)
            return self._now

    def after(self, **delta) -> datetime:
        """A point in time relative to now, without moving the clock."""
        return self() + timedelta(**delta)


# ============================================================================
# Clock Fixtures
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock starting at a fixed instant."""
    return FakeClock()


# ============================================================================
# Storage Fixtures
# ============================================================================

@pytest.fixture
def cache(clock: FakeClock) -> SpaceCache:
    """Create a fresh SpaceCache driven by the fake clock."""
    return SpaceCache("space", clock=clock)


@pytest.fixture
def registry(clock: FakeClock) -> SpaceRegistry:
    """Create an empty SpaceRegistry driven by the fake clock."""
    return SpaceRegistry(clock=clock)


@pytest.fixture
def real_registry() -> SpaceRegistry:
    """Create an empty SpaceRegistry using the real UTC clock."""
    return SpaceRegistry()


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
