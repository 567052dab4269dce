"""
Pytest configuration and shared fixtures for IPVault tests.

This module provides common fixtures and configuration that can be used
across all test modules in the project.
"""

from __future__ import annotations

import os
from typing import Any, Mapping, Sequence
from unittest.mock import Mock

import pytest

from ipvault.core.cache import BoundedExpiringCache
from ipvault.services.reference_data import ReferenceData

# Keep a developer's environment out of Settings()
for _name in list(os.environ):
    if _name.startswith("IPVAULT_"):
        del os.environ[_name]


class FakeClock:
    """Manually advanced time source for cache tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeNetwork:
    """Network collaborator that answers from canned payloads and records calls."""

    def __init__(self) -> None:
        self.fetch = Mock(side_effect=self._fetch)
        self.fetch_batch = Mock(side_effect=self._fetch_batch)
        self.create_map = Mock(return_value={"reportUrl": "https://example.test/map/abc"})

    @staticmethod
    def _fetch(ip: str | None) -> dict[str, Any]:
        return {"ip": ip or "203.0.113.200", "country": "US", "loc": "37.4,-122.1"}

    @staticmethod
    def _fetch_batch(keys: Sequence[str], token: str | None) -> Mapping[str, Any]:
        return {key: {"ip": key} for key in keys}


@pytest.fixture
def clock() -> FakeClock:
    """Fake monotonic clock starting at t=1000."""
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> BoundedExpiringCache:
    """Small cache driven by the fake clock."""
    return BoundedExpiringCache(max_size=16, ttl=100, clock=clock)


@pytest.fixture
def network() -> FakeNetwork:
    """Recording fake network collaborator."""
    return FakeNetwork()


@pytest.fixture(scope="session")
def reference_data() -> ReferenceData:
    """Bundled reference tables, loaded once per session."""
    return ReferenceData.load()
