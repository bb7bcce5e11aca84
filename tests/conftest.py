"""Pytest configuration and shared fixtures for the pricing tests."""

from datetime import datetime, timedelta, timezone

import pytest

from models import ExchangeRatesData
from reference_cache import CacheStore, ReferenceCache, isoformat_utc


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class MemoryCacheStore(CacheStore):
    """In-memory persistence tier that records every save."""

    def __init__(self):
        self.data = {}
        self.saves = []

    def load(self, key):
        return self.data.get(key)

    def save(self, key, value):
        self.saves.append(key)
        self.data[key] = value


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def memory_store() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def rates_cache(clock, memory_store) -> ReferenceCache:
    return ReferenceCache(6 * 60 * 60, store=memory_store, clock=clock)


@pytest.fixture
def ppp_cache(clock, memory_store) -> ReferenceCache:
    return ReferenceCache(24 * 60 * 60, store=memory_store, clock=clock)


@pytest.fixture
def sample_rates(clock) -> ExchangeRatesData:
    """USD-based rates for the currencies the tests price in."""
    return ExchangeRatesData(
        base='USD',
        rates={
            'EUR': 0.92,
            'GBP': 0.79,
            'JPY': 150.0,
            'INR': 83.0,
            'BRL': 5.0,
            'KRW': 1330.0,
            'XOF': 603.0,
            'KWD': 0.31,
            'CHF': 0.88,
        },
        timestamp=int(clock().timestamp()),
        fetched_at=isoformat_utc(clock()),
    )
