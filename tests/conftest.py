"""Shared fixtures and fakes for the Smart Fill tests."""

from __future__ import annotations

import asyncio
from typing import Any, List, Optional, Tuple

import pytest

from smartfill.adapters.cache import InMemoryCache
from smartfill.config import reset_config
from smartfill.container import reset_container
from smartfill.domain.models import AutofillSuggestion, GeoContext, SegmentType
from smartfill.services import AutofillResolver, ProviderDispatcher


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider:
    """Records calls and answers with a fixed suggestion or error.

    Implements all three provider ports.
    """

    def __init__(
        self,
        result: Optional[AutofillSuggestion] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ) -> None:
        self.result = result
        self.error = error
        self.delay = delay
        self.calls: List[Tuple[Any, ...]] = []

    async def _answer(self) -> Optional[AutofillSuggestion]:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result

    async def fetch_flight(
        self, query: str, date: Optional[str] = None
    ) -> Optional[AutofillSuggestion]:
        self.calls.append(("flight", query, date))
        return await self._answer()

    async def fetch_train(
        self, query: str, date: Optional[str] = None
    ) -> Optional[AutofillSuggestion]:
        self.calls.append(("train", query, date))
        return await self._answer()

    async def fetch_place(
        self,
        query: str,
        category: SegmentType,
        context: Optional[GeoContext] = None,
    ) -> Optional[AutofillSuggestion]:
        self.calls.append(("place", query, category, context))
        return await self._answer()


def flight_entry(
    origin: str,
    destination: str,
    departure_local: str,
    arrival_local: str,
    *,
    origin_iata: str = "",
    destination_iata: str = "",
) -> dict:
    """A minimal AeroDataBox-shaped flight leg."""
    return {
        "number": "UA 120",
        "airline": {"name": "United Airlines"},
        "status": "Expected",
        "departure": {
            "airport": {"name": origin, "iata": origin_iata},
            "scheduledTime": {"local": departure_local},
        },
        "arrival": {
            "airport": {"name": destination, "iata": destination_iata},
            "scheduledTime": {"local": arrival_local},
        },
    }


@pytest.fixture(autouse=True)
def fresh_globals():
    """Each test starts with a fresh configuration and container."""
    reset_config()
    reset_container()
    yield
    reset_container()
    reset_config()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def suggestion() -> AutofillSuggestion:
    return AutofillSuggestion(
        title="UA120 · SFO → EWR",
        location_name="San Francisco International Airport",
        start_time="2025-03-01T16:00:00.000Z",
        end_time="2025-03-02T00:30:00.000Z",
        is_all_day=False,
        provider_name="United Airlines",
        transport_number="UA120",
        source="aerodatabox",
    )


@pytest.fixture
def provider(suggestion) -> FakeProvider:
    return FakeProvider(result=suggestion)


@pytest.fixture
def cache(clock) -> InMemoryCache:
    return InMemoryCache(ttl_seconds=900, clock=clock, name="test")


@pytest.fixture
def resolver(provider, cache) -> AutofillResolver:
    dispatcher = ProviderDispatcher(
        flight_provider=provider,
        train_provider=provider,
        place_provider=provider,
    )
    return AutofillResolver(dispatcher=dispatcher, cache=cache)
