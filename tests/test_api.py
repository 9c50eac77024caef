"""End-to-end tests of the HTTP surface with fake providers."""

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from smartfill.api import create_app
from smartfill.config import AppConfig
from smartfill.container import Container
from smartfill.domain.errors import ProviderUnavailableError
from smartfill.domain.models import SegmentType, SuggestionHighlight
from smartfill.ports.providers import (
    FlightProviderPort,
    PlaceProviderPort,
    TrainProviderPort,
)

from conftest import FakeProvider, flight_entry


def _client(provider):
    container = Container.create_default(AppConfig())
    for port in (FlightProviderPort, TrainProviderPort, PlaceProviderPort):
        container.register(port, lambda: provider)
    return TestClient(create_app(container))


@pytest.fixture
def two_leg_provider(suggestion):
    return FakeProvider(
        result=replace(
            suggestion,
            metadata={
                "legs": [
                    flight_entry(
                        "Newark Liberty International",
                        "Denver International",
                        "2025-03-01 08:00-05:00",
                        "2025-03-01 10:10-07:00",
                        origin_iata="EWR",
                        destination_iata="DEN",
                    ),
                    flight_entry(
                        "Denver International",
                        "San Francisco International",
                        "2025-03-01 11:00-07:00",
                        "2025-03-01 12:45-08:00",
                        origin_iata="DEN",
                        destination_iata="SFO",
                    ),
                ]
            },
        )
    )


def test_flight_with_two_legs_then_cache_hit(two_leg_provider):
    client = _client(two_leg_provider)
    body = {"type": "flight", "query": "UA120", "date": "2025-03-01T08:00"}

    first = client.post("/api/segments/autofill", json=body)
    second = client.post("/api/segments/autofill", json={**body, "date": "2025-03-01"})

    assert first.status_code == 200
    assert first.json()["meta"] == {"cache": "miss"}
    legs = first.json()["data"]["metadata"]["legs"]
    assert len(legs) == 2
    assert legs[0]["origin"] == "Newark Liberty International"
    assert legs[0]["destination"] == "Denver International"
    assert legs[1]["destination"] == "San Francisco International"

    assert second.status_code == 200
    assert second.json()["meta"] == {"cache": "hit"}
    assert second.json()["data"] == first.json()["data"]
    assert len(two_leg_provider.calls) == 1


def test_every_suggestion_key_is_present(provider):
    response = _client(provider).post(
        "/api/segments/autofill", json={"type": "flight", "query": "UA120"}
    )

    assert set(response.json()["data"]) == {
        "type",
        "title",
        "description",
        "location_name",
        "location_address",
        "location_lat",
        "location_lng",
        "start_time",
        "end_time",
        "is_all_day",
        "provider_name",
        "confirmation_code",
        "transport_number",
        "timezone",
        "metadata",
        "highlights",
        "source",
    }


def test_type_and_highlights_are_serialized(suggestion):
    provider = FakeProvider(
        result=replace(
            suggestion,
            type=SegmentType.FLIGHT,
            highlights=(SuggestionHighlight("Airline", "United Airlines"),),
        )
    )

    data = _client(provider).post(
        "/api/segments/autofill", json={"type": "flight", "query": "UA120"}
    ).json()["data"]

    assert data["type"] == "flight"
    assert data["highlights"] == [{"label": "Airline", "value": "United Airlines"}]


@pytest.mark.parametrize(
    "content",
    [b"not json", b"", b"[1, 2]", b'{"type": "flight"}', b'{"type": "boat", "query": "x1"}'],
)
def test_invalid_bodies_are_400(provider, content):
    response = _client(provider).post(
        "/api/segments/autofill",
        content=content,
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert "error" in response.json()
    assert provider.calls == []


def test_short_query_is_400(provider):
    response = _client(provider).post(
        "/api/segments/autofill", json={"type": "hotel", "query": "a"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Query must be at least 2 characters."}


def test_not_found_is_404():
    response = _client(FakeProvider(result=None)).post(
        "/api/segments/autofill", json={"type": "meal", "query": "Nowhere Diner"}
    )
    assert response.status_code == 404


def test_unavailable_provider_is_503():
    provider = FakeProvider(error=ProviderUnavailableError("Train lookups are not configured"))

    response = _client(provider).post(
        "/api/segments/autofill", json={"type": "train", "query": "TGV 6201"}
    )

    assert response.status_code == 503
    assert response.json() == {"error": "Train lookups are not configured"}


def test_health_reports_cache_stats(provider):
    client = _client(provider)
    client.post("/api/segments/autofill", json={"type": "flight", "query": "UA120"})

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["cache"]["size"] == 1
