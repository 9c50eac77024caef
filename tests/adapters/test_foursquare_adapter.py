"""Tests for the Foursquare place adapter and the place fallback chain."""

import httpx
import pytest

from smartfill.adapters.providers import FallbackPlaceProvider, FoursquarePlaceAdapter
from smartfill.config import PlaceProviderConfig
from smartfill.domain.errors import ProviderRequestError, ProviderUnavailableError
from smartfill.domain.models import (
    AutofillSuggestion,
    GeoContext,
    SegmentType,
    SuggestionHighlight,
)

from conftest import FakeProvider

LUTETIA = {
    "fsq_id": "4adcda09f964a520e83321e3",
    "name": "Hôtel Lutetia",
    "categories": [{"id": 19014, "name": "Hotel"}],
    "geocodes": {"main": {"latitude": 48.8511, "longitude": 2.3272}},
    "location": {
        "address": "45 Boulevard Raspail",
        "locality": "Paris",
        "country": "FR",
    },
    "rating": 9.1,
    "hours": {"display": ["Open 24 hours"], "open_now": True},
    "website": "https://lutetia.test",
}


def _adapter(handler, api_key="fsq-key"):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    config = PlaceProviderConfig(
        foursquare_api_key=api_key, foursquare_base_url="https://fsq.test/v3"
    )
    return FoursquarePlaceAdapter(config=config, client=client)


def _handler(payload, status=200, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=payload)

    return handler


class TestFetchPlace:
    """Test suite for FoursquarePlaceAdapter.fetch_place."""

    @pytest.mark.asyncio
    async def test_request_shape(self):
        seen = []
        adapter = _adapter(_handler({"results": [LUTETIA]}, seen=seen))

        await adapter.fetch_place(
            "  Hotel Lutetia ",
            SegmentType.HOTEL,
            GeoContext(lat=48.85, lng=2.33, radius_meters=1500.0),
        )

        request = seen[0]
        assert request.url.path == "/v3/places/search"
        assert request.url.params["query"] == "Hotel Lutetia"
        assert request.url.params["categories"] == "19014"
        assert request.url.params["ll"] == "48.85,2.33"
        assert request.url.params["radius"] == "1500"
        assert request.url.params["limit"] == "5"
        assert request.headers["Authorization"] == "fsq-key"

    @pytest.mark.asyncio
    async def test_no_point_no_location_bias(self):
        seen = []
        adapter = _adapter(_handler({"results": [LUTETIA]}, seen=seen))

        await adapter.fetch_place("Le Procope", SegmentType.MEAL, GeoContext(lat=48.8))

        params = seen[0].url.params
        assert params["categories"] == "13065,13034,13383"
        assert "ll" not in params
        assert "radius" not in params

    @pytest.mark.asyncio
    async def test_suggestion(self):
        adapter = _adapter(_handler({"results": [LUTETIA]}))

        suggestion = await adapter.fetch_place("Hotel Lutetia", SegmentType.HOTEL)

        assert suggestion.type == SegmentType.HOTEL
        assert suggestion.title == "Hôtel Lutetia"
        assert suggestion.description == "Hotel"
        assert suggestion.location_address == "45 Boulevard Raspail, Paris, FR"
        assert suggestion.location_lat == 48.8511
        assert suggestion.location_lng == 2.3272
        assert suggestion.provider_name == "Hotel"
        assert suggestion.source == "foursquare"
        assert suggestion.metadata["place_id"] == "4adcda09f964a520e83321e3"
        assert suggestion.metadata["link"] == "https://lutetia.test"
        assert suggestion.highlights == (
            SuggestionHighlight("Rating", "9.1/10"),
            SuggestionHighlight("Hours", "Open 24 hours"),
        )

    @pytest.mark.asyncio
    async def test_formatted_address_wins(self):
        place = {
            **LUTETIA,
            "location": {"formatted_address": "45 Bd Raspail, 75006 Paris"},
            "rating": None,
            "hours": {},
        }
        adapter = _adapter(_handler({"results": [place]}))

        suggestion = await adapter.fetch_place("Lutetia", SegmentType.HOTEL)

        assert suggestion.location_address == "45 Bd Raspail, 75006 Paris"
        assert suggestion.highlights is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"results": []}, {}, []])
    async def test_no_match(self, payload):
        adapter = _adapter(_handler(payload))
        assert await adapter.fetch_place("Nowhere", SegmentType.ACTIVITY) is None

    @pytest.mark.asyncio
    async def test_missing_api_key_never_calls_upstream(self):
        seen = []
        adapter = _adapter(_handler({"results": [LUTETIA]}, seen=seen), api_key="")

        with pytest.raises(ProviderUnavailableError):
            await adapter.fetch_place("Lutetia", SegmentType.HOTEL)

        assert seen == []

    @pytest.mark.asyncio
    async def test_refused_key_is_unavailable(self):
        adapter = _adapter(_handler({"message": "invalid key"}, status=401))

        with pytest.raises(ProviderUnavailableError) as exc_info:
            await adapter.fetch_place("Lutetia", SegmentType.HOTEL)

        assert exc_info.value.provider == "foursquare"


class TestFallbackPlaceProvider:
    NOMINATIM_RESULT = AutofillSuggestion(title="Lutetia", source="nominatim")
    FOURSQUARE_RESULT = AutofillSuggestion(title="Hôtel Lutetia", source="foursquare")

    @pytest.mark.asyncio
    async def test_primary_result_wins(self):
        primary = FakeProvider(result=self.FOURSQUARE_RESULT)
        fallback = FakeProvider(result=self.NOMINATIM_RESULT)
        chain = FallbackPlaceProvider(primary=primary, fallback=fallback)

        suggestion = await chain.fetch_place("Lutetia", SegmentType.HOTEL)

        assert suggestion is self.FOURSQUARE_RESULT
        assert fallback.calls == []

    @pytest.mark.asyncio
    async def test_falls_back_when_primary_finds_nothing(self):
        context = GeoContext(lat=48.85, lng=2.33)
        primary = FakeProvider(result=None)
        fallback = FakeProvider(result=self.NOMINATIM_RESULT)
        chain = FallbackPlaceProvider(primary=primary, fallback=fallback)

        suggestion = await chain.fetch_place("Lutetia", SegmentType.HOTEL, context)

        assert suggestion is self.NOMINATIM_RESULT
        assert fallback.calls == [("place", "Lutetia", SegmentType.HOTEL, context)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            ProviderUnavailableError("down", provider="foursquare"),
            ProviderRequestError("rejected", provider="foursquare"),
        ],
    )
    async def test_falls_back_when_primary_fails(self, error):
        chain = FallbackPlaceProvider(
            primary=FakeProvider(error=error),
            fallback=FakeProvider(result=self.NOMINATIM_RESULT),
        )

        assert await chain.fetch_place("Lutetia", SegmentType.HOTEL) is self.NOMINATIM_RESULT

    @pytest.mark.asyncio
    async def test_fallback_errors_propagate(self):
        chain = FallbackPlaceProvider(
            primary=FakeProvider(result=None),
            fallback=FakeProvider(error=ProviderUnavailableError("down")),
        )

        with pytest.raises(ProviderUnavailableError):
            await chain.fetch_place("Lutetia", SegmentType.HOTEL)

    @pytest.mark.asyncio
    async def test_end_to_end_with_http_primary(self):
        fallback = FakeProvider(result=self.NOMINATIM_RESULT)
        chain = FallbackPlaceProvider(
            primary=_adapter(_handler({"results": []})), fallback=fallback
        )

        assert await chain.fetch_place("Lutetia", SegmentType.HOTEL) is self.NOMINATIM_RESULT
        assert len(fallback.calls) == 1
