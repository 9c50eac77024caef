"""Foursquare Places place search adapter.

Searches hotels, restaurants and activities through the Foursquare
Places v3 API, filtered by the Foursquare category ids of the segment
type and biased towards the request's geographic context.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import httpx

from ...config import PlaceProviderConfig, get_config
from ...domain.errors import ProviderUnavailableError
from ...domain.models import (
    AutofillSuggestion,
    GeoContext,
    SegmentType,
    collect_highlights,
)
from ...services.normalizer import coerce_number
from ._http import get_json, provider_client

PROVIDER = "foursquare"

# Foursquare taxonomy ids per place segment type
FOURSQUARE_CATEGORIES: Dict[SegmentType, str] = {
    SegmentType.HOTEL: "19014",
    SegmentType.MEAL: "13065,13034,13383",
    SegmentType.ACTIVITY: "10000,11000",
}

_FIELDS = "fsq_id,name,location,geocodes,categories,rating,hours,website,link"


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _address(location: Mapping[str, Any]) -> Optional[str]:
    if location.get("formatted_address"):
        return location["formatted_address"]
    parts = [
        location.get(key) for key in ("address", "locality", "region", "country")
    ]
    return ", ".join(str(p) for p in parts if p) or None


def _first_category(place: Mapping[str, Any]) -> Optional[str]:
    categories = place.get("categories")
    if isinstance(categories, list) and categories:
        return _mapping(categories[0]).get("name")
    return None


@dataclass
class FoursquarePlaceAdapter:
    """Place provider backed by Foursquare Places.

    This adapter implements PlaceProviderPort.

    Attributes:
        config: Place provider configuration
        client: Optional shared HTTP client
    """

    config: PlaceProviderConfig = field(default_factory=lambda: get_config().place)
    client: Optional[httpx.AsyncClient] = field(default=None, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def fetch_place(
        self,
        query: str,
        category: SegmentType,
        context: Optional[GeoContext] = None,
    ) -> Optional[AutofillSuggestion]:
        """Search the most popular matching place of the given category.

        Raises:
            ProviderUnavailableError: Missing API key or upstream failure.
            ProviderRequestError: Foursquare rejected the query.
        """
        if not self.config.foursquare_api_key:
            raise ProviderUnavailableError(
                "Foursquare place search is not configured", provider=PROVIDER
            )

        params: Dict[str, Any] = {
            "query": query.strip(),
            "limit": self.config.foursquare_limit,
            "sort": "POPULARITY",
            "fields": _FIELDS,
        }
        if category in FOURSQUARE_CATEGORIES:
            params["categories"] = FOURSQUARE_CATEGORIES[category]
        if context is not None and context.has_point:
            params["ll"] = f"{context.lat},{context.lng}"
            if context.radius_meters:
                params["radius"] = int(context.radius_meters)

        self._logger.info(
            "Searching place",
            extra={
                "query": query,
                "category": category.value,
                "context": context.to_dict() if context is not None else None,
            },
        )

        async with provider_client(self.client, self.config.timeout_seconds) as client:
            payload = await get_json(
                client,
                f"{self.config.foursquare_base_url.rstrip('/')}/places/search",
                provider=PROVIDER,
                params=params,
                headers={
                    "Authorization": self.config.foursquare_api_key,
                    "Accept": "application/json",
                },
            )

        results = _mapping(payload).get("results")
        if not isinstance(results, list) or not results:
            self._logger.debug("Foursquare returned no result", extra={"query": query})
            return None

        return self._build_suggestion(_mapping(results[0]), category)

    def _build_suggestion(
        self, place: Mapping[str, Any], category: SegmentType
    ) -> AutofillSuggestion:
        location = _mapping(place.get("location"))
        point = _mapping(_mapping(place.get("geocodes")).get("main"))
        hours = _mapping(place.get("hours"))
        display_hours = hours.get("display")
        if isinstance(display_hours, list):
            display_hours = display_hours[0] if display_hours else None

        rating = coerce_number(place.get("rating"))
        category_name = _first_category(place)

        return AutofillSuggestion(
            type=category,
            title=place.get("name"),
            description=category_name,
            location_name=place.get("name"),
            location_address=_address(location),
            location_lat=coerce_number(point.get("latitude", location.get("lat"))),
            location_lng=coerce_number(point.get("longitude", location.get("lng"))),
            provider_name=category_name,
            metadata={
                "category": category.value,
                "place_id": place.get("fsq_id"),
                "hours": place.get("hours"),
                "link": place.get("website") or place.get("link"),
            },
            highlights=collect_highlights(
                ("Rating", f"{rating:g}/10" if rating is not None else None),
                ("Hours", display_hours),
            ),
            source=PROVIDER,
        )
