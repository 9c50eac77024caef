"""Nominatim place search adapter.

Looks up hotels, restaurants and activities through OpenStreetMap's
Nominatim service via geopy, with:
- Rate limiting (geopy RateLimiter)
- An optional viewbox around the request's geographic context
- geopy errors classified into the provider error taxonomy

geopy is synchronous, so each lookup runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from geopy.exc import (
    GeocoderAuthenticationFailure,
    GeocoderInsufficientPrivileges,
    GeocoderQueryError,
    GeocoderQuotaExceeded,
    GeocoderRateLimited,
    GeocoderServiceError,
    GeocoderTimedOut,
    GeocoderUnavailable,
)
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import Nominatim

from ...config import PlaceProviderConfig, get_config
from ...domain.errors import ProviderRequestError, ProviderUnavailableError
from ...domain.models import (
    AutofillSuggestion,
    GeoContext,
    SegmentType,
    collect_highlights,
)

PROVIDER = "nominatim"

METERS_PER_DEGREE = 111_320.0

# OSM tags surfaced in the description, per category
_DESCRIPTION_TAGS: Dict[SegmentType, Tuple[Tuple[str, str], ...]] = {
    SegmentType.HOTEL: (("stars", "Stars"), ("rooms", "Rooms")),
    SegmentType.MEAL: (("cuisine", "Cuisine"), ("opening_hours", "Hours")),
    SegmentType.ACTIVITY: (("opening_hours", "Hours"), ("fee", "Fee")),
}

_CONTACT_TAGS = ("website", "phone", "opening_hours")


def viewbox_around(
    lat: float, lng: float, radius_meters: float
) -> List[Tuple[float, float]]:
    """Return the (south-west, north-east) corners of a box around a point."""
    dlat = radius_meters / METERS_PER_DEGREE
    cos_lat = max(math.cos(math.radians(lat)), 0.01)
    dlng = radius_meters / (METERS_PER_DEGREE * cos_lat)
    return [
        (max(lat - dlat, -90.0), max(lng - dlng, -180.0)),
        (min(lat + dlat, 90.0), min(lng + dlng, 180.0)),
    ]


@dataclass
class NominatimPlaceAdapter:
    """Place provider backed by Nominatim.

    This adapter implements PlaceProviderPort.

    Attributes:
        config: Place provider configuration
    """

    config: PlaceProviderConfig = field(default_factory=lambda: get_config().place)

    _geolocator: Optional[Nominatim] = field(default=None, repr=False)
    _geocode_fn: Optional[Any] = field(default=None, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _get_geocoder(self) -> Any:
        """Get or initialize the geocoder with rate limiting."""
        if self._geocode_fn is not None:
            return self._geocode_fn

        self._logger.debug(
            "Initializing Nominatim geocoder",
            extra={
                "user_agent": self.config.user_agent,
                "timeout": self.config.timeout_seconds,
            },
        )

        self._geolocator = Nominatim(
            user_agent=self.config.user_agent,
            timeout=self.config.timeout_seconds,
            domain=self.config.domain,
        )

        self._geocode_fn = RateLimiter(
            self._geolocator.geocode,
            min_delay_seconds=self.config.rate_limit_delay,
            max_retries=0,
            swallow_exceptions=False,
        )

        return self._geocode_fn

    async def fetch_place(
        self,
        query: str,
        category: SegmentType,
        context: Optional[GeoContext] = None,
    ) -> Optional[AutofillSuggestion]:
        """Search a place of the given category near an optional point.

        Raises:
            ProviderUnavailableError: Timeout, outage, throttling or refused access.
            ProviderRequestError: Nominatim rejected the query.
        """
        kwargs: Dict[str, Any] = {
            "exactly_one": True,
            "addressdetails": True,
            "extratags": True,
            "namedetails": True,
            "language": self.config.language,
        }
        if context is not None and context.has_point:
            radius = context.radius_meters or self.config.default_radius_meters
            kwargs["viewbox"] = viewbox_around(
                context.lat, context.lng, radius  # type: ignore[arg-type]
            )
            kwargs["bounded"] = True

        self._logger.info(
            "Searching place",
            extra={
                "query": query,
                "category": category.value,
                "bounded": "viewbox" in kwargs,
            },
        )

        try:
            geocode_fn = self._get_geocoder()
            location = await asyncio.to_thread(geocode_fn, query, **kwargs)
        except (
            GeocoderTimedOut,
            GeocoderUnavailable,
            GeocoderRateLimited,
            GeocoderQuotaExceeded,
            GeocoderAuthenticationFailure,
            GeocoderInsufficientPrivileges,
        ) as e:
            self._logger.warning(
                "Place search unavailable", extra={"query": query, "error": str(e)}
            )
            raise ProviderUnavailableError(
                "Place search is unavailable right now", provider=PROVIDER, cause=e
            )
        except GeocoderQueryError as e:
            raise ProviderRequestError(
                "Place search rejected the query", provider=PROVIDER, cause=e
            )
        except GeocoderServiceError as e:
            self._logger.warning(
                "Place search service error", extra={"query": query, "error": str(e)}
            )
            raise ProviderUnavailableError(
                "Place search failed", provider=PROVIDER, cause=e
            )

        if location is None:
            self._logger.debug("Place search returned no result", extra={"query": query})
            return None

        return self._build_suggestion(location, category)

    def _build_suggestion(self, location: Any, category: SegmentType) -> AutofillSuggestion:
        raw: Dict[str, Any] = location.raw or {}
        extratags: Dict[str, Any] = raw.get("extratags") or {}
        address: Dict[str, Any] = raw.get("address") or {}
        display_name = location.address or raw.get("display_name") or ""

        name = (
            raw.get("name")
            or (raw.get("namedetails") or {}).get("name")
            or display_name.split(",")[0].strip()
            or None
        )

        details = [
            f"{label}: {extratags[tag]}"
            for tag, label in _DESCRIPTION_TAGS.get(category, ())
            if extratags.get(tag)
        ]

        metadata: Dict[str, Any] = {
            "category": category.value,
            "osm_type": raw.get("osm_type"),
            "osm_id": raw.get("osm_id"),
            "osm_class": raw.get("class") or raw.get("category"),
            "osm_tag": raw.get("type"),
        }
        for tag in _CONTACT_TAGS:
            if extratags.get(tag):
                metadata[tag] = extratags[tag]
        if address.get("city") or address.get("town"):
            metadata["city"] = address.get("city") or address.get("town")

        return AutofillSuggestion(
            type=category,
            title=name,
            description=" · ".join(details) or None,
            location_name=name,
            location_address=display_name or None,
            location_lat=float(location.latitude),
            location_lng=float(location.longitude),
            provider_name=extratags.get("brand") or extratags.get("operator"),
            metadata=metadata,
            highlights=collect_highlights(("Hours", extratags.get("opening_hours"))),
            source=PROVIDER,
        )
