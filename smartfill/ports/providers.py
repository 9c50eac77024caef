"""Provider ports - Abstractions over the external lookup services.

Each provider resolves a free-text query to at most one suggestion.
Returning None means "nothing matched"; failures are raised as
ProviderUnavailableError or ProviderRequestError.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import AutofillSuggestion, GeoContext, SegmentType


class FlightProviderPort(Protocol):
    """Port for flight schedule lookups by flight number.

    Implementation: adapters/providers/aerodatabox.py
    """

    async def fetch_flight(
        self, query: str, date: Optional[str] = None
    ) -> Optional[AutofillSuggestion]:
        """Look up a flight by number and optional departure date.

        Args:
            query: Flight number as typed by the user (e.g. "UA 120").
            date: Optional ISO date or datetime of departure.

        Returns:
            A suggestion, or None if no flight matched.
        """
        ...


class TrainProviderPort(Protocol):
    """Port for train journey lookups by train number.

    Implementation: adapters/providers/navitia.py
    """

    async def fetch_train(
        self, query: str, date: Optional[str] = None
    ) -> Optional[AutofillSuggestion]:
        """Look up a train journey by number and optional date.

        Args:
            query: Free text containing a train number (e.g. "TGV 6201").
            date: Optional ISO date or datetime of travel.

        Returns:
            A suggestion, or None if no journey matched.
        """
        ...


class PlaceProviderPort(Protocol):
    """Port for place searches (hotels, restaurants, activities).

    Implementations: adapters/providers/foursquare.py,
    adapters/providers/nominatim.py, adapters/providers/place_fallback.py
    """

    async def fetch_place(
        self,
        query: str,
        category: SegmentType,
        context: Optional[GeoContext] = None,
    ) -> Optional[AutofillSuggestion]:
        """Search a place of the given category near an optional point.

        Args:
            query: Place name or description.
            category: One of the place segment types.
            context: Optional geographic hint bounding the search.

        Returns:
            A suggestion, or None if no place matched.
        """
        ...
