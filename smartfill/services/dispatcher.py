"""Provider dispatch - routes a normalized request to its provider."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..domain.models import (
    PLACE_SEGMENT_TYPES,
    AutofillRequest,
    AutofillSuggestion,
    SegmentType,
)
from ..ports.providers import FlightProviderPort, PlaceProviderPort, TrainProviderPort


@dataclass
class ProviderDispatcher:
    """Routes autofill requests to the provider for their segment type.

    - flight -> flight provider (query, date)
    - train, transport -> train provider (query, date)
    - hotel, meal, activity -> place provider (query, category, context)
    - anything else -> None

    Provider errors propagate unchanged.

    Attributes:
        flight_provider: Flight schedule lookups
        train_provider: Train journey lookups
        place_provider: Place searches
    """

    flight_provider: FlightProviderPort
    train_provider: TrainProviderPort
    place_provider: PlaceProviderPort

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def dispatch(self, request: AutofillRequest) -> Optional[AutofillSuggestion]:
        """Resolve a request through its provider.

        Returns:
            The provider's suggestion, or None when nothing matched or no
            provider handles the type.

        Raises:
            ProviderUnavailableError: Upstream outage or throttling.
            ProviderRequestError: Upstream rejected the request.
        """
        if request.type == SegmentType.FLIGHT:
            return await self.flight_provider.fetch_flight(request.query, request.date)

        if request.type in (SegmentType.TRAIN, SegmentType.TRANSPORT):
            return await self.train_provider.fetch_train(request.query, request.date)

        if request.type in PLACE_SEGMENT_TYPES:
            return await self.place_provider.fetch_place(
                request.query, request.type, request.context
            )

        self._logger.debug(
            "No provider for segment type", extra={"type": request.type.value}
        )
        return None
