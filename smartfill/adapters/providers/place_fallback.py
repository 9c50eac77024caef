"""Place search with an explicit fallback provider.

The primary provider (Foursquare) is asked first. When it finds nothing
or fails, the fallback provider (Nominatim) is asked instead and the
switch is logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ...domain.errors import ProviderError
from ...domain.models import AutofillSuggestion, GeoContext, SegmentType
from ...ports.providers import PlaceProviderPort


@dataclass
class FallbackPlaceProvider:
    """Place provider chaining a primary and a fallback provider.

    This adapter implements PlaceProviderPort.

    Attributes:
        primary: Provider asked first
        fallback: Provider asked when the primary has no answer
    """

    primary: PlaceProviderPort
    fallback: PlaceProviderPort

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def fetch_place(
        self,
        query: str,
        category: SegmentType,
        context: Optional[GeoContext] = None,
    ) -> Optional[AutofillSuggestion]:
        """Search with the primary provider, then the fallback.

        Raises:
            ProviderUnavailableError: The fallback is unavailable.
            ProviderRequestError: The fallback rejected the query.
        """
        primary_name = type(self.primary).__name__
        fallback_name = type(self.fallback).__name__

        try:
            suggestion = await self.primary.fetch_place(query, category, context)
        except ProviderError as e:
            self._logger.warning(
                "Primary place provider failed, using fallback",
                extra={
                    "primary": primary_name,
                    "fallback": fallback_name,
                    "error": str(e),
                },
            )
        else:
            if suggestion is not None:
                return suggestion
            self._logger.debug(
                "Primary place provider found nothing, using fallback",
                extra={"primary": primary_name, "fallback": fallback_name},
            )

        return await self.fallback.fetch_place(query, category, context)
