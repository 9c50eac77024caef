"""Autofill resolver service - Main orchestrator.

Normalizes an inbound request, serves a fresh cached suggestion when one
exists, and otherwise asks the provider dispatcher, caches the result
and returns it. Errors are classified, never retried or swallowed.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..domain.errors import (
    InvalidRequestError,
    ProviderRequestError,
    ProviderUnavailableError,
    SuggestionNotFoundError,
)
from ..domain.models import (
    AutofillRequest,
    AutofillResponse,
    AutofillResult,
    AutofillSuggestion,
    CacheStatus,
)
from ..ports.cache import CachePort
from .cache_key import build_cache_key
from .dispatcher import ProviderDispatcher
from .leg_extraction import normalize_suggestion_legs
from .normalizer import normalize_request

MISSING_FIELDS_MESSAGE = "Provide a type and query to use smart fill."
NOT_FOUND_MESSAGE = "No matching details found for that request."
GENERIC_FAILURE_MESSAGE = "We could not complete that smart fill request."


@dataclass
class AutofillResolver:
    """Main service for resolving Smart Fill requests.

    The flow for one request:
    1. Normalize and validate the raw body
    2. Build the cache key and return a fresh cached suggestion if any
    3. Dispatch to the provider for the segment type
    4. Normalize legs, cache and return the suggestion

    With single-flight enabled, concurrent misses for the same key share
    one provider call instead of each issuing their own.

    Attributes:
        dispatcher: Routes requests to providers
        cache: Suggestion cache shared by all requests of the process
        min_query_length: Shortest accepted query after trimming
        single_flight: Deduplicate concurrent identical provider calls
    """

    dispatcher: ProviderDispatcher
    cache: CachePort[AutofillSuggestion]
    min_query_length: int = 2
    single_flight: bool = True

    _in_flight: Dict[str, "asyncio.Future[Optional[AutofillSuggestion]]"] = field(
        default_factory=dict, repr=False
    )
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def parse(self, raw: Any) -> AutofillRequest:
        """Normalize and validate a raw request body.

        Raises:
            InvalidRequestError: Unknown type, missing query, or a query
                shorter than the minimum length.
        """
        request = normalize_request(raw)
        if request is None:
            raise InvalidRequestError(MISSING_FIELDS_MESSAGE, field_name="type")
        if len(request.query) < self.min_query_length:
            raise InvalidRequestError(
                f"Query must be at least {self.min_query_length} characters.",
                field_name="query",
            )
        return request

    async def resolve(self, raw: Any) -> AutofillResult:
        """Resolve a raw request body to a suggestion.

        Raises:
            InvalidRequestError: The body failed validation.
            SuggestionNotFoundError: No provider produced a suggestion.
            ProviderUnavailableError: Upstream outage or throttling.
            ProviderRequestError: Upstream rejected the request.
        """
        return await self.resolve_request(self.parse(raw))

    async def resolve_request(self, request: AutofillRequest) -> AutofillResult:
        """Resolve an already normalized request (see resolve)."""
        key = build_cache_key(request)

        cached = self.cache.get(key)
        if cached is not None:
            self._logger.info(
                "Smart fill served from cache",
                extra={"type": request.type.value, "key": key},
            )
            return AutofillResult(suggestion=cached, cache=CacheStatus.HIT)

        suggestion = await self._lookup(request, key)
        if suggestion is None:
            self._logger.info(
                "Smart fill found nothing",
                extra={"type": request.type.value, "query": request.query},
            )
            raise SuggestionNotFoundError(
                NOT_FOUND_MESSAGE,
                request_type=request.type.value,
                query=request.query,
            )

        return AutofillResult(suggestion=suggestion, cache=CacheStatus.MISS)

    async def _fetch(
        self, request: AutofillRequest, key: str
    ) -> Optional[AutofillSuggestion]:
        suggestion = await self.dispatcher.dispatch(request)
        if suggestion is None:
            return None
        suggestion = normalize_suggestion_legs(suggestion)
        self.cache.set(key, suggestion)
        self._logger.info(
            "Smart fill resolved by provider",
            extra={"type": request.type.value, "source": suggestion.source},
        )
        return suggestion

    async def _lookup(
        self, request: AutofillRequest, key: str
    ) -> Optional[AutofillSuggestion]:
        if not self.single_flight:
            return await self._fetch(request, key)

        pending = self._in_flight.get(key)
        if pending is not None:
            self._logger.debug("Joining in-flight lookup", extra={"key": key})
            return await asyncio.shield(pending)

        task = asyncio.ensure_future(self._fetch(request, key))
        self._in_flight[key] = task

        def _release(done: "asyncio.Future[Optional[AutofillSuggestion]]") -> None:
            if self._in_flight.get(key) is done:
                del self._in_flight[key]

        task.add_done_callback(_release)
        return await asyncio.shield(task)

    async def respond(self, raw: Any) -> AutofillResponse:
        """Resolve a raw body and map every outcome to a status and JSON body.

        Returns:
            200 with ``{data, meta}``; otherwise ``{error}`` with 400, 404,
            502, 503 or 500.
        """
        try:
            result = await self.resolve(raw)
            return AutofillResponse(status_code=200, body=result.to_dict())
        except InvalidRequestError as e:
            return AutofillResponse(status_code=400, body={"error": e.message})
        except SuggestionNotFoundError as e:
            return AutofillResponse(status_code=404, body={"error": e.message})
        except ProviderUnavailableError as e:
            self._logger.warning(
                "Provider unavailable",
                extra={"provider": e.provider, "error": str(e)},
            )
            return AutofillResponse(status_code=503, body={"error": e.message})
        except ProviderRequestError as e:
            self._logger.warning(
                "Provider rejected request",
                extra={"provider": e.provider, "error": str(e)},
            )
            return AutofillResponse(status_code=502, body={"error": e.message})
        except Exception:
            self._logger.exception("Unexpected error in smart fill")
            return AutofillResponse(
                status_code=500, body={"error": GENERIC_FAILURE_MESSAGE}
            )
