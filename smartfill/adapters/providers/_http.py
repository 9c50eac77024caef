"""Shared HTTP plumbing for the JSON provider adapters.

Maps transport failures and upstream status codes onto the provider
error taxonomy so every adapter classifies failures the same way:

- 204 / 404: no match (None)
- 401 / 403 / 429 / 5xx, timeouts, connection errors: unavailable
- any other 4xx: request error
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Optional

import httpx

from ...domain.errors import ProviderRequestError, ProviderUnavailableError

logger = logging.getLogger(__name__)

_NOT_FOUND_STATUSES = frozenset({204, 404})
_UNAVAILABLE_STATUSES = frozenset({401, 403, 408, 429})


def classify_status(response: httpx.Response, provider: str) -> None:
    """Raise the provider error matching a non-success status.

    Args:
        response: The upstream response.
        provider: Provider name for error reporting.

    Raises:
        ProviderUnavailableError: Outage, throttling or refused credentials.
        ProviderRequestError: Upstream rejected the request itself.
    """
    status = response.status_code
    if status < 400:
        return
    if status in _UNAVAILABLE_STATUSES or status >= 500:
        raise ProviderUnavailableError(
            f"{provider} is unavailable right now (HTTP {status})",
            provider=provider,
            status_code=status,
        )
    raise ProviderRequestError(
        f"{provider} rejected the lookup (HTTP {status})",
        provider=provider,
        status_code=status,
    )


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    provider: str,
    params: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Optional[Any]:
    """GET a JSON document from a provider.

    Returns:
        The decoded JSON body, or None when the provider reports no match.

    Raises:
        ProviderUnavailableError: Network failure, timeout or outage.
        ProviderRequestError: The provider rejected the request.
    """
    try:
        response = await client.get(url, params=params, headers=headers)
    except httpx.TimeoutException as e:
        raise ProviderUnavailableError(
            f"{provider} timed out", provider=provider, cause=e
        )
    except httpx.TransportError as e:
        raise ProviderUnavailableError(
            f"{provider} could not be reached", provider=provider, cause=e
        )

    logger.debug(
        "Provider responded",
        extra={"provider": provider, "status": response.status_code},
    )

    if response.status_code in _NOT_FOUND_STATUSES:
        return None
    classify_status(response, provider)

    try:
        return response.json()
    except ValueError as e:
        raise ProviderUnavailableError(
            f"{provider} returned an unreadable response",
            provider=provider,
            status_code=response.status_code,
            cause=e,
        )


@asynccontextmanager
async def provider_client(
    client: Optional[httpx.AsyncClient], timeout_seconds: float
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a short-lived one owned by this call."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout_seconds) as owned:
        yield owned
