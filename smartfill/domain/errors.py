"""Typed domain errors for the Smart Fill service.

Every failure the resolver can surface is one of these types, so the
HTTP layer can map each to a status code without inspecting messages.

All errors inherit from SmartFillError and can optionally wrap a root
cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class SmartFillError(Exception):
    """Base error for the Smart Fill domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class InvalidRequestError(SmartFillError):
    """The inbound autofill request failed validation.

    Attributes:
        field_name: The request field that was missing or invalid
    """

    field_name: str = ""


@dataclass
class SuggestionNotFoundError(SmartFillError):
    """No provider produced a suggestion for the request.

    This is an expected outcome, not a failure of the service.

    Attributes:
        request_type: Canonical segment type of the request
        query: The normalized query text
    """

    request_type: str = ""
    query: str = ""


@dataclass
class ProviderError(SmartFillError):
    """Base class for classified upstream provider failures.

    Attributes:
        provider: Name of the provider that failed (e.g. "aerodatabox")
    """

    provider: str = ""


@dataclass
class ProviderUnavailableError(ProviderError):
    """Upstream outage, rate limit or missing credentials.

    Callers may retry later; this layer never retries on its own.

    Attributes:
        status_code: Upstream HTTP status, when there was one
    """

    status_code: Optional[int] = None


@dataclass
class ProviderRequestError(ProviderError):
    """Upstream rejected the request as malformed or unsatisfiable.

    Retrying the same request will not help.

    Attributes:
        status_code: Upstream HTTP status, when there was one
    """

    status_code: Optional[int] = None


@dataclass
class ConfigurationError(SmartFillError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
    """

    setting_name: str = ""
