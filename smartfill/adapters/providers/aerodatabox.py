"""AeroDataBox flight lookup adapter.

Resolves a flight number (and optional date) to a suggestion through the
AeroDataBox API on RapidAPI. A flight number that operates several legs
comes back as a list with one entry per leg; the raw entries are kept
under ``metadata.legs`` for leg extraction downstream.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import httpx

from ...config import FlightProviderConfig, get_config
from ...dates import to_utc_iso
from ...domain.errors import ProviderRequestError, ProviderUnavailableError
from ...domain.models import AutofillSuggestion, SegmentType, collect_highlights
from ._http import get_json, provider_client

PROVIDER = "aerodatabox"

FLIGHT_NUMBER_PATTERN = re.compile(r"^[A-Z0-9]{2}[A-Z]?\d{1,4}[A-Z]?$")
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize_flight_number(query: str) -> str:
    """Strip separators and uppercase, e.g. "ua 120" -> "UA120"."""
    return re.sub(r"[\s\-]+", "", query).upper()


def scheduled_time(endpoint: Mapping[str, Any], which: str) -> Optional[str]:
    """Read a scheduled time from either AeroDataBox payload generation.

    Args:
        endpoint: A ``departure`` or ``arrival`` object.
        which: "local" or "utc".
    """
    nested = endpoint.get("scheduledTime")
    if isinstance(nested, Mapping) and nested.get(which):
        return nested[which]
    flat_key = "scheduledTimeLocal" if which == "local" else "scheduledTimeUtc"
    value = endpoint.get(flat_key)
    return value if isinstance(value, str) and value else None


def _airport(endpoint: Mapping[str, Any]) -> Mapping[str, Any]:
    airport = endpoint.get("airport")
    return airport if isinstance(airport, Mapping) else {}


def _airport_label(endpoint: Mapping[str, Any]) -> Optional[str]:
    airport = _airport(endpoint)
    return airport.get("iata") or airport.get("icao") or airport.get("name")


def _airport_highlight(endpoint: Mapping[str, Any]) -> Optional[str]:
    """Format as "Name (CODE)" when both are known."""
    airport = _airport(endpoint)
    code = airport.get("iata") or airport.get("icao")
    if airport.get("name") and code:
        return f"{airport['name']} ({code})"
    return None


@dataclass
class AeroDataBoxFlightAdapter:
    """Flight provider backed by AeroDataBox.

    This adapter implements FlightProviderPort.

    Attributes:
        config: Flight provider configuration
        client: Optional shared HTTP client (a short-lived one is used otherwise)
    """

    config: FlightProviderConfig = field(default_factory=lambda: get_config().flight)
    client: Optional[httpx.AsyncClient] = field(default=None, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def fetch_flight(
        self, query: str, date: Optional[str] = None
    ) -> Optional[AutofillSuggestion]:
        """Look up a flight by number and optional departure date.

        Raises:
            ProviderRequestError: The query is not a flight number, or the
                date is malformed.
            ProviderUnavailableError: Missing API key or upstream failure.
        """
        number = normalize_flight_number(query)
        if not FLIGHT_NUMBER_PATTERN.match(number):
            raise ProviderRequestError(
                f"'{query}' does not look like a flight number",
                provider=PROVIDER,
            )

        day = date[:10] if date else None
        if day is not None and not _DATE_PATTERN.match(day):
            raise ProviderRequestError(
                f"'{date}' is not a valid flight date", provider=PROVIDER
            )

        if not self.config.api_key:
            raise ProviderUnavailableError(
                "Flight lookups are not configured", provider=PROVIDER
            )

        url = f"{self.config.base_url.rstrip('/')}/flights/number/{number}"
        if day:
            url = f"{url}/{day}"

        self._logger.info(
            "Looking up flight", extra={"flight_number": number, "date": day}
        )

        async with provider_client(self.client, self.config.timeout_seconds) as client:
            payload = await get_json(
                client,
                url,
                provider=PROVIDER,
                params={"withAircraftImage": "false", "withLocation": "true"},
                headers={
                    "X-RapidAPI-Key": self.config.api_key,
                    "X-RapidAPI-Host": self.config.api_host,
                },
            )

        flights = self._flight_entries(payload)
        if not flights:
            self._logger.info("No flight found", extra={"flight_number": number})
            return None

        return self._build_suggestion(number, flights)

    @staticmethod
    def _flight_entries(payload: Any) -> List[Dict[str, Any]]:
        if isinstance(payload, Mapping):
            payload = [payload]
        if not isinstance(payload, list):
            return []
        return [
            entry
            for entry in payload
            if isinstance(entry, Mapping)
            and isinstance(entry.get("departure"), Mapping)
            and isinstance(entry.get("arrival"), Mapping)
        ]

    def _build_suggestion(
        self, number: str, flights: List[Dict[str, Any]]
    ) -> AutofillSuggestion:
        first, last = flights[0], flights[-1]
        departure = first["departure"]
        arrival = last["arrival"]
        dep_airport = _airport(departure)
        arr_airport = _airport(arrival)

        airline = first.get("airline") if isinstance(first.get("airline"), Mapping) else {}
        airline_name = airline.get("name")
        display_number = first.get("number") or number

        origin_label = _airport_label(departure) or "?"
        destination_label = _airport_label(arrival) or "?"

        location = dep_airport.get("location")
        location = location if isinstance(location, Mapping) else {}

        description = None
        if dep_airport.get("name") and arr_airport.get("name"):
            description = f"{dep_airport['name']} to {arr_airport['name']}"
            if airline_name:
                description = f"{airline_name} · {description}"

        aircraft = first.get("aircraft")
        aircraft_model = aircraft.get("model") if isinstance(aircraft, Mapping) else None

        return AutofillSuggestion(
            type=SegmentType.FLIGHT,
            title=f"{display_number} · {origin_label} → {destination_label}",
            description=description,
            location_name=dep_airport.get("name"),
            location_address=dep_airport.get("municipalityName"),
            location_lat=location.get("lat"),
            location_lng=location.get("lon"),
            start_time=to_utc_iso(
                scheduled_time(departure, "utc") or scheduled_time(departure, "local")
            ),
            end_time=to_utc_iso(
                scheduled_time(arrival, "utc") or scheduled_time(arrival, "local")
            ),
            is_all_day=False,
            provider_name=airline_name,
            transport_number=display_number.replace(" ", ""),
            timezone=dep_airport.get("timeZone"),
            metadata={
                "departure": departure,
                "arrival": arrival,
                "legs": flights,
                "status": first.get("status"),
                "aircraft": aircraft_model,
            },
            highlights=collect_highlights(
                ("Departure", _airport_highlight(departure)),
                ("Arrival", _airport_highlight(arrival)),
                ("Airline", airline_name),
                ("Departure Terminal", departure.get("terminal")),
                ("Arrival Terminal", arrival.get("terminal")),
            ),
            source=PROVIDER,
        )
