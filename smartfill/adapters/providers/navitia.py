"""Navitia train lookup adapter.

Resolves a train number to the matching vehicle journey for a given day.
Stop times are rewritten as dated ``stop_times`` records so the leg
extraction can pair consecutive stops into legs.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date as date_type
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional

import httpx

from ...config import TrainProviderConfig, get_config
from ...domain.errors import ProviderRequestError, ProviderUnavailableError
from ...domain.models import AutofillSuggestion, SegmentType, collect_highlights
from ._http import get_json, provider_client

PROVIDER = "navitia"

_DIGITS = re.compile(r"\d+")
_NAVITIA_TIME = re.compile(r"^(\d{2})(\d{2})(\d{2})$")


def extract_train_number(query: str) -> Optional[str]:
    """Return the last run of digits in the query ("TGV 6201" -> "6201")."""
    runs = _DIGITS.findall(query)
    return runs[-1] if runs else None


def _dig(payload: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(payload, Mapping):
            return None
        payload = payload.get(key)
    return payload


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def dated_stop_times(
    stop_times: List[Mapping[str, Any]], day: date_type
) -> List[Dict[str, Any]]:
    """Attach calendar dates to Navitia's ``HHMMSS`` stop times.

    A time earlier than the previous one means the journey crossed
    midnight, so the date rolls forward.
    """
    out: List[Dict[str, Any]] = []
    current_day = day
    previous: Optional[datetime] = None

    def stamp(raw: Any) -> Optional[str]:
        nonlocal current_day, previous
        if not isinstance(raw, str):
            return None
        match = _NAVITIA_TIME.match(raw)
        if match is None:
            return None
        hours, minutes, seconds = (int(g) for g in match.groups())
        moment = datetime(
            current_day.year, current_day.month, current_day.day
        ) + timedelta(hours=hours, minutes=minutes, seconds=seconds)
        if previous is not None and moment < previous:
            current_day += timedelta(days=1)
            moment += timedelta(days=1)
        previous = moment
        return moment.isoformat()

    for stop in stop_times:
        if not isinstance(stop, Mapping):
            continue
        stop_point = stop.get("stop_point")
        stop_point = stop_point if isinstance(stop_point, Mapping) else {}
        name = stop_point.get("name") or stop_point.get("label")
        arrival = stamp(stop.get("arrival_time"))
        departure = stamp(stop.get("departure_time"))
        out.append(
            {
                "name": name,
                "stop_point": {
                    "name": name,
                    "coord": stop_point.get("coord"),
                },
                "arrival_date_time": arrival,
                "departure_date_time": departure,
            }
        )
    return out


@dataclass
class NavitiaTrainAdapter:
    """Train provider backed by the Navitia vehicle_journeys API.

    This adapter implements TrainProviderPort.

    Attributes:
        config: Train provider configuration
        client: Optional shared HTTP client
        today: Returns the default travel day when the request has no date
    """

    config: TrainProviderConfig = field(default_factory=lambda: get_config().train)
    client: Optional[httpx.AsyncClient] = field(default=None, repr=False)
    today: Callable[[], date_type] = field(default=date_type.today, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def fetch_train(
        self, query: str, date: Optional[str] = None
    ) -> Optional[AutofillSuggestion]:
        """Look up a train journey by number and optional date.

        Raises:
            ProviderRequestError: No train number in the query, or a
                malformed date.
            ProviderUnavailableError: Missing token or upstream failure.
        """
        number = extract_train_number(query)
        if number is None:
            raise ProviderRequestError(
                f"'{query}' does not contain a train number", provider=PROVIDER
            )

        try:
            day = date_type.fromisoformat(date[:10]) if date else self.today()
        except ValueError as e:
            raise ProviderRequestError(
                f"'{date}' is not a valid travel date", provider=PROVIDER, cause=e
            )

        if not self.config.token:
            raise ProviderUnavailableError(
                "Train lookups are not configured", provider=PROVIDER
            )

        compact = day.strftime("%Y%m%d")
        url = (
            f"{self.config.base_url.rstrip('/')}/coverage/"
            f"{self.config.coverage}/vehicle_journeys"
        )

        self._logger.info(
            "Looking up train",
            extra={"train_number": number, "date": day.isoformat()},
        )

        async with provider_client(self.client, self.config.timeout_seconds) as client:
            payload = await get_json(
                client,
                url,
                provider=PROVIDER,
                params={
                    "headsign": number,
                    "since": f"{compact}T000000",
                    "until": f"{compact}T235959",
                    "depth": 3,
                },
                headers={"Authorization": self.config.token},
            )

        journeys = _dig(payload, "vehicle_journeys")
        if not isinstance(journeys, list) or not journeys:
            self._logger.info("No train found", extra={"train_number": number})
            return None

        journey = journeys[0]
        if not isinstance(journey, Mapping):
            return None
        stop_times = dated_stop_times(journey.get("stop_times") or [], day)
        if not stop_times:
            return None

        return self._build_suggestion(
            number, journey, stop_times, _dig(payload, "context", "timezone")
        )

    def _build_suggestion(
        self,
        number: str,
        journey: Mapping[str, Any],
        stop_times: List[Dict[str, Any]],
        timezone: Optional[str],
    ) -> AutofillSuggestion:
        first, last = stop_times[0], stop_times[-1]
        line = _dig(journey, "journey_pattern", "route", "line")
        mode = _dig(line, "commercial_mode", "name") or "Train"
        network = _dig(line, "network", "name")
        headsign = journey.get("headsign") or journey.get("name") or number
        coord = _dig(first, "stop_point", "coord") or {}
        origin, destination = first["name"], last["name"]

        title = f"{mode} {headsign}"
        description = None
        if origin and destination:
            title = f"{title} · {origin} → {destination}"
            description = f"{origin} to {destination}"

        return AutofillSuggestion(
            type=SegmentType.TRAIN,
            title=title,
            description=description,
            location_name=origin,
            location_lat=_to_float(coord.get("lat")),
            location_lng=_to_float(coord.get("lon")),
            start_time=first["departure_date_time"] or first["arrival_date_time"],
            end_time=last["arrival_date_time"] or last["departure_date_time"],
            is_all_day=False,
            provider_name=network,
            transport_number=str(headsign),
            timezone=timezone,
            metadata={
                "vehicle_journey_id": journey.get("id"),
                "commercial_mode": mode,
                "stop_times": stop_times,
            },
            highlights=collect_highlights(
                ("Depart", origin),
                ("Arrive", destination),
                ("Line", _dig(line, "name")),
            ),
            source=PROVIDER,
        )
