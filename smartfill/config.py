"""Centralized configuration using Pydantic Settings.

Every tunable of the Smart Fill service lives here: cache behaviour,
provider credentials and timeouts, logging and the HTTP server binding.

Configuration can be overridden via environment variables:
- SEGMENT_AUTOFILL_CACHE_TTL_SECONDS=1800
- SMARTFILL_FLIGHT_API_KEY=...
- SMARTFILL_TRAIN_COVERAGE=sncf
- SMARTFILL_PLACE_FOURSQUARE_API_KEY=...
- SMARTFILL_LOG_LEVEL=DEBUG
- etc.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CACHE_TTL_SECONDS = 900
MIN_CACHE_TTL_SECONDS = 60

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class AutofillConfig(BaseSettings):
    """Autofill resolver configuration.

    Environment variables prefixed with SEGMENT_AUTOFILL_.
    """

    model_config = SettingsConfigDict(env_prefix="SEGMENT_AUTOFILL_")

    cache_enabled: bool = True
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    single_flight: bool = True
    min_query_length: int = 2

    @field_validator("cache_ttl_seconds", mode="before")
    @classmethod
    def parse_cache_ttl(cls, value: Any) -> int:
        """Parse the TTL like an integer prefix and clamp it to the floor.

        Non-numeric input falls back to the default instead of failing
        startup.
        """
        if isinstance(value, bool):
            return DEFAULT_CACHE_TTL_SECONDS
        if isinstance(value, (int, float)):
            parsed = int(value)
        else:
            match = _LEADING_INT.match(str(value))
            if match is None:
                return DEFAULT_CACHE_TTL_SECONDS
            parsed = int(match.group(1))
        return max(MIN_CACHE_TTL_SECONDS, parsed)


class FlightProviderConfig(BaseSettings):
    """AeroDataBox flight lookup configuration.

    Environment variables prefixed with SMARTFILL_FLIGHT_.
    """

    model_config = SettingsConfigDict(env_prefix="SMARTFILL_FLIGHT_")

    api_key: str = ""
    api_host: str = "aerodatabox.p.rapidapi.com"
    base_url: str = "https://aerodatabox.p.rapidapi.com"
    timeout_seconds: float = 10.0


class TrainProviderConfig(BaseSettings):
    """Navitia train lookup configuration.

    Environment variables prefixed with SMARTFILL_TRAIN_.
    """

    model_config = SettingsConfigDict(env_prefix="SMARTFILL_TRAIN_")

    token: str = ""
    base_url: str = "https://api.navitia.io/v1"
    coverage: str = "sncf"
    timeout_seconds: float = 10.0


class PlaceProviderConfig(BaseSettings):
    """Place search configuration (Foursquare first when keyed, then Nominatim).

    Environment variables prefixed with SMARTFILL_PLACE_.
    """

    model_config = SettingsConfigDict(env_prefix="SMARTFILL_PLACE_")

    user_agent: str = "smartfill-segment-autofill"
    domain: str = "nominatim.openstreetmap.org"
    timeout_seconds: int = 10
    rate_limit_delay: float = 1.0
    default_radius_meters: float = 5000.0
    language: str = "en"

    foursquare_api_key: str = ""
    foursquare_base_url: str = "https://api.foursquare.com/v3"
    foursquare_limit: int = 5


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Environment variables prefixed with SMARTFILL_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="SMARTFILL_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ApiConfig(BaseSettings):
    """HTTP server configuration.

    Environment variables prefixed with SMARTFILL_API_.
    """

    model_config = SettingsConfigDict(env_prefix="SMARTFILL_API_")

    host: str = "127.0.0.1"
    port: int = 8000


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

        config = get_config()
        print(config.autofill.cache_ttl_seconds)
        print(config.flight.base_url)

    Environment variables prefixed with SMARTFILL_.
    """

    model_config = SettingsConfigDict(env_prefix="SMARTFILL_")

    autofill: AutofillConfig = Field(default_factory=AutofillConfig)
    flight: FlightProviderConfig = Field(default_factory=FlightProviderConfig)
    train: TrainProviderConfig = Field(default_factory=TrainProviderConfig)
    place: PlaceProviderConfig = Field(default_factory=PlaceProviderConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache.

    Call this in tests to ensure a fresh configuration is loaded.
    """
    get_config.cache_clear()
