"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the autofill core and external
adapters. They enable dependency injection and make the system testable.
"""

from .cache import CachePort, Clock
from .providers import FlightProviderPort, PlaceProviderPort, TrainProviderPort

__all__ = [
    # Cache
    "CachePort",
    "Clock",
    # Providers
    "FlightProviderPort",
    "TrainProviderPort",
    "PlaceProviderPort",
]
