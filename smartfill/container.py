"""Dependency injection container.

This module provides a simple DI container without external frameworks.
It allows registering and resolving dependencies for the application.

Design principles:
1. No magic - explicit registration and resolution
2. Testable - easy to swap implementations
3. Lazy loading - adapters instantiated on first use
4. Thread-safe - for web server contexts
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, TypeVar

from .config import AppConfig, get_config

T = TypeVar("T")


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        resolver = container.resolve(AutofillResolver)

        # Testing
        container = Container.create_default()
        container.register(FlightProviderPort, lambda: FakeFlightProvider())
        resolver = container.resolve(AutofillResolver)

    Attributes:
        config: Application configuration
    """

    config: AppConfig = field(default_factory=get_config)

    _factories: Dict[type[Any], Callable[[], Any]] = field(
        default_factory=dict, repr=False
    )
    _singletons: Dict[type[Any], Any] = field(default_factory=dict, repr=False)
    _singleton_types: set[type[Any]] = field(default_factory=set, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(
        self,
        port_type: type[Any],
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Register a factory for a port type.

        Re-registering a type drops any instance already built for it.

        Args:
            port_type: The type (usually a Protocol) to register.
            factory: A callable that creates instances of the type.
            singleton: If True, only one instance is created.
        """
        with self._lock:
            self._factories[port_type] = factory
            self._singletons.pop(port_type, None)
            if singleton:
                self._singleton_types.add(port_type)
            else:
                self._singleton_types.discard(port_type)

    def resolve(self, port_type: type[Any]) -> Any:
        """Resolve an instance of a port type.

        Args:
            port_type: The type to resolve.

        Returns:
            An instance of the requested type.

        Raises:
            KeyError: If the type is not registered.
        """
        with self._lock:
            if port_type not in self._factories:
                raise KeyError(f"Type not registered: {port_type}")

            if port_type in self._singleton_types:
                if port_type not in self._singletons:
                    self._singletons[port_type] = self._factories[port_type]()
                return self._singletons[port_type]

            return self._factories[port_type]()

    def clear_singletons(self) -> None:
        """Clear all cached singletons.

        Call this in tests to ensure fresh instances.
        """
        with self._lock:
            self._singletons.clear()

    def clear_all(self) -> None:
        """Clear all registrations and singletons."""
        with self._lock:
            self._factories.clear()
            self._singletons.clear()
            self._singleton_types.clear()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Create a container with default production bindings.

        Args:
            config: Optional configuration override.

        Returns:
            A configured Container instance.
        """
        from .adapters.cache import InMemoryCache, NullCache
        from .adapters.providers import (
            AeroDataBoxFlightAdapter,
            FallbackPlaceProvider,
            FoursquarePlaceAdapter,
            NavitiaTrainAdapter,
            NominatimPlaceAdapter,
        )
        from .ports.cache import CachePort
        from .ports.providers import (
            FlightProviderPort,
            PlaceProviderPort,
            TrainProviderPort,
        )
        from .services import AutofillResolver, ProviderDispatcher

        config = config or get_config()
        container = cls(config=config)

        # Cache (one per process, shared by every request)
        def create_cache() -> CachePort[Any]:
            if not config.autofill.cache_enabled:
                return NullCache(name="autofill")
            return InMemoryCache(
                ttl_seconds=config.autofill.cache_ttl_seconds, name="autofill"
            )

        container.register(CachePort, create_cache)

        # Providers
        container.register(
            FlightProviderPort,
            lambda: AeroDataBoxFlightAdapter(config=config.flight),
        )
        container.register(
            TrainProviderPort,
            lambda: NavitiaTrainAdapter(config=config.train),
        )
        def create_place_provider() -> PlaceProviderPort:
            nominatim = NominatimPlaceAdapter(config=config.place)
            if not config.place.foursquare_api_key:
                return nominatim
            return FallbackPlaceProvider(
                primary=FoursquarePlaceAdapter(config=config.place),
                fallback=nominatim,
            )

        container.register(PlaceProviderPort, create_place_provider)

        container.register(
            ProviderDispatcher,
            lambda: ProviderDispatcher(
                flight_provider=container.resolve(FlightProviderPort),
                train_provider=container.resolve(TrainProviderPort),
                place_provider=container.resolve(PlaceProviderPort),
            ),
        )

        # Main service
        def create_resolver() -> AutofillResolver:
            return AutofillResolver(
                dispatcher=container.resolve(ProviderDispatcher),
                cache=container.resolve(CachePort),
                min_query_length=config.autofill.min_query_length,
                single_flight=config.autofill.single_flight,
            )

        container.register(AutofillResolver, create_resolver)

        return container


# Global default container (lazy initialized)
_default_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Get the default application container.

    Returns:
        The default Container instance (creates one if needed).
    """
    global _default_container
    if _default_container is None:
        with _container_lock:
            if _default_container is None:
                _default_container = Container.create_default()
    return _default_container


def reset_container() -> None:
    """Reset the default container.

    Call this in tests to ensure a fresh container.
    """
    global _default_container
    with _container_lock:
        if _default_container is not None:
            _default_container.clear_all()
        _default_container = None
