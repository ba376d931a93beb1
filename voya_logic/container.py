"""Dependency injection container.

This module provides a simple DI container without external frameworks.
It allows registering and resolving the engine's adapters and services.

Design principles:
1. No magic - explicit registration and resolution
2. Testable - easy to swap implementations
3. Lazy loading - adapters instantiated on first use
4. Thread-safe - for web server contexts
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .config import AppConfig, RoutingConfig, get_config

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        service = container.resolve(LogicService)

        # Testing
        container = Container()
        container.register(PlaceCatalogPort, lambda: InMemoryPlaceCatalog())
        catalog = container.resolve(PlaceCatalogPort)

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

    def is_registered(self, port_type: type[Any]) -> bool:
        return port_type in self._factories

    def clear_singletons(self) -> None:
        """Clear all cached singletons.

        Call this in tests to ensure fresh instances.
        """
        with self._lock:
            self._singletons.clear()

    def clear_all(self) -> None:
        with self._lock:
            self._factories.clear()
            self._singletons.clear()
            self._singleton_types.clear()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Create a container with default in-process bindings.

        Args:
            config: Optional configuration override.

        Returns:
            A configured Container instance.
        """
        from .adapters.audit import LoggingRunLogWriter
        from .adapters.cache import InMemoryRouteCacheStore, NullRouteCacheStore
        from .adapters.catalog import InMemoryPlaceCatalog
        from .adapters.itinerary import InMemoryItineraryRepository
        from .adapters.routing import HaversineRouteProvider, OsrmRouteProvider
        from .adapters.settings import InMemorySettingsStore
        from .ports.audit import RunLogPort
        from .ports.cache import RouteCacheStorePort
        from .ports.catalog import PlaceCatalogPort, SettingsPort
        from .ports.itinerary import ItineraryRepositoryPort
        from .services import (
            DayAutoScheduler,
            LogicService,
            LogisticsResolver,
            PricingEngine,
            RouteCache,
            TimeWindowValidator,
        )

        config = config or get_config()
        container = cls(config=config)

        # Settings and catalog
        container.register(SettingsPort, lambda: InMemorySettingsStore(config))
        container.register(PlaceCatalogPort, lambda: InMemoryPlaceCatalog())

        # Route cache storage based on config
        def create_route_store() -> RouteCacheStorePort:
            if config.cache.enabled:
                return InMemoryRouteCacheStore(name="routes")
            return NullRouteCacheStore()

        container.register(RouteCacheStorePort, create_route_store)

        # Routing provider chain
        def create_resolver() -> LogisticsResolver:
            routing = _routing_from_settings(config.routing, container.resolve(SettingsPort))
            providers = [OsrmRouteProvider(routing)] if routing.osrm_enabled else []
            return LogisticsResolver(
                providers=tuple(providers),
                fallback=HaversineRouteProvider(routing),
            )

        container.register(LogisticsResolver, create_resolver)

        container.register(
            RouteCache,
            lambda: RouteCache(
                store=container.resolve(RouteCacheStorePort),
                resolver=container.resolve(LogisticsResolver),
                settings=container.resolve(SettingsPort),
                default_ttl_hours=config.cache.route_ttl_hours,
            ),
        )

        container.register(
            DayAutoScheduler,
            lambda: DayAutoScheduler(
                route_fn=container.resolve(RouteCache).resolve_with_cache,
                validator=TimeWindowValidator(timezone=config.scheduling.timezone),
            ),
        )

        # Pricing
        container.register(ItineraryRepositoryPort, lambda: InMemoryItineraryRepository())
        container.register(
            PricingEngine,
            lambda: PricingEngine(
                config=config.pricing,
                settings=container.resolve(SettingsPort),
                repository=container.resolve(ItineraryRepositoryPort),
            ),
        )

        # Audit
        container.register(RunLogPort, lambda: LoggingRunLogWriter())

        # Main service
        def create_logic_service() -> LogicService:
            return LogicService(
                catalog=container.resolve(PlaceCatalogPort),
                settings=container.resolve(SettingsPort),
                route_cache=container.resolve(RouteCache),
                run_log=container.resolve(RunLogPort),
            )

        container.register(LogicService, create_logic_service)

        return container


def _routing_from_settings(routing: RoutingConfig, settings: Any) -> RoutingConfig:
    """Apply the OSRM base URL and timeout settings on top of configuration."""
    from .adapters.settings.memory_settings import OSRM_BASE_URL, OSRM_TIMEOUT_SECONDS

    update: Dict[str, Any] = {}
    base_url = settings.get(OSRM_BASE_URL)
    if base_url:
        update["osrm_base_url"] = str(base_url)
    timeout = settings.get(OSRM_TIMEOUT_SECONDS)
    try:
        if timeout is not None and float(timeout) > 0:
            update["timeout_seconds"] = float(timeout)
    except (TypeError, ValueError):
        logger.warning("Invalid OSRM timeout setting, using config", extra={"value": repr(timeout)})
    return routing.model_copy(update=update) if update else routing


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
