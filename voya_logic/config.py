"""Centralized configuration using Pydantic Settings.

This module provides the hard-coded defaults for every tunable of the
scheduling, routing, caching and pricing engine. Runtime settings stored
by the back office (see adapters/settings) take precedence over these
values when present.

Configuration can be overridden via environment variables:
- VOYA_ROUTING_OSRM_BASE_URL=http://localhost:5000
- VOYA_ROUTING_TIMEOUT_SECONDS=2.5
- VOYA_SCHEDULE_TIMEZONE=Europe/Paris
- VOYA_CACHE_ROUTE_TTL_HOURS=24
- etc.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .clock import TIME_PATTERN


class RoutingConfig(BaseSettings):
    """Routing provider configuration.

    Environment variables prefixed with VOYA_ROUTING_.
    """

    model_config = SettingsConfigDict(env_prefix="VOYA_ROUTING_")

    osrm_enabled: bool = True
    osrm_base_url: str = "https://router.project-osrm.org"
    timeout_seconds: float = Field(default=4.5, gt=0)
    fallback_speed_kmh: float = Field(default=30.0, gt=0)


class SchedulingConfig(BaseSettings):
    """Day scheduling defaults.

    Environment variables prefixed with VOYA_SCHEDULE_.
    """

    model_config = SettingsConfigDict(env_prefix="VOYA_SCHEDULE_")

    day_start_time: str = "09:00"
    transition_buffer_min: int = Field(default=10, ge=0)
    timezone: str = "Asia/Kolkata"

    @field_validator("day_start_time")
    @classmethod
    def _check_clock(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError(f"day_start_time must be HH:MM, got {value!r}")
        return value


class CacheConfig(BaseSettings):
    """Route cache configuration.

    Environment variables prefixed with VOYA_CACHE_.
    """

    model_config = SettingsConfigDict(env_prefix="VOYA_CACHE_")

    enabled: bool = True
    route_ttl_hours: float = Field(default=168.0, ge=1)


class PricingConfig(BaseSettings):
    """Pricing defaults.

    Environment variables prefixed with VOYA_PRICING_.
    """

    model_config = SettingsConfigDict(env_prefix="VOYA_PRICING_")

    default_markup_percentage: float = Field(default=20.0, ge=0)
    currency: str = "INR"


class ObservabilityConfig(BaseSettings):
    """Logging and observability configuration.

    Environment variables prefixed with VOYA_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="VOYA_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

    Sub-configurations can be accessed via attributes:

        config = get_config()
        print(config.routing.osrm_base_url)
        print(config.scheduling.day_start_time)

    Environment variables prefixed with VOYA_.
    """

    model_config = SettingsConfigDict(env_prefix="VOYA_")

    routing: RoutingConfig = Field(default_factory=RoutingConfig)
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


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
