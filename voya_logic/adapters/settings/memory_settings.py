"""In-memory builder settings store.

Implements SettingsPort. Values written with set() take precedence over
the defaults derived from AppConfig, which mirror the back office's
seeded settings.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ...config import AppConfig, get_config

DAY_START_TIME = "day_start_time"
TRANSITION_BUFFER_MIN = "default_transition_buffer_min"
ROUTE_CACHE_TTL_HOURS = "route_cache_ttl_hours"
LOGIC_TIMEZONE = "logic_timezone"
OSRM_BASE_URL = "osrm_base_url"
OSRM_TIMEOUT_SECONDS = "osrm_timeout_seconds"
DEFAULT_MARKUP_PERCENTAGE = "default_markup_percentage"


def default_settings(config: AppConfig) -> Dict[str, Any]:
    """Setting defaults taken from configuration."""
    return {
        DAY_START_TIME: config.scheduling.day_start_time,
        TRANSITION_BUFFER_MIN: config.scheduling.transition_buffer_min,
        ROUTE_CACHE_TTL_HOURS: config.cache.route_ttl_hours,
        LOGIC_TIMEZONE: config.scheduling.timezone,
        OSRM_BASE_URL: config.routing.osrm_base_url,
        OSRM_TIMEOUT_SECONDS: config.routing.timeout_seconds,
        DEFAULT_MARKUP_PERCENTAGE: config.pricing.default_markup_percentage,
    }


@dataclass
class InMemorySettingsStore:
    """Key/value settings with configured defaults.

    Attributes:
        config: Source of the default values
    """

    config: AppConfig = field(default_factory=get_config)

    _values: Dict[str, Any] = field(default_factory=dict, repr=False)
    _defaults: Dict[str, Any] = field(init=False, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._defaults = default_settings(self.config)
        self._logger = logging.getLogger(__name__)

    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, the configured default, or None."""
        with self._lock:
            if key in self._values:
                return self._values[key]
        return self._defaults.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value
        self._logger.debug("Setting updated", extra={"key": key})

    def unset(self, key: str) -> bool:
        with self._lock:
            return self._values.pop(key, None) is not None
