"""Settings adapters - Implementations of the SettingsPort."""

from .memory_settings import InMemorySettingsStore, default_settings

__all__ = ["InMemorySettingsStore", "default_settings"]
