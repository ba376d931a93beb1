"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the engine to external systems like:
- Routing engines (OSRM, great-circle fallback)
- Route cache storage (in-memory, null)
- Place catalog and builder settings (in-memory)
- Audit run logs (logging-backed)
- Itinerary storage (in-memory)
"""
