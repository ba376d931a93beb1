"""Top-level package for the Voya itinerary logic engine.

This package turns an ordered list of stops for one itinerary day into a
timed schedule, validates every stop against opening hours and closures,
resolves transit between consecutive stops through a cached chain of
routing providers, and prices itineraries with a versioned markup
snapshot.
"""
