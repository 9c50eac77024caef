"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the application to external systems like:
- Flight schedules (AeroDataBox)
- Train journeys (Navitia)
- Place search (Nominatim)
- Caching systems (in-memory, null)
"""
