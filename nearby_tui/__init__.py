"""Terminal client for a city geo service: city center, places and radius search."""

__version__ = "0.3.0"
