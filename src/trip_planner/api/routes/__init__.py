"""Route group exports."""

from . import health, parking, trips

__all__ = ["health", "parking", "trips"]
