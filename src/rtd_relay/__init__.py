"""Real-time arrivals relay for RTD Denver's GTFS-Realtime feed."""

__version__ = "0.1.0"
