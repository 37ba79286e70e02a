"""Route classification and stop matching for trip updates."""

from rtd_relay.matching.models import (
    MatchedStopTime,
    RouteCategory,
    StopDirection,
    StopDirectory,
    StopInfo,
)
from rtd_relay.matching.normalizers import normalize_route_id, normalize_stop_id
from rtd_relay.matching.route_matcher import RouteCatalog
from rtd_relay.matching.stop_matcher import lookup_stop, match_stop_times, resolve_stop_name

__all__ = [
    # Matchers
    "match_stop_times",
    "resolve_stop_name",
    "lookup_stop",
    "RouteCatalog",
    # Models
    "MatchedStopTime",
    "RouteCategory",
    "StopDirection",
    "StopDirectory",
    "StopInfo",
    # Normalizers
    "normalize_route_id",
    "normalize_stop_id",
]
