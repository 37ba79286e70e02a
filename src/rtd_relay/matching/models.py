from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from rtd_relay.matching.normalizers import normalize_stop_id
from rtd_relay.models.feed import StopTimeUpdate, TripDescriptor


class StopDirection(str, Enum):
    """Which travel direction a stop serves."""

    BOTH = "both"
    NORTHBOUND = "northbound"
    SOUTHBOUND = "southbound"
    INBOUND = "inbound"
    OUTBOUND = "outbound"


class StopInfo(BaseModel):
    """Display information for a known stop."""

    name: str
    direction: StopDirection = StopDirection.BOTH


class StopDirectory(BaseModel):
    """Static mapping of stop IDs to display info.

    Lookups are case-insensitive and ignore surrounding whitespace, so
    "25287", " 25287 " and a lowercased rail ID all resolve the same entry.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    stops: dict[str, StopInfo] = Field(default_factory=dict)

    def lookup(self, stop_id: str) -> StopInfo | None:
        key = normalize_stop_id(stop_id, fold_case=True)
        for known_id, info in self.stops.items():
            if normalize_stop_id(known_id, fold_case=True) == key:
                return info
        return None

    def __contains__(self, stop_id: object) -> bool:
        return isinstance(stop_id, str) and self.lookup(stop_id) is not None


class RouteCategory(BaseModel):
    """A logical route and every upstream route_id observed for it.

    RTD has relabelled the same line across feed revisions ("N", "117N",
    "900"), so a category is keyed by an allow-set rather than one literal.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    route_ids: frozenset[str]


class MatchedStopTime(BaseModel):
    """A stop time update that survived route and stop filtering."""

    trip: TripDescriptor
    stop_time_update: StopTimeUpdate
    vehicle_id: str | None = None
    category: str | None = None
