from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from rtd_relay.errors import ErrorKind


class CamelModel(BaseModel):
    """Response model serialized with camelCase keys for the browser client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ArrivalStatus(str, Enum):
    """Status bucket derived from minutes until arrival."""

    ARRIVING = "Arriving"  # <= 1 minute
    DUE = "Due"  # <= 5 minutes
    ON_TIME = "On Time"  # > 5 minutes


class ProjectedArrival(CamelModel):
    """One upcoming (or just departed) vehicle at a stop."""

    trip_id: str | None = None
    route_id: str | None = None
    route_label: str
    direction_id: int | None = None
    direction: str = Field(description="Human direction label, e.g. 'Northbound'")
    stop_id: str | None = None
    stop_name: str | None = None
    effective_epoch_seconds: int = Field(
        description="Predicted arrival (or departure, if no arrival) in unix seconds"
    )
    formatted_time: str = Field(description="Local time of day, e.g. '7:05 PM'")
    minutes_until: int
    status: ArrivalStatus
    vehicle_id: str = "Unknown"


class StopArrivalsResponse(CamelModel):
    """Arrivals at a single stop."""

    stop_id: str
    stop_name: str
    timestamp: int = Field(description="Server time in epoch milliseconds")
    feed_timestamp: int
    feed_age_minutes: int
    arrivals: list[ProjectedArrival]


class AllArrivalsResponse(CamelModel):
    """Arrivals across every known stop for the configured routes."""

    timestamp: int = Field(description="Server time in epoch milliseconds")
    feed_timestamp: int
    feed_age_minutes: int
    arrivals: list[ProjectedArrival]


class DebugStop(CamelModel):
    stop_id: str | None = None
    arrival_time: int | None = None
    departure_time: int | None = None


class DebugTrip(CamelModel):
    trip_id: str | None = None
    route_id: str | None = None
    direction_id: int | None = None
    category: str | None = None
    stops: list[DebugStop] = []


class DebugResponse(CamelModel):
    """Unfiltered view of the current feed pull. No stability contract."""

    timestamp: int
    feed_timestamp: int | None = None
    total_entities: int
    all_routes: list[str]
    all_stop_ids: list[str]
    matched_trips: list[DebugTrip]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    message: str
    version: str
    timestamp: str


class ErrorResponse(BaseModel):
    error: str
    kind: ErrorKind
