"""Pydantic models for decoded GTFS-RT feeds.

These models cover the subset of GTFS-RT the relay reads. Every structure is
rebuilt from the upstream bytes on each request and never persisted.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class TripDescriptor(BaseModel):
    """Identifies the trip a real-time record refers to."""

    trip_id: str | None = None
    route_id: str | None = None
    direction_id: int | None = None  # 0 or 1


class StopTimeUpdate(BaseModel):
    """Prediction for a single stop within a trip."""

    stop_id: str | None = None
    arrival_time: int | None = None  # unix seconds
    departure_time: int | None = None  # unix seconds

    @property
    def effective_time(self) -> int | None:
        """Arrival time if present, else departure time."""
        if self.arrival_time is not None:
            return self.arrival_time
        return self.departure_time


class Position(BaseModel):
    latitude: float
    longitude: float
    bearing: float | None = None
    speed: float | None = None  # meters/second


class TripUpdateEntity(BaseModel):
    """Entity variant carrying a trip update."""

    kind: Literal["trip_update"] = "trip_update"
    entity_id: str | None = None
    trip: TripDescriptor
    stop_time_updates: list[StopTimeUpdate] = []
    vehicle_id: str | None = None


class VehiclePositionEntity(BaseModel):
    """Entity variant carrying a vehicle position."""

    kind: Literal["vehicle_position"] = "vehicle_position"
    entity_id: str | None = None
    trip: TripDescriptor | None = None
    position: Position | None = None
    timestamp: int | None = None
    vehicle_id: str | None = None


FeedEntity = Annotated[
    TripUpdateEntity | VehiclePositionEntity,
    Field(discriminator="kind"),
]


class FeedHeader(BaseModel):
    gtfs_realtime_version: str | None = None
    timestamp: int | None = None


class Feed(BaseModel):
    """A decoded GTFS-RT feed snapshot."""

    header: FeedHeader
    entities: list[FeedEntity] = []

    def trip_updates(self) -> list[TripUpdateEntity]:
        """Trip update entities in feed order."""
        return [e for e in self.entities if isinstance(e, TripUpdateEntity)]
