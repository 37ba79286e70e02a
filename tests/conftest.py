"""Shared fixtures: relay settings and GTFS-RT feed builders."""

from collections.abc import Callable
from datetime import UTC

import pytest
from google.transit import gtfs_realtime_pb2

from rtd_relay.data.config import RelaySettings

NOW = 1_700_000_000

# (trip_id, route_id, direction_id, [(stop_id, arrival, departure), ...], vehicle_id)
TripSpec = tuple[str, str, int | None, list[tuple[str, int | None, int | None]], str | None]


def build_feed_message(
    trips: list[TripSpec],
    timestamp: int | None = NOW,
) -> gtfs_realtime_pb2.FeedMessage:
    """Build a trip updates FeedMessage from compact trip specs."""
    feed = gtfs_realtime_pb2.FeedMessage()
    feed.header.gtfs_realtime_version = "2.0"
    if timestamp is not None:
        feed.header.timestamp = timestamp

    for i, (trip_id, route_id, direction_id, stops, vehicle_id) in enumerate(trips):
        entity = feed.entity.add()
        entity.id = f"entity_{i}"

        tu = entity.trip_update
        tu.trip.trip_id = trip_id
        tu.trip.route_id = route_id
        if direction_id is not None:
            tu.trip.direction_id = direction_id
        if vehicle_id is not None:
            tu.vehicle.id = vehicle_id

        for stop_id, arrival, departure in stops:
            stu = tu.stop_time_update.add()
            stu.stop_id = stop_id
            if arrival is not None:
                stu.arrival.time = arrival
            if departure is not None:
                stu.departure.time = departure

    return feed


@pytest.fixture
def feed_bytes() -> Callable[..., bytes]:
    """Factory returning serialized trip updates feeds."""

    def _build(trips: list[TripSpec], timestamp: int | None = NOW) -> bytes:
        return build_feed_message(trips, timestamp).SerializeToString()

    return _build


@pytest.fixture
def settings() -> RelaySettings:
    """Settings with a fixed UTC display timezone and a test feed URL."""
    return RelaySettings(
        trip_updates_url="https://example.com/TripUpdate.pb",
        fetch_timeout_seconds=5.0,
        display_timezone="UTC",
        transitland_api_key="test_key",
        transitland_base_url="https://transit.example.com/api/v2/rest",
    )


@pytest.fixture
def utc():
    return UTC
