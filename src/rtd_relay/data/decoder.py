"""GTFS-RT protobuf decoding into relay feed models."""

import logging

from google.protobuf.message import DecodeError
from google.transit import gtfs_realtime_pb2

from rtd_relay.errors import MalformedFeed
from rtd_relay.models.feed import (
    Feed,
    FeedEntity,
    FeedHeader,
    Position,
    StopTimeUpdate,
    TripDescriptor,
    TripUpdateEntity,
    VehiclePositionEntity,
)

logger = logging.getLogger(__name__)


def decode(data: bytes) -> Feed:
    """Decode raw GTFS-RT bytes into a Feed.

    Args:
        data: Serialized FeedMessage.

    Returns:
        Feed with header and entities in feed order.

    Raises:
        MalformedFeed: If the bytes are not a valid FeedMessage, including
            one missing its required header.
    """
    message = gtfs_realtime_pb2.FeedMessage()
    try:
        message.ParseFromString(data)
    except DecodeError as e:
        raise MalformedFeed(f"Failed to decode GTFS-RT feed: {e}") from e

    # some protobuf backends parse without checking required fields
    if not message.IsInitialized():
        missing = ", ".join(message.FindInitializationErrors())
        raise MalformedFeed(f"GTFS-RT feed is missing required fields: {missing}")

    feed = _parse_feed(message)
    logger.debug(
        f"Decoded feed: {len(feed.entities)} entities, timestamp {feed.header.timestamp}"
    )
    return feed


def _parse_feed(message: gtfs_realtime_pb2.FeedMessage) -> Feed:
    header = FeedHeader(
        gtfs_realtime_version=message.header.gtfs_realtime_version or None,
        timestamp=message.header.timestamp if message.header.timestamp else None,
    )

    entities: list[FeedEntity] = []
    for entity in message.entity:
        if entity.HasField("trip_update"):
            entities.append(_parse_trip_update(entity.id, entity.trip_update))
        if entity.HasField("vehicle"):
            entities.append(_parse_vehicle_position(entity.id, entity.vehicle))

    return Feed(header=header, entities=entities)


def _parse_trip_update(
    entity_id: str, tu: gtfs_realtime_pb2.TripUpdate
) -> TripUpdateEntity:
    vehicle_id = None
    if tu.HasField("vehicle") and tu.vehicle.id:
        vehicle_id = tu.vehicle.id

    return TripUpdateEntity(
        entity_id=entity_id or None,
        trip=_parse_trip_descriptor(tu.trip),
        stop_time_updates=[_parse_stop_time_update(stu) for stu in tu.stop_time_update],
        vehicle_id=vehicle_id,
    )


def _parse_stop_time_update(
    stu: gtfs_realtime_pb2.TripUpdate.StopTimeUpdate,
) -> StopTimeUpdate:
    arrival_time = None
    if stu.HasField("arrival") and stu.arrival.time:
        arrival_time = stu.arrival.time

    departure_time = None
    if stu.HasField("departure") and stu.departure.time:
        departure_time = stu.departure.time

    return StopTimeUpdate(
        stop_id=stu.stop_id if stu.stop_id else None,
        arrival_time=arrival_time,
        departure_time=departure_time,
    )


def _parse_vehicle_position(
    entity_id: str, vp: gtfs_realtime_pb2.VehiclePosition
) -> VehiclePositionEntity:
    trip = None
    if vp.HasField("trip"):
        trip = _parse_trip_descriptor(vp.trip)

    position = None
    if vp.HasField("position"):
        position = Position(
            latitude=vp.position.latitude,
            longitude=vp.position.longitude,
            bearing=vp.position.bearing if vp.position.bearing else None,
            speed=vp.position.speed if vp.position.speed else None,
        )

    vehicle_id = None
    if vp.HasField("vehicle") and vp.vehicle.id:
        vehicle_id = vp.vehicle.id

    return VehiclePositionEntity(
        entity_id=entity_id or None,
        trip=trip,
        position=position,
        timestamp=vp.timestamp if vp.timestamp else None,
        vehicle_id=vehicle_id,
    )


def _parse_trip_descriptor(td: gtfs_realtime_pb2.TripDescriptor) -> TripDescriptor:
    return TripDescriptor(
        trip_id=td.trip_id if td.trip_id else None,
        route_id=td.route_id if td.route_id else None,
        direction_id=td.direction_id if td.HasField("direction_id") else None,
    )
