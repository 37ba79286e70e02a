"""Arrivals service: run the decode-and-filter pipeline for each endpoint.

Pipeline per request:
    fetch -> decode -> match -> project -> assemble

The build_* functions are pure over (feed, now) so the same feed and clock
always produce the same response.
"""

import logging
import time
from datetime import tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo

from rtd_relay.data.config import PipelineProfile, RelaySettings
from rtd_relay.data.decoder import decode
from rtd_relay.matching.normalizers import normalize_route_id
from rtd_relay.matching.route_matcher import RouteCatalog
from rtd_relay.matching.stop_matcher import match_stop_times, resolve_stop_name
from rtd_relay.models.feed import Feed
from rtd_relay.models.responses import (
    AllArrivalsResponse,
    DebugResponse,
    DebugStop,
    DebugTrip,
    StopArrivalsResponse,
)
from rtd_relay.services import realtime_service
from rtd_relay.services.assembler import assemble
from rtd_relay.services.projector import project

logger = logging.getLogger(__name__)


@lru_cache(maxsize=16)
def get_display_tz(name: str) -> tzinfo:
    """Resolve a timezone name (cached)."""
    return ZoneInfo(name)


def _epoch_millis(now: float) -> int:
    return int(now * 1000)


def build_stop_arrivals(
    feed: Feed,
    stop_id: str,
    profile: PipelineProfile,
    now: float,
    tz: tzinfo,
) -> StopArrivalsResponse:
    """Arrivals at one stop for a profile's routes.

    Args:
        feed: Decoded feed.
        stop_id: Stop ID as sent by the client.
        profile: Routes, window, limit and directories to use.
        now: Current time in unix seconds.
        tz: Display timezone for formatted times.

    Returns:
        StopArrivalsResponse; an unknown stop_id is its own stop_name.
    """
    matches = match_stop_times(
        feed,
        profile.accepted_route_ids,
        target_stop_id=stop_id,
        fold_case=profile.fold_stop_case,
        catalog=profile.catalog,
    )
    projected = project(
        matches,
        now,
        profile.window,
        tz=tz,
        direction_labels=profile.direction_labels,
        catalog=profile.catalog,
        directories=profile.stop_directories,
    )
    result = assemble(projected, profile.result_limit, feed.header.timestamp, now)

    return StopArrivalsResponse(
        stop_id=stop_id,
        stop_name=resolve_stop_name(stop_id, profile.stop_directories),
        timestamp=_epoch_millis(now),
        feed_timestamp=result.feed_timestamp,
        feed_age_minutes=result.feed_age_minutes,
        arrivals=result.arrivals,
    )


def build_all_arrivals(
    feed: Feed,
    profile: PipelineProfile,
    now: float,
    tz: tzinfo,
    limit: int | None,
) -> AllArrivalsResponse:
    """Arrivals at every stop in the profile's primary directory."""
    known_stops = profile.stop_directories[0] if profile.stop_directories else None

    matches = match_stop_times(
        feed,
        profile.accepted_route_ids,
        fold_case=profile.fold_stop_case,
        catalog=profile.catalog,
    )
    if known_stops is not None:
        matches = [m for m in matches if m.stop_time_update.stop_id in known_stops]

    projected = project(
        matches,
        now,
        profile.window,
        tz=tz,
        direction_labels=profile.direction_labels,
        catalog=profile.catalog,
        directories=profile.stop_directories,
    )
    result = assemble(projected, limit, feed.header.timestamp, now)

    return AllArrivalsResponse(
        timestamp=_epoch_millis(now),
        feed_timestamp=result.feed_timestamp,
        feed_age_minutes=result.feed_age_minutes,
        arrivals=result.arrivals,
    )


def build_debug(feed: Feed, catalog: RouteCatalog, now: float) -> DebugResponse:
    """Every route ID in the feed, plus trips on any catalogued route."""
    all_routes: dict[str, None] = {}
    all_stop_ids: dict[str, None] = {}
    matched_trips: list[DebugTrip] = []

    for trip_update in feed.trip_updates():
        route_id = normalize_route_id(trip_update.trip.route_id)
        if route_id:
            all_routes[route_id] = None

        category = catalog.classify(route_id)
        if category is None:
            continue

        stops: list[DebugStop] = []
        for stu in trip_update.stop_time_updates:
            if stu.stop_id:
                all_stop_ids[stu.stop_id] = None
            stops.append(
                DebugStop(
                    stop_id=stu.stop_id,
                    arrival_time=stu.arrival_time,
                    departure_time=stu.departure_time,
                )
            )

        matched_trips.append(
            DebugTrip(
                trip_id=trip_update.trip.trip_id,
                route_id=trip_update.trip.route_id,
                direction_id=trip_update.trip.direction_id,
                category=category.key,
                stops=stops,
            )
        )

    return DebugResponse(
        timestamp=_epoch_millis(now),
        feed_timestamp=feed.header.timestamp,
        total_entities=len(feed.entities),
        all_routes=list(all_routes),
        all_stop_ids=list(all_stop_ids),
        matched_trips=matched_trips,
    )


def run_stop_pipeline(
    data: bytes,
    stop_id: str,
    profile: PipelineProfile,
    now: float,
    tz: tzinfo,
) -> StopArrivalsResponse:
    """Decode raw feed bytes and build stop arrivals.

    Raises:
        MalformedFeed: If data is not a GTFS-RT feed.
    """
    return build_stop_arrivals(decode(data), stop_id, profile, now, tz)


async def get_stop_arrivals(
    stop_id: str,
    profile: PipelineProfile,
    settings: RelaySettings,
) -> StopArrivalsResponse:
    """Fetch the feed and return arrivals at one stop.

    Raises:
        UpstreamUnavailable: If the feed cannot be fetched.
        MalformedFeed: If the feed cannot be decoded.
    """
    logger.info(f"Fetching {profile.name} arrivals for stop {stop_id}")
    feed = await realtime_service.fetch_trip_updates(settings)
    response = build_stop_arrivals(
        feed, stop_id, profile, time.time(), get_display_tz(settings.display_timezone)
    )
    logger.debug(f"Stop {stop_id}: {len(response.arrivals)} arrivals")
    return response


async def get_all_arrivals(
    profile: PipelineProfile,
    settings: RelaySettings,
) -> AllArrivalsResponse:
    """Fetch the feed and return arrivals at every known stop."""
    logger.info(f"Fetching {profile.name} arrivals for all known stops")
    feed = await realtime_service.fetch_trip_updates(settings)
    return build_all_arrivals(
        feed,
        profile,
        time.time(),
        get_display_tz(settings.display_timezone),
        settings.all_arrivals_limit,
    )


async def get_feed_debug(settings: RelaySettings) -> DebugResponse:
    """Fetch the feed and summarize it for diagnostics."""
    logger.info("Fetching all trip updates for debugging")
    feed = await realtime_service.fetch_trip_updates(settings)
    return build_debug(feed, settings.route_catalog(), time.time())
