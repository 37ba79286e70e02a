"""Arrival projection: turn matched stop times into displayable arrivals."""

import math
from collections.abc import Sequence
from datetime import UTC, datetime, tzinfo

from rtd_relay.data.config import VisibilityWindow
from rtd_relay.matching.models import MatchedStopTime, StopDirectory
from rtd_relay.matching.route_matcher import RouteCatalog
from rtd_relay.matching.stop_matcher import lookup_stop
from rtd_relay.models.responses import ArrivalStatus, ProjectedArrival

ARRIVING_MAX_MINUTES = 1
DUE_MAX_MINUTES = 5


def calculate_minutes_until(effective_time: int, now: float) -> int:
    """Whole minutes from now until effective_time.

    Halves round up (-2.5 -> -2, 1.5 -> 2), matching the dashboard client.
    """
    return math.floor((effective_time - now) / 60 + 0.5)


def status_for_minutes(minutes_until: int) -> ArrivalStatus:
    """Status bucket for a minutes-until value.

    Examples:
        -3 -> Arriving
        1 -> Arriving
        5 -> Due
        6 -> On Time
    """
    if minutes_until <= ARRIVING_MAX_MINUTES:
        return ArrivalStatus.ARRIVING
    if minutes_until <= DUE_MAX_MINUTES:
        return ArrivalStatus.DUE
    return ArrivalStatus.ON_TIME


def format_epoch_time(epoch_seconds: int, tz: tzinfo = UTC) -> str:
    """Format a unix timestamp as a 12-hour time of day.

    Args:
        epoch_seconds: Unix timestamp in seconds.
        tz: Display timezone.

    Returns:
        Human-readable time like "8:30 AM" or "12:05 PM".
    """
    local = datetime.fromtimestamp(epoch_seconds, tz=tz)
    hours = local.hour

    period = "AM"
    display_hour = hours
    if hours == 0:
        display_hour = 12
    elif hours == 12:
        period = "PM"
    elif hours > 12:
        display_hour = hours - 12
        period = "PM"

    return f"{display_hour}:{local.minute:02d} {period}"


def project(
    matches: Sequence[MatchedStopTime],
    now: float,
    window: VisibilityWindow,
    *,
    tz: tzinfo = UTC,
    direction_labels: dict[int, str] | None = None,
    catalog: RouteCatalog | None = None,
    directories: Sequence[StopDirectory] = (),
) -> list[ProjectedArrival]:
    """Project matched stop times into arrivals inside the visibility window.

    Args:
        matches: Matcher output, in feed order.
        now: Current time in unix seconds.
        window: Inclusive minutes-until range to keep.
        tz: Timezone for formatted_time.
        direction_labels: direction_id -> label; unknown IDs become "Unknown".
        catalog: Route catalog for route labels (raw route_id otherwise).
        directories: Ordered stop directories for stop names.

    Returns:
        Projected arrivals in input order.
    """
    labels = direction_labels or {}
    arrivals: list[ProjectedArrival] = []

    for match in matches:
        effective = match.stop_time_update.effective_time
        if effective is None:
            continue

        minutes_until = calculate_minutes_until(effective, now)
        if not window.contains(minutes_until):
            continue

        stop_id = match.stop_time_update.stop_id
        stop_info = lookup_stop(stop_id, directories) if stop_id else None
        route_id = match.trip.route_id
        direction_id = match.trip.direction_id
        direction = "Unknown"
        if direction_id is not None:
            direction = labels.get(direction_id, "Unknown")

        arrivals.append(
            ProjectedArrival(
                trip_id=match.trip.trip_id,
                route_id=route_id,
                route_label=catalog.label_for(route_id) if catalog else (route_id or "Unknown"),
                direction_id=direction_id,
                direction=direction,
                stop_id=stop_id,
                stop_name=stop_info.name if stop_info else stop_id,
                effective_epoch_seconds=effective,
                formatted_time=format_epoch_time(effective, tz),
                minutes_until=minutes_until,
                status=status_for_minutes(minutes_until),
                vehicle_id=match.vehicle_id or "Unknown",
            )
        )

    return arrivals
