from collections.abc import Iterable, Sequence

from rtd_relay.matching.models import MatchedStopTime, StopDirectory, StopInfo
from rtd_relay.matching.normalizers import normalize_route_id, normalize_stop_id
from rtd_relay.matching.route_matcher import RouteCatalog
from rtd_relay.models.feed import Feed


def match_stop_times(
    feed: Feed,
    accepted_route_ids: Iterable[str],
    target_stop_id: str | None = None,
    fold_case: bool = True,
    catalog: RouteCatalog | None = None,
) -> list[MatchedStopTime]:
    """Select stop time updates for accepted routes, optionally at one stop.

    Single pass over the feed in order:
    1. Skip entities that are not trip updates
    2. Keep trip updates whose route_id is in accepted_route_ids (case-sensitive)
    3. Keep stop time updates at target_stop_id, if given
    4. Drop stop time updates with neither arrival nor departure time

    Args:
        feed: Decoded feed.
        accepted_route_ids: Allow-set of upstream route IDs.
        target_stop_id: Only keep updates at this stop (None = all stops).
        fold_case: Compare stop IDs case-insensitively (rail); bus stop IDs
            are numeric and compared exactly.
        catalog: Optional route catalog used to tag each match with its
            route category.

    Returns:
        Matches in feed order (not time-sorted).
    """
    accepted = {normalize_route_id(r) for r in accepted_route_ids}
    target = (
        normalize_stop_id(target_stop_id, fold_case=fold_case)
        if target_stop_id is not None
        else None
    )

    matches: list[MatchedStopTime] = []
    for trip_update in feed.trip_updates():
        route_id = normalize_route_id(trip_update.trip.route_id)
        if route_id not in accepted:
            continue

        category = catalog.classify(route_id) if catalog is not None else None

        for stu in trip_update.stop_time_updates:
            if target is not None and normalize_stop_id(stu.stop_id, fold_case=fold_case) != target:
                continue
            if stu.effective_time is None:
                continue
            matches.append(
                MatchedStopTime(
                    trip=trip_update.trip,
                    stop_time_update=stu,
                    vehicle_id=trip_update.vehicle_id,
                    category=category.key if category is not None else None,
                )
            )

    return matches


def lookup_stop(stop_id: str, directories: Sequence[StopDirectory]) -> StopInfo | None:
    """Probe directories in order; the first directory that knows the stop wins."""
    for directory in directories:
        info = directory.lookup(stop_id)
        if info is not None:
            return info
    return None


def resolve_stop_name(stop_id: str, directories: Sequence[StopDirectory]) -> str:
    """Display name for a stop ID.

    Resolution order:
    1. Each directory in the order given, first hit wins
    2. The raw stop ID itself (unknown stops are not an error)

    Examples (rail profile):
        "25287" -> "Union Station"
        "99999" -> "99999"
    """
    info = lookup_stop(stop_id, directories)
    if info is not None:
        return info.name
    return stop_id
