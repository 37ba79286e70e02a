import math
from collections.abc import Sequence

from pydantic import BaseModel

from rtd_relay.models.responses import ProjectedArrival


class AssembledArrivals(BaseModel):
    """Sorted, truncated arrivals plus feed freshness metadata."""

    arrivals: list[ProjectedArrival]
    feed_timestamp: int
    feed_age_minutes: int


def assemble(
    projected: Sequence[ProjectedArrival],
    limit: int | None,
    feed_timestamp: int | None,
    now: float,
) -> AssembledArrivals:
    """Sort arrivals by time, truncate, and attach feed staleness.

    The sort is stable, so arrivals at the same second keep feed order.

    Args:
        projected: Projector output.
        limit: Maximum arrivals to keep (None = keep all).
        feed_timestamp: Feed header timestamp; falls back to now if absent.
        now: Current time in unix seconds.
    """
    arrivals = sorted(projected, key=lambda a: a.effective_epoch_seconds)
    if limit is not None:
        arrivals = arrivals[: max(0, limit)]

    if feed_timestamp is None:
        feed_timestamp = math.floor(now)

    return AssembledArrivals(
        arrivals=arrivals,
        feed_timestamp=feed_timestamp,
        feed_age_minutes=math.floor((now - feed_timestamp) / 60),
    )
