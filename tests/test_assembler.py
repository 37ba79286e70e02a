"""Tests for result assembly."""

from conftest import NOW

from rtd_relay.models.responses import ArrivalStatus, ProjectedArrival
from rtd_relay.services.assembler import assemble


def _arrival(trip_id: str, offset_seconds: int) -> ProjectedArrival:
    return ProjectedArrival(
        trip_id=trip_id,
        route_id="117N",
        route_label="N Line",
        direction_id=0,
        direction="Southbound",
        effective_epoch_seconds=NOW + offset_seconds,
        formatted_time="10:20 PM",
        minutes_until=offset_seconds // 60,
        status=ArrivalStatus.ON_TIME,
    )


class TestAssemble:
    """Tests for assemble."""

    def test_sorted_ascending(self) -> None:
        projected = [_arrival("late", 600), _arrival("early", 120)]

        result = assemble(projected, limit=10, feed_timestamp=NOW, now=NOW)

        assert [a.trip_id for a in result.arrivals] == ["early", "late"]

    def test_ties_keep_feed_order(self) -> None:
        projected = [_arrival("first", 300), _arrival("second", 300), _arrival("zero", 0)]

        result = assemble(projected, limit=None, feed_timestamp=NOW, now=NOW)

        assert [a.trip_id for a in result.arrivals] == ["zero", "first", "second"]

    def test_adjacent_pairs_non_decreasing(self) -> None:
        offsets = [900, -60, 300, 300, 7000, 45, 0]
        projected = [_arrival(str(i), o) for i, o in enumerate(offsets)]

        arrivals = assemble(projected, limit=None, feed_timestamp=NOW, now=NOW).arrivals

        for a, b in zip(arrivals, arrivals[1:]):
            assert a.effective_epoch_seconds <= b.effective_epoch_seconds

    def test_truncates_after_sorting(self) -> None:
        projected = [_arrival(str(i), 60 * (20 - i)) for i in range(15)]

        result = assemble(projected, limit=10, feed_timestamp=NOW, now=NOW)

        assert len(result.arrivals) == 10
        assert result.arrivals[0].effective_epoch_seconds == NOW + 60 * 6

    def test_no_limit(self) -> None:
        projected = [_arrival(str(i), 60 * i) for i in range(15)]
        assert len(assemble(projected, None, NOW, NOW).arrivals) == 15

    def test_input_not_mutated(self) -> None:
        projected = [_arrival("late", 600), _arrival("early", 120)]
        assemble(projected, 10, NOW, NOW)
        assert [a.trip_id for a in projected] == ["late", "early"]

    def test_feed_age(self) -> None:
        result = assemble([], 10, feed_timestamp=NOW - 150, now=NOW)

        assert result.feed_timestamp == NOW - 150
        assert result.feed_age_minutes == 2

    def test_missing_feed_timestamp_uses_now(self) -> None:
        result = assemble([], 10, feed_timestamp=None, now=NOW + 0.7)

        assert result.feed_timestamp == NOW
        assert result.feed_age_minutes == 0
