"""Tests for the arrivals pipeline."""

from datetime import UTC
from unittest.mock import AsyncMock, patch

import pytest
from conftest import NOW, build_feed_message

from rtd_relay.data.config import RelaySettings
from rtd_relay.data.decoder import decode
from rtd_relay.errors import MalformedFeed, UpstreamUnavailable
from rtd_relay.models.feed import Feed
from rtd_relay.models.responses import ArrivalStatus
from rtd_relay.services import arrivals_service
from rtd_relay.services.arrivals_service import (
    build_all_arrivals,
    build_debug,
    build_stop_arrivals,
    run_stop_pipeline,
)


def _feed(trips, timestamp=NOW) -> Feed:
    return decode(build_feed_message(trips, timestamp).SerializeToString())


# ============================================================================
# Scenarios
# ============================================================================


class TestStopArrivalScenarios:
    """End-to-end pipeline scenarios over a decoded feed."""

    def test_single_due_arrival(self, settings: RelaySettings) -> None:
        feed = _feed([("trip_1", "117N", 1, [("34668", NOW + 300, None)], "4001")])

        response = build_stop_arrivals(feed, "34668", settings.rail_profile(), NOW, UTC)

        assert len(response.arrivals) == 1
        arrival = response.arrivals[0]
        assert arrival.minutes_until == 5
        assert arrival.status == ArrivalStatus.DUE
        assert arrival.vehicle_id == "4001"
        assert response.stop_name == "Union Station Alt"

    def test_timeless_update_gives_no_results(self, settings: RelaySettings) -> None:
        feed = _feed([("trip_1", "117N", 1, [("34668", None, None)], None)])

        response = build_stop_arrivals(feed, "34668", settings.rail_profile(), NOW, UTC)

        assert response.arrivals == []

    def test_arrivals_sorted_by_time(self, settings: RelaySettings) -> None:
        feed = _feed(
            [
                ("later", "117N", 0, [("34668", NOW + 600, None)], None),
                ("sooner", "N", 0, [("34668", NOW + 120, None)], None),
            ]
        )

        response = build_stop_arrivals(feed, "34668", settings.rail_profile(), NOW, UTC)

        assert [a.effective_epoch_seconds for a in response.arrivals] == [NOW + 120, NOW + 600]

    def test_unknown_stop_name_is_raw_id(self, settings: RelaySettings) -> None:
        response = build_stop_arrivals(_feed([]), "99999", settings.rail_profile(), NOW, UTC)

        assert response.stop_id == "99999"
        assert response.stop_name == "99999"
        assert response.arrivals == []

    def test_malformed_bytes_raise(self, settings: RelaySettings) -> None:
        with pytest.raises(MalformedFeed):
            run_stop_pipeline(b"not a protobuf feed", "34668", settings.rail_profile(), NOW, UTC)


class TestStopArrivals:
    """Tests for build_stop_arrivals details."""

    def test_rail_limit(self, settings: RelaySettings) -> None:
        trips = [
            (f"trip_{i}", "117N", 0, [("25287", NOW + 60 * (i + 1), None)], None)
            for i in range(14)
        ]

        response = build_stop_arrivals(_feed(trips), "25287", settings.rail_profile(), NOW, UTC)

        assert len(response.arrivals) == 10
        assert response.arrivals[0].trip_id == "trip_0"

    def test_rail_ignores_bus_routes(self, settings: RelaySettings) -> None:
        feed = _feed([("bus_trip", "15", 0, [("25287", NOW + 300, None)], None)])

        response = build_stop_arrivals(feed, "25287", settings.rail_profile(), NOW, UTC)

        assert response.arrivals == []

    def test_feed_metadata(self, settings: RelaySettings) -> None:
        feed = _feed([], timestamp=NOW - 130)

        response = build_stop_arrivals(feed, "25287", settings.rail_profile(), NOW, UTC)

        assert response.feed_timestamp == NOW - 130
        assert response.feed_age_minutes == 2
        assert response.timestamp == NOW * 1000

    def test_stop_id_echoed_as_sent(self, settings: RelaySettings) -> None:
        feed = _feed([("t", "117N", 0, [("25287", NOW + 300, None)], None)])

        response = build_stop_arrivals(feed, " 25287", settings.rail_profile(), NOW, UTC)

        assert response.stop_id == " 25287"
        assert len(response.arrivals) == 1


class TestBusArrivals:
    """Tests for the bus profile."""

    def test_bus_window_and_limit(self, settings: RelaySettings) -> None:
        trips = [
            (f"trip_{i}", "15" if i % 2 else "15L", 1, [("10611", NOW + 600 * i, None)], None)
            for i in range(8)
        ]

        response = build_stop_arrivals(_feed(trips), "10611", settings.bus_profile(), NOW, UTC)

        # 0..70 minutes in 10 minute steps: 70 is outside the 60 minute window
        assert len(response.arrivals) == 5
        assert [a.minutes_until for a in response.arrivals] == [0, 10, 20, 30, 40]
        assert response.stop_name == "Colfax Ave & Broadway"

    def test_bus_labels(self, settings: RelaySettings) -> None:
        feed = _feed([("t", "15L", 1, [("10650", NOW + 300, None)], None)])

        arrival = build_stop_arrivals(feed, "10650", settings.bus_profile(), NOW, UTC).arrivals[0]

        assert arrival.route_label == "Route 15L"
        assert arrival.direction == "Inbound"

    def test_bus_ignores_rail(self, settings: RelaySettings) -> None:
        feed = _feed([("t", "117N", 0, [("10611", NOW + 300, None)], None)])

        response = build_stop_arrivals(feed, "10611", settings.bus_profile(), NOW, UTC)

        assert response.arrivals == []


class TestIdempotence:
    def test_same_bytes_same_output(self, settings: RelaySettings) -> None:
        data = build_feed_message(
            [
                ("a", "117N", 0, [("34668", NOW + 600, None), ("25287", NOW + 700, None)], "1"),
                ("b", "N", 1, [("34668", NOW + 120, None)], None),
                ("c", "900", 1, [("34668", None, None)], None),
            ]
        ).SerializeToString()
        profile = settings.rail_profile()

        first = run_stop_pipeline(data, "34668", profile, NOW, UTC)
        second = run_stop_pipeline(data, "34668", profile, NOW, UTC)

        assert first.model_dump_json(by_alias=True) == second.model_dump_json(by_alias=True)


class TestAllArrivals:
    """Tests for build_all_arrivals."""

    def test_only_known_stops(self, settings: RelaySettings) -> None:
        feed = _feed(
            [
                (
                    "t1",
                    "117N",
                    0,
                    [
                        ("35257", NOW + 300, None),
                        ("00000", NOW + 400, None),
                        ("25287", NOW + 200, None),
                    ],
                    None,
                ),
            ]
        )

        response = build_all_arrivals(feed, settings.rail_profile(), NOW, UTC, limit=100)

        assert [a.stop_id for a in response.arrivals] == ["25287", "35257"]
        assert [a.stop_name for a in response.arrivals] == ["Union Station", "Eastlake/124th"]

    def test_limit(self, settings: RelaySettings) -> None:
        feed = _feed(
            [("t1", "117N", 0, [("25287", NOW + 60 * i, None) for i in range(1, 6)], None)]
        )

        response = build_all_arrivals(feed, settings.rail_profile(), NOW, UTC, limit=3)

        assert len(response.arrivals) == 3


class TestDebug:
    """Tests for build_debug."""

    def test_summary(self, settings: RelaySettings) -> None:
        feed = _feed(
            [
                ("t1", "117N", 0, [("34668", NOW + 60, None), ("35248", None, None)], None),
                ("t2", "W", 0, [("99999", NOW + 60, None)], None),
                ("t3", "15", 1, [("10611", None, NOW + 90)], None),
                ("t4", "117N", 1, [("34668", NOW + 600, None)], None),
            ]
        )

        debug = build_debug(feed, settings.route_catalog(), NOW)

        assert debug.total_entities == 4
        assert debug.all_routes == ["117N", "W", "15"]
        assert debug.all_stop_ids == ["34668", "35248", "10611"]
        assert [t.trip_id for t in debug.matched_trips] == ["t1", "t3", "t4"]
        assert debug.matched_trips[1].category == "bus_colfax_local"
        assert debug.matched_trips[0].stops[1].arrival_time is None
        assert debug.feed_timestamp == NOW


# ============================================================================
# Async entry points
# ============================================================================


@pytest.mark.asyncio
async def test_get_stop_arrivals_fetches_feed(settings: RelaySettings):
    """get_stop_arrivals runs the pipeline over the fetched feed."""
    feed = _feed([("t1", "117N", 0, [("25287", 4_000_000_000, None)], None)])

    with patch.object(
        arrivals_service.realtime_service,
        "fetch_trip_updates",
        AsyncMock(return_value=feed),
    ) as mock_fetch:
        response = await arrivals_service.get_stop_arrivals(
            "25287", settings.rail_profile(), settings
        )

    mock_fetch.assert_awaited_once_with(settings)
    assert response.stop_name == "Union Station"
    # far-future arrival is outside the window
    assert response.arrivals == []


@pytest.mark.asyncio
async def test_get_stop_arrivals_propagates_upstream_errors(settings: RelaySettings):
    """Fetch failures abort the request; no partial result."""
    with patch.object(
        arrivals_service.realtime_service,
        "fetch_trip_updates",
        AsyncMock(side_effect=UpstreamUnavailable("example.com returned HTTP 503")),
    ):
        with pytest.raises(UpstreamUnavailable):
            await arrivals_service.get_stop_arrivals("25287", settings.rail_profile(), settings)
