from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rtd_relay.data.stops import COLFAX_LIMITED_STOPS, COLFAX_LOCAL_STOPS, RAIL_STOPS
from rtd_relay.matching.models import RouteCategory, StopDirectory
from rtd_relay.matching.route_matcher import RouteCatalog

RAIL_DIRECTION_LABELS: dict[int, str] = {0: "Southbound", 1: "Northbound"}
BUS_DIRECTION_LABELS: dict[int, str] = {0: "Outbound", 1: "Inbound"}


class VisibilityWindow(BaseModel):
    """Inclusive minutes-until range in which arrivals are shown."""

    model_config = ConfigDict(frozen=True)

    min_minutes: int
    max_minutes: int

    def contains(self, minutes_until: int) -> bool:
        return self.min_minutes <= minutes_until <= self.max_minutes


class PipelineProfile(BaseModel):
    """Everything one endpoint family needs to run the arrivals pipeline.

    stop_directories is probed in order when resolving stop names; the first
    directory is also the set of "known stops" for the all-stops listing.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    catalog: RouteCatalog
    category_keys: tuple[str, ...]
    stop_directories: tuple[StopDirectory, ...]
    window: VisibilityWindow
    result_limit: int | None
    fold_stop_case: bool = True
    direction_labels: dict[int, str] = Field(default_factory=dict)

    @property
    def accepted_route_ids(self) -> frozenset[str]:
        return self.catalog.accepted_route_ids(self.category_keys)


class RelaySettings(BaseSettings):
    """Relay configuration.

    Automatically loads from environment variables and .env file. Route ID
    sets are read as JSON arrays, e.g. RTD_RAIL_ROUTE_IDS='["117N", "N"]'.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    trip_updates_url: str = Field(
        default="https://open-data.rtd-denver.com/files/gtfs-rt/rtd/TripUpdate.pb",
        alias="RTD_TRIP_UPDATES_URL",
    )
    fetch_timeout_seconds: float = Field(default=10.0, alias="RTD_FETCH_TIMEOUT")
    display_timezone: str = Field(default="America/Denver", alias="RTD_DISPLAY_TIMEZONE")

    # route identifier allow-sets, one per logical route
    rail_route_ids: set[str] = Field(
        default_factory=lambda: {"117N", "N", "900"}, alias="RTD_RAIL_ROUTE_IDS"
    )
    rail_route_label: str = Field(default="N Line", alias="RTD_RAIL_ROUTE_LABEL")
    bus_local_route_ids: set[str] = Field(
        default_factory=lambda: {"15"}, alias="RTD_BUS_LOCAL_ROUTE_IDS"
    )
    bus_local_route_label: str = Field(default="Route 15", alias="RTD_BUS_LOCAL_ROUTE_LABEL")
    bus_limited_route_ids: set[str] = Field(
        default_factory=lambda: {"15L"}, alias="RTD_BUS_LIMITED_ROUTE_IDS"
    )
    bus_limited_route_label: str = Field(
        default="Route 15L", alias="RTD_BUS_LIMITED_ROUTE_LABEL"
    )

    rail_window_min_minutes: int = Field(default=-5, alias="RTD_RAIL_WINDOW_MIN")
    rail_window_max_minutes: int = Field(default=120, alias="RTD_RAIL_WINDOW_MAX")
    rail_result_limit: int = Field(default=10, alias="RTD_RAIL_LIMIT")
    bus_window_min_minutes: int = Field(default=-2, alias="RTD_BUS_WINDOW_MIN")
    bus_window_max_minutes: int = Field(default=60, alias="RTD_BUS_WINDOW_MAX")
    bus_result_limit: int = Field(default=5, alias="RTD_BUS_LIMIT")
    all_arrivals_limit: int = Field(default=100, alias="RTD_ALL_ARRIVALS_LIMIT")

    # seconds between client-disconnect checks while a request is in flight
    disconnect_poll_seconds: float = Field(default=0.25, alias="RTD_DISCONNECT_POLL")

    # TransitLand REST passthrough
    transitland_api_key: str | None = Field(default=None, alias="TRANSITLAND_API_KEY")
    transitland_base_url: str = "https://transit.land/api/v2/rest"
    transitland_feed_onestop_id: str = "f-9xj-rtd"
    transitland_route_short_name: str = "N"

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3001, alias="PORT")

    @field_validator("display_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown display timezone: {value}") from e
        return value

    @model_validator(mode="after")
    def _check_windows(self) -> "RelaySettings":
        if self.rail_window_min_minutes > self.rail_window_max_minutes:
            raise ValueError("rail visibility window min exceeds max")
        if self.bus_window_min_minutes > self.bus_window_max_minutes:
            raise ValueError("bus visibility window min exceeds max")
        return self

    def route_catalog(self) -> RouteCatalog:
        """Build the route catalog; rail is probed before the bus services."""
        return RouteCatalog(
            [
                RouteCategory(
                    key="rail",
                    label=self.rail_route_label,
                    route_ids=frozenset(self.rail_route_ids),
                ),
                RouteCategory(
                    key="bus_colfax_local",
                    label=self.bus_local_route_label,
                    route_ids=frozenset(self.bus_local_route_ids),
                ),
                RouteCategory(
                    key="bus_colfax_limited",
                    label=self.bus_limited_route_label,
                    route_ids=frozenset(self.bus_limited_route_ids),
                ),
            ]
        )

    def rail_profile(self) -> PipelineProfile:
        return PipelineProfile(
            name="rail",
            catalog=self.route_catalog(),
            category_keys=("rail",),
            stop_directories=(RAIL_STOPS, COLFAX_LOCAL_STOPS, COLFAX_LIMITED_STOPS),
            window=VisibilityWindow(
                min_minutes=self.rail_window_min_minutes,
                max_minutes=self.rail_window_max_minutes,
            ),
            result_limit=self.rail_result_limit,
            fold_stop_case=True,
            direction_labels=RAIL_DIRECTION_LABELS,
        )

    def bus_profile(self) -> PipelineProfile:
        return PipelineProfile(
            name="bus",
            catalog=self.route_catalog(),
            category_keys=("bus_colfax_local", "bus_colfax_limited"),
            stop_directories=(COLFAX_LOCAL_STOPS, COLFAX_LIMITED_STOPS, RAIL_STOPS),
            window=VisibilityWindow(
                min_minutes=self.bus_window_min_minutes,
                max_minutes=self.bus_window_max_minutes,
            ),
            result_limit=self.bus_result_limit,
            fold_stop_case=False,
            direction_labels=BUS_DIRECTION_LABELS,
        )


@lru_cache
def get_settings() -> RelaySettings:
    """Get relay settings (cached singleton).

    Returns:
        RelaySettings with values from .env file or environment variables.
    """
    return RelaySettings()
