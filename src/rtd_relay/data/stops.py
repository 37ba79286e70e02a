"""Built-in stop directories.

Stop IDs are the ones the dashboard client sends. Rail IDs include the
alternate IDs seen in the feed for the same platforms.
"""

from rtd_relay.matching.models import StopDirection, StopDirectory, StopInfo

RAIL_STOPS = StopDirectory(
    name="rail",
    stops={
        # Union Station commuter rail track
        "25287": StopInfo(name="Union Station", direction=StopDirection.BOTH),
        "35248": StopInfo(name="38th & Blake", direction=StopDirection.SOUTHBOUND),
        "35250": StopInfo(name="40th & Colorado", direction=StopDirection.SOUTHBOUND),
        "35252": StopInfo(name="61st & Pena", direction=StopDirection.SOUTHBOUND),
        "35254": StopInfo(name="Commerce City/72nd", direction=StopDirection.SOUTHBOUND),
        "35255": StopInfo(name="Thornton Crossroads/104th", direction=StopDirection.NORTHBOUND),
        "35257": StopInfo(name="Eastlake/124th", direction=StopDirection.NORTHBOUND),
        # alternates
        "34668": StopInfo(name="Union Station Alt", direction=StopDirection.BOTH),
        "35247": StopInfo(name="38th & Blake North", direction=StopDirection.NORTHBOUND),
    },
)

COLFAX_LOCAL_STOPS = StopDirectory(
    name="bus_colfax_local",
    stops={
        "10611": StopInfo(name="Colfax Ave & Broadway", direction=StopDirection.OUTBOUND),
        "10612": StopInfo(name="Colfax Ave & Broadway", direction=StopDirection.INBOUND),
        "10624": StopInfo(name="Colfax Ave & Downing St", direction=StopDirection.OUTBOUND),
        "10625": StopInfo(name="Colfax Ave & Downing St", direction=StopDirection.INBOUND),
        "10638": StopInfo(name="Colfax Ave & York St", direction=StopDirection.OUTBOUND),
        "10639": StopInfo(name="Colfax Ave & York St", direction=StopDirection.INBOUND),
    },
)

COLFAX_LIMITED_STOPS = StopDirectory(
    name="bus_colfax_limited",
    stops={
        "10650": StopInfo(name="Colfax Ave & Colorado Blvd", direction=StopDirection.OUTBOUND),
        "10651": StopInfo(name="Colfax Ave & Colorado Blvd", direction=StopDirection.INBOUND),
        "10672": StopInfo(name="Colfax Ave & Yosemite St", direction=StopDirection.OUTBOUND),
        "10673": StopInfo(name="Colfax Ave & Yosemite St", direction=StopDirection.INBOUND),
    },
)
