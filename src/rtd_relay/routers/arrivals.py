from fastapi import APIRouter, Depends, Request

from rtd_relay.data.config import RelaySettings, get_settings
from rtd_relay.models.responses import (
    AllArrivalsResponse,
    DebugResponse,
    ErrorResponse,
    StopArrivalsResponse,
)
from rtd_relay.routers.disconnect import run_until_disconnect
from rtd_relay.services.arrivals_service import (
    get_all_arrivals,
    get_feed_debug,
    get_stop_arrivals,
)

router = APIRouter(
    prefix="/api/rtd",
    tags=["rtd"],
    responses={500: {"model": ErrorResponse}},
)


@router.get("/arrivals", response_model=AllArrivalsResponse)
async def all_arrivals(
    request: Request,
    settings: RelaySettings = Depends(get_settings),
):
    """Rail arrivals at every known N Line stop."""
    return await run_until_disconnect(
        request,
        get_all_arrivals(settings.rail_profile(), settings),
        settings.disconnect_poll_seconds,
    )


@router.get("/arrivals/{stop_id}", response_model=StopArrivalsResponse)
async def stop_arrivals(
    stop_id: str,
    request: Request,
    settings: RelaySettings = Depends(get_settings),
):
    """Next rail arrivals at one stop (up to the rail limit, default 10)."""
    return await run_until_disconnect(
        request,
        get_stop_arrivals(stop_id, settings.rail_profile(), settings),
        settings.disconnect_poll_seconds,
    )


@router.get("/bus/{stop_id}", response_model=StopArrivalsResponse)
async def bus_arrivals(
    stop_id: str,
    request: Request,
    settings: RelaySettings = Depends(get_settings),
):
    """Next bus arrivals at one stop (within 60 minutes, up to 5 by default)."""
    return await run_until_disconnect(
        request,
        get_stop_arrivals(stop_id, settings.bus_profile(), settings),
        settings.disconnect_poll_seconds,
    )


@router.get("/debug", response_model=DebugResponse)
async def debug(
    request: Request,
    settings: RelaySettings = Depends(get_settings),
):
    """Diagnostic dump of route and stop IDs in the current feed."""
    return await run_until_disconnect(
        request,
        get_feed_debug(settings),
        settings.disconnect_poll_seconds,
    )
