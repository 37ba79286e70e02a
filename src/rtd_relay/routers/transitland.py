from typing import Any

from fastapi import APIRouter, Depends, Query

from rtd_relay.data.config import RelaySettings, get_settings
from rtd_relay.models.responses import ErrorResponse
from rtd_relay.services import transitland_service

router = APIRouter(
    prefix="/api/transitland",
    tags=["transitland"],
    responses={500: {"model": ErrorResponse}},
)


@router.get("/routes")
async def routes(settings: RelaySettings = Depends(get_settings)) -> Any:
    """TransitLand routes for the configured RTD route."""
    return await transitland_service.get_routes(settings)


@router.get("/stops")
async def stops(
    route_id: str = Query(..., description="TransitLand route ID"),
    settings: RelaySettings = Depends(get_settings),
) -> Any:
    """TransitLand stops served by a route."""
    return await transitland_service.get_stops(route_id, settings)
