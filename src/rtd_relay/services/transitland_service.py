"""TransitLand REST passthrough.

The browser cannot call TransitLand directly (CORS and the API key), so the
relay forwards the two lookups the dashboard needs and returns the JSON as is.
"""

import logging
from typing import Any

from rtd_relay.data.config import RelaySettings
from rtd_relay.data.feed_client import FeedClient
from rtd_relay.errors import NotConfigured

logger = logging.getLogger(__name__)


def _require_api_key(settings: RelaySettings) -> str:
    if not settings.transitland_api_key:
        raise NotConfigured("TRANSITLAND_API_KEY is not set")
    return settings.transitland_api_key


async def get_routes(settings: RelaySettings) -> Any:
    """Routes for the configured feed and route short name."""
    params = {
        "feed_onestop_id": settings.transitland_feed_onestop_id,
        "route_short_name": settings.transitland_route_short_name,
        "apikey": _require_api_key(settings),
    }
    logger.info(f"Fetching TransitLand routes for {settings.transitland_route_short_name}")
    async with FeedClient(settings) as client:
        return await client.fetch_json(f"{settings.transitland_base_url}/routes", params)


async def get_stops(route_id: str, settings: RelaySettings, limit: int = 100) -> Any:
    """Stops served by a TransitLand route ID."""
    params = {
        "served_by_route_id": route_id,
        "apikey": _require_api_key(settings),
        "limit": limit,
    }
    logger.info(f"Fetching TransitLand stops for route {route_id}")
    async with FeedClient(settings) as client:
        return await client.fetch_json(f"{settings.transitland_base_url}/stops", params)
