"""Real-time service: fetch and decode the trip updates feed.

Every call re-fetches and re-decodes; nothing is cached between requests.
Errors are logged and propagated so the request fails as a whole.
"""

import logging

from rtd_relay.data.config import RelaySettings
from rtd_relay.data.decoder import decode
from rtd_relay.data.feed_client import FeedClient
from rtd_relay.errors import RelayError
from rtd_relay.models.feed import Feed

logger = logging.getLogger(__name__)


async def fetch_trip_updates(settings: RelaySettings) -> Feed:
    """Fetch and decode the current trip updates feed.

    Args:
        settings: Relay settings with the feed URL and fetch timeout.

    Returns:
        Decoded Feed.

    Raises:
        UpstreamUnavailable: If the feed host is unreachable or errors.
        MalformedFeed: If the response is not a GTFS-RT feed.
    """
    try:
        async with FeedClient(settings) as client:
            data = await client.fetch_feed(settings.trip_updates_url)
        feed = decode(data)
    except RelayError as e:
        logger.warning(f"Failed to load trip updates ({e.kind.value}): {e}")
        raise

    logger.debug(f"Loaded {len(feed.entities)} feed entities")
    return feed

