import logging
import time
from typing import Any

import httpx

from rtd_relay.data.config import RelaySettings
from rtd_relay.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

# The feed is polled every few seconds; an intermediary serving a stale copy
# silently produces outdated predictions.
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store",
    "Pragma": "no-cache",
}


def cache_busting_params() -> dict[str, str]:
    """Query parameters that defeat intermediary caches."""
    return {"t": str(int(time.time() * 1000))}


class FeedClient:
    """Async HTTP client for the upstream feed and JSON hosts.

    Usage:
        async with FeedClient(settings) as client:
            data = await client.fetch_feed(settings.trip_updates_url)
    """

    def __init__(self, settings: RelaySettings):
        """Initialize the client.

        Args:
            settings: Relay settings with the fetch timeout.
        """
        self._settings = settings
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "FeedClient":
        """Enter async context - create HTTP client."""
        self._client = httpx.AsyncClient(timeout=self._settings.fetch_timeout_seconds)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context - close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_feed(self, url: str) -> bytes:
        """Fetch raw feed bytes, bypassing any intermediary cache.

        Args:
            url: Feed URL; a cache-busting "t" parameter is appended.

        Returns:
            The response body.

        Raises:
            RuntimeError: If client not initialized.
            UpstreamUnavailable: On network error, timeout, or non-2xx status.
        """
        response = await self._get(url, params=cache_busting_params(), headers=NO_CACHE_HEADERS)
        logger.debug(f"Fetched {len(response.content)} bytes from {url}")
        return response.content

    async def fetch_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """Fetch and decode a JSON document.

        Raises:
            RuntimeError: If client not initialized.
            UpstreamUnavailable: On network error, timeout, non-2xx status,
                or a body that is not JSON.
        """
        response = await self._get(url, params=params or {})
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamUnavailable(f"Invalid JSON from {_host(url)}") from e

    async def _get(
        self,
        url: str,
        params: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        if not self._client:
            raise RuntimeError("Client not initialized - use 'async with'")

        try:
            response = await self._client.get(url, params=params, headers=headers)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise UpstreamUnavailable(
                f"Timed out after {self._settings.fetch_timeout_seconds}s fetching {_host(url)}"
            ) from e
        except httpx.HTTPStatusError as e:
            raise UpstreamUnavailable(
                f"{_host(url)} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(f"Failed to fetch {_host(url)}: {e}") from e

        return response


def _host(url: str) -> str:
    # keeps API keys in query strings out of error messages
    return httpx.URL(url).host
