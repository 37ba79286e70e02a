"""Cancel in-flight work when the HTTP client disconnects."""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from fastapi import Request

from rtd_relay.errors import ClientDisconnected

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _wait_for_disconnect(request: Request, poll_seconds: float) -> None:
    while not await request.is_disconnected():
        await asyncio.sleep(poll_seconds)


async def run_until_disconnect(
    request: Request,
    work: Awaitable[T],
    poll_seconds: float = 0.25,
) -> T:
    """Await work, cancelling it if the client disconnects first.

    Args:
        request: The inbound request to watch.
        work: Coroutine producing the response.
        poll_seconds: Interval between disconnect checks.

    Returns:
        The result of work.

    Raises:
        ClientDisconnected: If the client left before work finished.
        Exception: Whatever the disconnect check raised; work is cancelled.
    """
    task = asyncio.ensure_future(work)
    watcher = asyncio.ensure_future(_wait_for_disconnect(request, poll_seconds))
    try:
        await asyncio.wait({task, watcher}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        watcher.cancel()

    if task.done():
        return task.result()

    task.cancel()
    error = watcher.exception()
    if error is not None:
        raise error

    logger.info(f"Client disconnected, cancelled {request.url.path}")
    raise ClientDisconnected(request.url.path)
