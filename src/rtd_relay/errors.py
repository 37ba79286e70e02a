"""Error taxonomy for the relay.

Every failure a route handler can surface maps to one ErrorKind, which is
returned to clients alongside the free-text message.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-readable error category returned in error bodies."""

    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    MALFORMED_FEED = "malformed_feed"
    NOT_CONFIGURED = "not_configured"
    INTERNAL = "internal"


class RelayError(Exception):
    """Base class for errors that abort a relay request."""

    kind: ErrorKind = ErrorKind.INTERNAL


class UpstreamUnavailable(RelayError):
    """Network failure, timeout, or non-2xx status from an upstream host."""

    kind = ErrorKind.UPSTREAM_UNAVAILABLE


class MalformedFeed(RelayError):
    """Feed bytes do not decode as a GTFS-Realtime FeedMessage."""

    kind = ErrorKind.MALFORMED_FEED


class NotConfigured(RelayError):
    """A required setting (such as an API key) is missing."""

    kind = ErrorKind.NOT_CONFIGURED


class ClientDisconnected(Exception):
    """The client went away before the response was ready."""
