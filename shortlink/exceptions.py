"""Exceptions raised by the shortlink core."""


class ShortlinkError(Exception):
    """Base exception for shortlink errors."""

    pass


class StoreUnavailableError(ShortlinkError):
    """Remote store unreachable, timed out, or failed mid-call.

    Raised by KeyValueStore implementations and absorbed by TieredCache.
    """

    pass


class KeyCollisionError(ShortlinkError):
    """No unused key found within the retry budget."""

    pass
