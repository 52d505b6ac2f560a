"""Errors raised by the cache facade."""


class CacheError(Exception):
    """Base class for cache errors."""


class EmptyKeyError(CacheError, ValueError):
    """Raised when a cache key is built from no arguments."""

    def __init__(self, message: str = "Empty key"):
        super().__init__(message)
