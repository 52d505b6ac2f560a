"""Interface for caching mechanisms.

Defines the contract for storing, retrieving, and removing cached data.
Both the storage managers and the service facade implement it, so callers
depend only on this abstraction.
"""

import abc
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

from countrycache.domain.models.common import TTL, CacheKey, CacheValue

# set_multiple accepts a mapping or a sequence of (key, value) pairs
KeyValuePairs = Union[Mapping[CacheKey, CacheValue], Iterable[Tuple[CacheKey, CacheValue]]]


class CacheInterface(abc.ABC):
    """Abstract Base Class for cache operations."""

    @abc.abstractmethod
    def get(self, key: CacheKey, default: Optional[Any] = None) -> Any:
        """Fetches a value from the cache.

        Args:
            key: The cache key to retrieve.
            default: Returned when the key is missing, expired, or the cache
                is disabled.

        Returns:
            The cached value, or ``default``.
        """
        pass

    @abc.abstractmethod
    def set(self, key: CacheKey, value: CacheValue, ttl: TTL = None) -> bool:
        """Persists a value under a key with an optional TTL.

        Args:
            key: The cache key to store the value under.
            value: The value to store.
            ttl: Time-to-live in minutes (or a timedelta). The configured
                default duration is used if None.

        Returns:
            True on success, False otherwise.
        """
        pass

    @abc.abstractmethod
    def delete(self, key: CacheKey) -> bool:
        """Deletes an item from the cache by its key."""
        pass

    @abc.abstractmethod
    def clear(self) -> bool:
        """Wipes every entry from the cache."""
        pass

    @abc.abstractmethod
    def has(self, key: CacheKey) -> bool:
        """Determines whether a non-empty item is present in the cache."""
        pass

    @abc.abstractmethod
    def get_multiple(self, keys: Iterable[CacheKey], default: Optional[Any] = None) -> Dict[CacheKey, Any]:
        """Obtains multiple items by their keys.

        Returns:
            A dict mapping each requested key to its value or ``default``.
        """
        pass

    @abc.abstractmethod
    def set_multiple(self, values: KeyValuePairs, ttl: TTL = None) -> bool:
        """Persists a set of key/value pairs with an optional TTL.

        Returns:
            True only if every pair was stored.
        """
        pass

    @abc.abstractmethod
    def delete_multiple(self, keys: Iterable[CacheKey]) -> bool:
        """Deletes multiple items.

        Returns:
            True only if every key was deleted.
        """
        pass

    @abc.abstractmethod
    def remember(self, key: CacheKey, ttl: TTL, producer: Callable[[], CacheValue]) -> CacheValue:
        """Gets an item from the cache, or stores the producer's result.

        Args:
            key: The cache key.
            ttl: Time-to-live for a freshly produced value.
            producer: Zero-argument callable invoked on a cache miss.

        Returns:
            The cached or freshly produced value.
        """
        pass
