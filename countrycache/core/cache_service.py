"""Cache Service: the public facade over a cache manager.

Holds the cache configuration and a CacheInterface manager (a
DiskCacheManager unless one is injected), gates reads and writes behind
the ``countries.cache.enabled`` flag, and builds deterministic keys from
arbitrary arguments.
"""

import functools
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Union

from countrycache.core.key_builder import encode_key
from countrycache.domain.exceptions import EmptyKeyError
from countrycache.domain.interfaces.cache import CacheInterface, KeyValuePairs
from countrycache.domain.interfaces.config import ConfigurationProvider
from countrycache.domain.models.common import TTL, CacheConfig, CacheKey, CacheValue
from countrycache.infrastructure.cache.disk_manager import DiskCacheManager
from countrycache.infrastructure.config.settings import Settings

logger = logging.getLogger(__name__)


class CacheService(CacheInterface):
    """Cache facade honoring the global enabled flag.

    Every read and write checks the flag: while disabled, lookups miss and
    writes are no-ops returning False. Deletions and ``clear`` always reach
    the manager so entries can be invalidated even while caching is off.
    """

    def __init__(
        self,
        config: Union[CacheConfig, ConfigurationProvider, None] = None,
        manager: Optional[CacheInterface] = None,
        path: Optional[Union[str, Path]] = None,
    ):
        """Initializes the service.

        Args:
            config: A CacheConfig, or a ConfigurationProvider to read one
                from. None loads Settings from the default sources.
            manager: Manager to delegate to; a DiskCacheManager sharing
                ``config`` is created when omitted.
            path: Storage directory for the default manager.
        """
        self.config = self.instantiate_config(config)
        self.manager = self.instantiate_manager(self.config, manager, path)

    def instantiate_config(self, config: Union[CacheConfig, ConfigurationProvider, None]) -> CacheConfig:
        if config is None:
            config = Settings()
        if isinstance(config, CacheConfig):
            return config
        return CacheConfig.from_provider(config)

    def instantiate_manager(
        self,
        config: CacheConfig,
        manager: Optional[CacheInterface],
        path: Optional[Union[str, Path]],
    ) -> CacheInterface:
        return DiskCacheManager(config, path) if manager is None else manager

    @property
    def enabled(self) -> bool:
        """Whether cache reads and writes are currently allowed."""
        return bool(self.config.enabled)

    # --- Key Building ---

    def make_key(self, *args: Any) -> CacheKey:
        """Builds a deterministic cache key from the given arguments.

        The arguments are normalized (sets and dict entries sorted, tuples
        and objects tagged by type), serialized to canonical JSON and
        base64-encoded. Argument order matters; dict insertion order and
        set iteration order do not.

        Raises:
            EmptyKeyError: If called without arguments.
        """
        if not args:
            raise EmptyKeyError()

        return CacheKey(encode_key(args))

    # --- CacheInterface Implementation ---

    def get(self, key: CacheKey, default: Optional[Any] = None) -> Any:
        if self.enabled:
            return self.manager.get(key, default)
        return default

    def set(self, key: CacheKey, value: CacheValue, ttl: TTL = None) -> bool:
        if self.enabled:
            return self.manager.set(key, value, ttl)
        return False

    def delete(self, key: CacheKey) -> bool:
        return self.manager.delete(key)

    def clear(self) -> bool:
        return self.manager.clear()

    def has(self, key: CacheKey) -> bool:
        if self.enabled:
            return self.manager.has(key)
        return False

    def get_multiple(self, keys: Iterable[CacheKey], default: Optional[Any] = None) -> Dict[CacheKey, Any]:
        if self.enabled:
            return self.manager.get_multiple(keys, default)
        return {key: default for key in keys}

    def set_multiple(self, values: KeyValuePairs, ttl: TTL = None) -> bool:
        if self.enabled:
            return self.manager.set_multiple(values, ttl)
        return False

    def delete_multiple(self, keys: Iterable[CacheKey]) -> bool:
        return self.manager.delete_multiple(keys)

    def remember(self, key: CacheKey, ttl: TTL, producer: Callable[[], CacheValue]) -> CacheValue:
        """Returns the cached value for ``key`` or stores what ``producer`` returns.

        While disabled the producer runs on every call and nothing is stored.
        Two callers missing on the same key at once may both run the producer;
        the last write wins.
        """
        if not self.enabled:
            logger.debug(f"Cache disabled, computing value for key: {key[:20]}...")
            return producer()

        value = self.manager.get(key)
        if value is not None:
            return value

        value = producer()
        self.manager.set(key, value, ttl)
        return value

    # --- Decorator ---

    def cached(self, ttl: TTL = None, prefix: Optional[str] = None) -> Callable:
        """Decorator memoizing a function's result through ``remember``.

        Args:
            ttl: TTL in minutes for stored results; the configured duration if None.
            prefix: Key prefix; defaults to the function's qualified name.

        Returns:
            A decorator.
        """
        def decorator(func: Callable) -> Callable:
            key_prefix = prefix or f"{func.__module__}.{func.__qualname__}"

            @functools.wraps(func)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                key = self.make_key(key_prefix, list(args), sorted(kwargs.items()))
                return self.remember(key, ttl, lambda: func(*args, **kwargs))
            return wrapper
        return decorator
