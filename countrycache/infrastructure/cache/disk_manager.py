"""diskcache-backed implementation of the CacheInterface.

Binds the uniform cache contract to a ``diskcache.Cache`` living in a
filesystem directory. Storage layout, locking and expiration bookkeeping
are all left to diskcache; this adapter only translates calls, converts
TTLs from minutes to seconds and honors the enabled flag.
"""

import logging
import sqlite3
import tempfile
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

import diskcache as dc

from countrycache.domain.interfaces.cache import CacheInterface, KeyValuePairs
from countrycache.domain.interfaces.config import ConfigurationProvider
from countrycache.domain.models.common import TTL, CacheConfig, CacheKey, CacheValue

logger = logging.getLogger(__name__)

# Used when no directory is configured
DEFAULT_CACHE_SUBDIR = Path("__COUNTRYCACHE__") / "cache"
CACHE_DIR_MODE = 0o755

# Seconds diskcache waits on a locked SQLite database before raising Timeout
ENGINE_TIMEOUT_SECONDS = 60

# Engine failures that turn a write into a False result
WRITE_ERRORS = (dc.Timeout, OSError, sqlite3.Error)


class DiskCacheManager(CacheInterface):
    """File-based cache manager on top of diskcache."""

    def __init__(
        self,
        config: Union[CacheConfig, ConfigurationProvider, None] = None,
        path: Optional[Union[str, Path]] = None,
    ):
        """Initializes the manager.

        Args:
            config: Cache settings. A ConfigurationProvider is resolved into
                a CacheConfig; None uses the built-in defaults.
            path: Storage directory overriding ``config.directory``.
        """
        if config is None:
            config = CacheConfig()
        elif not isinstance(config, CacheConfig):
            config = CacheConfig.from_provider(config)
        self.config = config
        self._path = Path(path) if path is not None else None
        self._dir: Optional[Path] = None
        self._cache: Optional[dc.Cache] = None

    def enabled(self) -> bool:
        """Checks if the cache is enabled."""
        return bool(self.config.enabled)

    # --- Storage Binding ---

    def get_cache_dir(self) -> Path:
        """Returns the storage directory, creating it on first access."""
        if self._dir is None:
            directory = self._path or self.config.directory
            if not directory:
                directory = Path(tempfile.gettempdir()) / DEFAULT_CACHE_SUBDIR
            directory = Path(directory)

            if not directory.exists():
                directory.mkdir(mode=CACHE_DIR_MODE, parents=True, exist_ok=True)
                logger.info(f"Created cache directory: {directory}")

            self._dir = directory

        return self._dir

    def get_storage(self, path: Optional[Union[str, Path]] = None) -> dc.Cache:
        """Opens a diskcache engine on ``path`` or on the cache directory."""
        directory = self.get_cache_dir() if path is None else Path(path)
        storage = dc.Cache(str(directory), timeout=ENGINE_TIMEOUT_SECONDS)
        logger.debug(f"Opened disk cache at: {storage.directory}")
        return storage

    @property
    def cache(self) -> dc.Cache:
        """The bound diskcache engine, opened lazily."""
        if self._cache is None:
            self._cache = self.get_storage()
        return self._cache

    @property
    def directory(self) -> Path:
        return self.get_cache_dir()

    def close(self) -> None:
        """Releases the engine's database handle. The engine reopens on next use."""
        if self._cache is not None:
            self._cache.close()
            self._cache = None

    def __enter__(self) -> "DiskCacheManager":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # --- Expiration ---

    def make_expiration(self, ttl: TTL) -> float:
        """Converts a TTL in minutes (or a timedelta) into engine seconds.

        A falsy TTL (None, 0, timedelta(0)) falls back to the configured duration.
        """
        if not ttl:
            return float(self.config.duration) * 60
        if isinstance(ttl, timedelta):
            return ttl.total_seconds()
        return float(ttl) * 60

    # --- CacheInterface Implementation ---

    def get(self, key: CacheKey, default: Optional[Any] = None) -> Any:
        if not self.enabled():
            logger.debug(f"Cache disabled, skipping read for key: {key[:20]}...")
            return default

        value = self.cache.get(key, default=default)
        if value is default:
            logger.debug(f"Cache MISS for key: {key[:20]}...")
        else:
            logger.debug(f"Cache HIT for key: {key[:20]}...")
        return value

    def set(self, key: CacheKey, value: CacheValue, ttl: TTL = None) -> bool:
        if not self.enabled():
            logger.debug(f"Cache disabled, skipping write for key: {key[:20]}...")
            return False

        expire = self.make_expiration(ttl)
        try:
            stored = bool(self.cache.set(key, value, expire=expire))
        except WRITE_ERRORS as e:
            logger.error(f"Error writing cache key {key[:20]}...: {e}", exc_info=True)
            return False
        logger.debug(f"Cache PUT key: {key[:20]}... TTL: {expire:.0f}s")
        return stored

    def delete(self, key: CacheKey) -> bool:
        try:
            existed = self.cache.delete(key)
        except WRITE_ERRORS as e:
            logger.error(f"Error deleting cache key {key[:20]}...: {e}", exc_info=True)
            return False
        logger.debug(f"Cache DELETE key: {key[:20]}... (existed={existed})")
        return True

    def clear(self) -> bool:
        try:
            count = self.cache.clear()
        except WRITE_ERRORS as e:
            logger.error(f"Failed to clear disk cache: {e}", exc_info=True)
            return False
        logger.info(f"Cleared disk cache at {self.directory}. Removed {count} items.")
        return True

    def has(self, key: CacheKey) -> bool:
        return self.get(key) is not None

    def get_multiple(self, keys: Iterable[CacheKey], default: Optional[Any] = None) -> Dict[CacheKey, Any]:
        return {key: self.get(key, default) for key in keys}

    def set_multiple(self, values: KeyValuePairs, ttl: TTL = None) -> bool:
        pairs = values.items() if isinstance(values, Mapping) else values
        # Every pair is attempted, even after a failure
        results = [self.set(key, value, ttl) for key, value in pairs]
        return all(results)

    def delete_multiple(self, keys: Iterable[CacheKey]) -> bool:
        results = [self.delete(key) for key in keys]
        return all(results)

    def remember(self, key: CacheKey, ttl: TTL, producer: Callable[[], CacheValue]) -> CacheValue:
        # Not single-flight: concurrent misses may each run the producer
        value = self.get(key)
        if value is not None:
            return value

        value = producer()
        self.set(key, value, ttl)
        return value
