"""Defines common Value Objects used across the cache layers.

These objects represent simple values like cache keys and TTLs, plus the
explicit configuration struct handed to the facade and its manager.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, NewType, Optional, Union

logger = logging.getLogger(__name__)

# === Caching Context ===
CacheKey = NewType("CacheKey", str)            # Unique key for a cache entry
CacheValue = Any                               # Anything the engine can pickle

# TTLs are expressed in minutes; a timedelta is accepted as well.
TTL = Union[int, float, timedelta, None]

# === Configuration Keys ===
ENABLED_KEY = "countries.cache.enabled"
DURATION_KEY = "cache.duration"
DIRECTORY_KEY = "cache.directory"

DEFAULT_ENABLED = True
DEFAULT_DURATION_MINUTES = 180


@dataclass
class CacheConfig:
    """Cache settings passed explicitly at construction time.

    The instance is shared between a facade and its manager, so flipping
    ``enabled`` at runtime affects both layers.

    Attributes:
        enabled: Global switch for cache reads and writes.
        duration: Default TTL in minutes when a write gives none.
        directory: Storage directory; a temp-dir subpath is used when unset.
    """
    enabled: bool = DEFAULT_ENABLED
    duration: int = DEFAULT_DURATION_MINUTES
    directory: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.directory is not None and not isinstance(self.directory, Path):
            self.directory = Path(self.directory)

    @classmethod
    def from_provider(cls, provider: Any) -> "CacheConfig":
        """Builds a CacheConfig from anything exposing ``get(dotted_key, default)``."""
        enabled = provider.get(ENABLED_KEY, DEFAULT_ENABLED)
        duration = provider.get(DURATION_KEY, DEFAULT_DURATION_MINUTES)
        directory = provider.get(DIRECTORY_KEY)
        return cls(
            enabled=_as_bool(enabled),
            duration=_as_minutes(duration),
            directory=Path(directory) if directory else None,
        )


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _as_minutes(value: Any) -> int:
    if value is None:
        return DEFAULT_DURATION_MINUTES
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(
            f"Invalid {DURATION_KEY} value {value!r}; using default of {DEFAULT_DURATION_MINUTES} minutes."
        )
        return DEFAULT_DURATION_MINUTES
