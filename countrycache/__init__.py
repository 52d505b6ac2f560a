"""countrycache: a file-backed key/value cache facade.

Exposes a uniform get/set/delete/clear/remember interface on top of
``diskcache``, gated by a global "cache enabled" configuration flag.
"""

from countrycache.core.cache_service import CacheService
from countrycache.domain.exceptions import CacheError, EmptyKeyError
from countrycache.domain.models.common import CacheConfig
from countrycache.infrastructure.cache.disk_manager import DiskCacheManager

__all__ = [
    "CacheService",
    "CacheConfig",
    "CacheError",
    "EmptyKeyError",
    "DiskCacheManager",
]

__version__ = "1.0.0"
