"""Cache storage managers.

Provides concrete implementations of the CacheInterface bound to a storage
engine. The file-based manager delegates to ``diskcache``.
"""

from countrycache.infrastructure.cache.disk_manager import DiskCacheManager

__all__ = ["DiskCacheManager"]
