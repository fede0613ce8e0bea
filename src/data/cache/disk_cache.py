"""SQLite-based disk cache with TTL support."""

import logging
from pathlib import Path
from typing import Any, Optional, TypeVar

import diskcache

from config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DiskCache:
    """
    SQLite-based disk cache with TTL support.

    Uses diskcache for persistent caching with automatic expiration.
    Values must be picklable; cache failures are logged and treated as misses.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        namespace: str = "prices",
        directory: Optional[Path] = None,
    ):
        self.settings = settings or get_settings()
        self.namespace = namespace
        self._directory = directory
        self._cache: Optional[diskcache.Cache] = None

    def _get_cache(self) -> diskcache.Cache:
        """Get or create the cache instance."""
        if self._cache is None:
            base = self._directory or self.settings.ensure_cache_dir()
            cache_dir = Path(base) / self.namespace
            cache_dir.mkdir(parents=True, exist_ok=True)
            self._cache = diskcache.Cache(str(cache_dir))
        return self._cache

    def get(self, key: str, default: Optional[T] = None) -> Optional[T]:
        """
        Get a value from the cache.

        Args:
            key: Cache key
            default: Default value if not found or expired

        Returns:
            Cached value or default
        """
        try:
            return self._get_cache().get(key, default=default)
        except Exception as e:
            logger.warning(f"Cache get error for key {key}: {e}")
            return default

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Set a value in the cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time-to-live in seconds (None = use default)

        Returns:
            True if successful
        """
        if ttl is None:
            ttl = self.settings.cache_ttl_seconds

        try:
            self._get_cache().set(key, value, expire=ttl)
            return True
        except Exception as e:
            logger.warning(f"Cache set error for key {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        try:
            return self._get_cache().delete(key)
        except Exception as e:
            logger.warning(f"Cache delete error for key {key}: {e}")
            return False

    def clear(self) -> int:
        """Clear all values from the cache, returning how many were removed."""
        try:
            cache = self._get_cache()
            count = len(cache)
            cache.clear()
            return count
        except Exception as e:
            logger.warning(f"Cache clear error: {e}")
            return 0

    def stats(self) -> dict:
        """Get cache statistics."""
        try:
            cache = self._get_cache()
            return {
                "size": len(cache),
                "volume": cache.volume(),
                "directory": str(cache.directory),
            }
        except Exception as e:
            logger.warning(f"Cache stats error: {e}")
            return {}

    def close(self):
        """Close the cache connection."""
        if self._cache:
            self._cache.close()
            self._cache = None


class CacheKeys:
    """Standard cache key patterns."""

    @staticmethod
    def price(source: str, token_address: str, at: int) -> str:
        return f"price:{source}:{token_address.lower()}:{at}"
