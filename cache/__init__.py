"""Cache module - Memory and disk snapshot caching."""

from .cache_manager import CacheManager, DiskCache, LRUCache

__all__ = ['CacheManager', 'DiskCache', 'LRUCache']
