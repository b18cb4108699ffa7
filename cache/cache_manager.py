"""
Snapshot Cache Manager - Two Tiers

Tier 1: Memory cache (30 min TTL)
  - Location code -> IndividualSnapshot
  - Avoids refetching the same code during a session

Tier 2: Disk cache (no expiry)
  - Location code -> raw per-code JSON payload under the cache directory
  - Last known data when the network is unavailable
"""

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from config import config
from errors import DecodeFailureError
from models import IndividualSnapshot, decode_individual_snapshot, encode_individual_snapshot

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Single cache entry with value and expiration."""
    value: Any
    expires_at: float
    created_at: float = field(default_factory=time.time)


class LRUCache:
    """LRU cache with TTL support."""

    def __init__(self, max_size: int = 1000):
        self._cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._max_size = max_size

    def get(self, key: str) -> Optional[Any]:
        """Get value if exists and not expired."""
        if key not in self._cache:
            return None

        entry = self._cache[key]
        if time.time() > entry.expires_at:
            del self._cache[key]
            return None

        # Move to end (most recently used)
        self._cache.move_to_end(key)
        return entry.value

    def set(self, key: str, value: Any, ttl: int) -> None:
        """Set value with TTL in seconds."""
        if key in self._cache:
            del self._cache[key]

        # Evict oldest if at capacity
        while len(self._cache) >= self._max_size:
            self._cache.popitem(last=False)

        self._cache[key] = CacheEntry(value=value, expires_at=time.time() + ttl)

    def clear(self) -> None:
        """Clear all entries."""
        self._cache.clear()

    def stats(self) -> dict:
        """Get cache statistics."""
        now = time.time()
        valid = sum(1 for e in self._cache.values() if e.expires_at > now)
        return {
            'total_entries': len(self._cache),
            'valid_entries': valid,
            'expired_entries': len(self._cache) - valid,
            'max_size': self._max_size,
        }


class DiskCache:
    """Per-code payload files in a cache directory."""

    def __init__(self, directory: str):
        self._directory = Path(directory)

    def path_for(self, code: str) -> Path:
        # Codes are opaque; keep them from escaping the cache directory
        return self._directory / code.replace('/', '_')

    def try_load(self, code: str) -> Optional[IndividualSnapshot]:
        """Load a cached payload, or None if missing or unreadable."""
        path = self.path_for(code)
        try:
            content = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Could not read cached snapshot {path}: {e}")
            return None

        try:
            return decode_individual_snapshot(content)
        except DecodeFailureError as e:
            logger.warning(f"Ignoring corrupt cached snapshot {path}: {e}")
            return None

    def store(self, code: str, isnap: IndividualSnapshot) -> bool:
        """Write a payload to the cache. Returns False if the write failed."""
        path = self.path_for(code)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            path.write_text(encode_individual_snapshot(isnap))
            return True
        except OSError as e:
            logger.warning(f"Could not write cached snapshot {path}: {e}")
            return False

    def clear(self) -> None:
        if not self._directory.is_dir():
            return
        for path in self._directory.iterdir():
            if path.is_file():
                path.unlink()

    def stats(self) -> dict:
        files = list(self._directory.iterdir()) if self._directory.is_dir() else []
        return {
            'directory': str(self._directory),
            'total_entries': sum(1 for p in files if p.is_file()),
        }


class CacheManager:
    """
    Two-tier snapshot cache.

    Tiers:
    1. Memory: code -> IndividualSnapshot (snapshot_cache_ttl)
    2. Disk: code -> payload file (optional, no expiry)
    """

    def __init__(
        self,
        ttl: int = config.snapshot_cache_ttl,
        max_size: int = config.max_cache_size,
        disk: Optional[DiskCache] = None
    ):
        self._ttl = ttl
        self._memory = LRUCache(max_size=max_size)
        self._disk = disk

    @classmethod
    def from_config(cls, cfg=config) -> "CacheManager":
        disk = DiskCache(cfg.cache_dir) if cfg.enable_disk_cache else None
        return cls(ttl=cfg.snapshot_cache_ttl, max_size=cfg.max_cache_size, disk=disk)

    # =========================================================================
    # Tier 1: Memory
    # =========================================================================

    def get_snapshot(self, code: str) -> Optional[IndividualSnapshot]:
        """Get a recently fetched snapshot."""
        return self._memory.get(self._snapshot_key(code))

    def set_snapshot(self, code: str, isnap: IndividualSnapshot, persist: bool = True) -> None:
        """Cache a fetched snapshot in memory, and on disk when persist is set."""
        self._memory.set(self._snapshot_key(code), isnap, self._ttl)
        if persist and self._disk is not None:
            self._disk.store(code, isnap)

    def _snapshot_key(self, code: str) -> str:
        return f"snapshot:{code}"

    # =========================================================================
    # Tier 2: Disk
    # =========================================================================

    def load_cached(self, code: str) -> Optional[IndividualSnapshot]:
        """Last snapshot written to disk for a code, if any."""
        if self._disk is None:
            return None
        return self._disk.try_load(code)

    # =========================================================================
    # Utilities
    # =========================================================================

    def stats(self) -> dict:
        """Get cache statistics for all tiers."""
        return {
            'memory': self._memory.stats(),
            'disk': self._disk.stats() if self._disk is not None else None,
        }

    def clear_all(self, include_disk: bool = False) -> None:
        """Clear the memory tier, and the disk tier when asked."""
        self._memory.clear()
        if include_disk and self._disk is not None:
            self._disk.clear()
