"""
Snapshot Store - Routes location codes to snapshot sources.

Owns the location registry, the sources and the caches, and turns a
location code into a Stats record.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional

from cache import CacheManager
from config import config
from errors import MissingLocationError, MissingSnapshotError
from models import IndividualSnapshot, Snapshot, TrackedLocation
from processing import Stats, make_stat, placeholder_stats
from registry import LocationRegistry, load_registry
from .base import SnapshotSource, SnapshotResult
from .bundle import BundleSnapshotSource
from .remote import RemoteSnapshotSource

logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    Resolves locations and snapshots by code.

    Snapshot lookup order: memory cache, first supporting source, then the
    last payload written to the disk cache.
    """

    def __init__(
        self,
        registry: LocationRegistry,
        sources: List[SnapshotSource],
        cache: Optional[CacheManager] = None
    ):
        self._registry = registry
        self._sources = list(sources)
        self._cache = cache or CacheManager(disk=None)

    @classmethod
    def open(
        cls,
        cfg=config,
        sources: Optional[List[SnapshotSource]] = None,
        cache: Optional[CacheManager] = None
    ) -> "SnapshotStore":
        """
        Initialize a store from configuration.

        Raises:
            InitializationError: if the location bundle cannot be read
            DecodeFailureError: if the location bundle is malformed
        """
        registry = load_registry(cfg.global_bundle_path)

        if sources is None:
            # Local bulk file first, remote endpoint as catch-all
            sources = [
                BundleSnapshotSource(cfg.snapshot_bundle_path),
                RemoteSnapshotSource(cfg.data_base_url),
            ]
        for source in sources:
            logger.info(f"[Sources] {source.name}: {'available' if source.available else 'not available'}")

        return cls(registry, sources, cache or CacheManager.from_config(cfg))

    @property
    def registry(self) -> LocationRegistry:
        return self._registry

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve_location(self, code: str) -> Optional[TrackedLocation]:
        """Get the tracked location for a code, or None."""
        return self._registry.get(code)

    def resolve_snapshot(self, code: str) -> Optional[Snapshot]:
        """Get the snapshot for a code, or None if no source has it."""
        result = self.fetch_snapshot_sync(code)
        return result.snapshot if result.is_valid else None

    def get_source(self, code: str) -> Optional[SnapshotSource]:
        """Find the source that handles a code."""
        for source in self._sources:
            if source.available and source.supports(code):
                return source
        return None

    async def fetch_snapshot(self, code: str, refresh: bool = False) -> SnapshotResult:
        """
        Fetch the snapshot for a code, using cache if available.

        Args:
            code: The location code
            refresh: Skip the memory cache and ask the source again
        """
        if not refresh:
            cached = self._from_memory(code)
            if cached:
                return cached

        source = self.get_source(code)
        if not source:
            return self._from_disk(code, f"No snapshot source found for {code}")

        result = await source.fetch(code)
        return self._after_fetch(code, result)

    def fetch_snapshot_sync(self, code: str, refresh: bool = False) -> SnapshotResult:
        """Synchronous fetch - uses cache and sync source methods."""
        if not refresh:
            cached = self._from_memory(code)
            if cached:
                return cached

        source = self.get_source(code)
        if not source:
            return self._from_disk(code, f"No snapshot source found for {code}")

        result = source.fetch_sync(code)
        return self._after_fetch(code, result)

    async def fetch_many(self, codes: List[str]) -> List[SnapshotResult]:
        """Fetch several codes concurrently, results in input order."""
        return await asyncio.gather(*(self.fetch_snapshot(code) for code in codes))

    def _from_memory(self, code: str) -> Optional[SnapshotResult]:
        isnap = self._cache.get_snapshot(code)
        if isnap is None:
            return None
        logger.debug(f"Memory cache hit for {code}")
        return SnapshotResult(code=code, snapshot=isnap.snapshot, time=isnap.time, source='cache')

    def _from_disk(self, code: str, error: str) -> SnapshotResult:
        isnap = self._cache.load_cached(code)
        if isnap is None:
            return SnapshotResult(code=code, error=error)
        # Not promoted to the memory tier so the next call retries the source
        logger.warning(f"Using cached snapshot for {code} ({error})")
        return SnapshotResult(code=code, snapshot=isnap.snapshot, time=isnap.time, source='disk')

    def _after_fetch(self, code: str, result: SnapshotResult) -> SnapshotResult:
        if not result.is_valid:
            return self._from_disk(code, result.error or f"No snapshot for {code}")

        isnap = IndividualSnapshot(
            snapshot=result.snapshot,
            time=result.time or datetime.now(timezone.utc),
        )
        self._cache.set_snapshot(code, isnap)
        logger.info(f"Data loaded for {code} from {result.source}")
        return result

    # =========================================================================
    # Stats
    # =========================================================================

    def stats(self, code: str, fallback: bool = False) -> Stats:
        """
        Build the Stats record for a code.

        Args:
            code: The location code
            fallback: Return the labeled placeholder record instead of raising

        Raises:
            MissingLocationError: code not in the location table
            MissingSnapshotError: no snapshot could be resolved
            InsufficientDataError: a series is too short
        """
        location = self._require_location(code, fallback)
        if location is None:
            return placeholder_stats('GLOBAL')
        return self._build(code, location, self.fetch_snapshot_sync(code), fallback)

    async def fetch_stats(self, code: str, fallback: bool = False, refresh: bool = False) -> Stats:
        """Async version of stats()."""
        location = self._require_location(code, fallback)
        if location is None:
            return placeholder_stats('GLOBAL')
        return self._build(code, location, await self.fetch_snapshot(code, refresh=refresh), fallback)

    def _require_location(self, code: str, fallback: bool) -> Optional[TrackedLocation]:
        location = self.resolve_location(code)
        if location is None:
            if not fallback:
                raise MissingLocationError(code)
            logger.warning(f"Falling back to placeholder stats for unknown location {code}")
        return location

    def _build(self, code: str, location: TrackedLocation, result: SnapshotResult, fallback: bool) -> Stats:
        if not result.is_valid:
            if fallback:
                logger.warning(f"Falling back to placeholder stats for {code}: {result.error}")
                return placeholder_stats('CODE')
            raise MissingSnapshotError(code, result.error)
        return make_stat(location, result.snapshot, result.time)

    # =========================================================================
    # Utilities
    # =========================================================================

    def available_sources(self) -> dict:
        """Get status of all registered sources."""
        return {source.name: source.available for source in self._sources}

    def cache_stats(self) -> dict:
        return self._cache.stats()

    def clear_cache(self, include_disk: bool = False) -> None:
        self._cache.clear_all(include_disk=include_disk)
