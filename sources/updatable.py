"""
Updatable Stats - one location's Stats, refreshed on demand.

Each load() issues a single fetch. On success the new Stats record
replaces the old one and every subscriber is called with it; on failure
the previous record stays in place.
"""

import logging
from typing import Callable, List, Optional

from errors import CovidStatsError, MissingLocationError
from processing import Stats, make_stat
from .base import SnapshotResult
from .manager import SnapshotStore

logger = logging.getLogger(__name__)

StatsCallback = Callable[[Stats], None]


class UpdatableStats:
    """Latest Stats for a location code plus change notification."""

    def __init__(self, code: str, store: SnapshotStore):
        self.code = code
        self._store = store
        self._subscribers: List[StatsCallback] = []
        self.stat: Optional[Stats] = None

        self.location = store.resolve_location(code)
        if self.location is None:
            raise MissingLocationError(code)

    def subscribe(self, callback: StatsCallback) -> Callable[[], None]:
        """
        Register a callback for new Stats records.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def load(self) -> Optional[Stats]:
        """Fetch fresh data. Returns the new Stats, or None if the fetch failed."""
        result = await self._store.fetch_snapshot(self.code, refresh=True)
        return self._apply(result)

    def load_sync(self) -> Optional[Stats]:
        """Synchronous version of load()."""
        result = self._store.fetch_snapshot_sync(self.code, refresh=True)
        return self._apply(result)

    def _apply(self, result: SnapshotResult) -> Optional[Stats]:
        if not result.is_valid:
            logger.warning(f"Keeping previous stats for {self.code}: {result.error}")
            return None

        try:
            stat = make_stat(self.location, result.snapshot, result.time)
        except CovidStatsError as e:
            logger.warning(f"Keeping previous stats for {self.code}: {e}")
            return None

        self.stat = stat
        for callback in list(self._subscribers):
            try:
                callback(stat)
            except Exception:
                # One bad subscriber must not starve the rest
                logger.exception(f"Stats subscriber for {self.code} failed")
        return stat
