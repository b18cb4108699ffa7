"""
Abstract interface for all snapshot sources.

Makes it trivial to add new sources - just implement the SnapshotSource protocol.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from models import Snapshot


@dataclass
class SnapshotResult:
    """Result from fetching the snapshot of one location code."""

    code: str
    snapshot: Optional[Snapshot] = None
    time: Optional[datetime] = None
    source: str = ''
    error: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        """Check if the snapshot was fetched successfully."""
        return self.error is None and self.snapshot is not None


class SnapshotSource(ABC):
    """Abstract base class for snapshot sources."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this source."""
        pass

    @abstractmethod
    async def fetch(self, code: str) -> SnapshotResult:
        """
        Fetch the snapshot for a single location code.

        Failures are reported through SnapshotResult.error, not raised.
        """
        pass

    @abstractmethod
    def supports(self, code: str) -> bool:
        """Check if this source can serve the given location code."""
        pass

    @property
    def available(self) -> bool:
        return True

    def fetch_sync(self, code: str) -> SnapshotResult:
        """
        Synchronous version of fetch.

        Default implementation runs the async method in a fresh event loop.
        Override for sources with a native sync path.
        """
        return asyncio.run(self.fetch(code))
