"""
Bundle Snapshot Source - bulk snapshot file on local disk.

One JSON file holding the snapshots of many codes, read once at startup.
"""

import logging
from pathlib import Path
from typing import Optional

from errors import DecodeFailureError
from models import SnapshotData, decode_snapshot_data
from .base import SnapshotSource, SnapshotResult

logger = logging.getLogger(__name__)


class BundleSnapshotSource(SnapshotSource):
    """Serves snapshots from a bulk SnapshotData file."""

    def __init__(self, path: Optional[str]):
        self._path = path
        self._data: Optional[SnapshotData] = None
        self._load()

    def _load(self):
        if not self._path:
            return
        try:
            self._data = decode_snapshot_data(Path(self._path).read_bytes())
            logger.info(f"Loaded {len(self._data.snapshots)} snapshots from {self._path}")
        except OSError as e:
            logger.warning(f"Snapshot bundle not available at {self._path}: {e}")
        except DecodeFailureError as e:
            logger.warning(f"Snapshot bundle at {self._path} is malformed: {e}")

    @property
    def name(self) -> str:
        return "Bundle"

    @property
    def available(self) -> bool:
        return self._data is not None

    def supports(self, code: str) -> bool:
        return self._data is not None and code in self._data.snapshots

    async def fetch(self, code: str) -> SnapshotResult:
        return self.fetch_sync(code)

    def fetch_sync(self, code: str) -> SnapshotResult:
        if self._data is None:
            return SnapshotResult(code=code, source=self.name, error="Snapshot bundle not available")

        snapshot = self._data.snapshots.get(code)
        if snapshot is None:
            return SnapshotResult(code=code, source=self.name, error=f"No snapshot for {code} in bundle")

        return SnapshotResult(code=code, snapshot=snapshot, time=self._data.time, source=self.name)
