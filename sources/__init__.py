"""Snapshot sources module - Unified interface for snapshot providers."""

from .base import SnapshotSource, SnapshotResult
from .bundle import BundleSnapshotSource
from .remote import RemoteSnapshotSource
from .manager import SnapshotStore
from .updatable import UpdatableStats

__all__ = [
    'SnapshotSource',
    'SnapshotResult',
    'BundleSnapshotSource',
    'RemoteSnapshotSource',
    'SnapshotStore',
    'UpdatableStats',
]
