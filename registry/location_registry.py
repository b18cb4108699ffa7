"""
Location Registry - the bundled table of tracked locations.

Loaded once by an explicit call to load_registry(); the returned handle
is passed to whatever needs it. Provides O(1) lookup by location code.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from errors import InitializationError
from models import GlobalData, TrackedLocation, decode_global_data

logger = logging.getLogger(__name__)


class LocationRegistry:
    """Read-only view over the bundled location table."""

    def __init__(self, data: GlobalData):
        self._data = data

    def get(self, code: str) -> Optional[TrackedLocation]:
        """Get the location for a code, or None if it is not tracked."""
        return self._data.globals.get(code)

    def search(self, text: str) -> Dict[str, TrackedLocation]:
        """Find locations whose title contains text (case-insensitive)."""
        needle = text.lower().strip()
        return {
            code: location
            for code, location in self._data.globals.items()
            if location.title and needle in location.title.lower()
        }

    def __contains__(self, code: str) -> bool:
        return code in self._data.globals

    def __len__(self) -> int:
        return len(self._data.globals)


def load_registry(path: str) -> LocationRegistry:
    """
    Load the bundled location table.

    Args:
        path: Path to the bundled global JSON file

    Returns:
        LocationRegistry handle

    Raises:
        InitializationError: if the file cannot be read
        DecodeFailureError: if the file is malformed or has the wrong version
    """
    try:
        content = Path(path).read_bytes()
    except OSError as e:
        raise InitializationError(f"Cannot read location bundle at {path}: {e}") from e

    registry = LocationRegistry(decode_global_data(content))
    logger.info(f"Loaded {len(registry)} tracked locations from {path}")
    return registry
