"""
Error taxonomy for CovidStats.

Derivation errors are raised to the caller; nothing is silently replaced
with placeholder data unless the caller asks for fallback mode.
"""

from typing import Optional


class CovidStatsError(Exception):
    """Base class for all CovidStats errors."""


class MissingLocationError(CovidStatsError):
    """Location code is not in the bundled location table."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"No tracked location for code '{code}'")


class MissingSnapshotError(CovidStatsError):
    """No snapshot could be resolved for a location code."""

    def __init__(self, code: str, reason: Optional[str] = None):
        self.code = code
        self.reason = reason
        message = f"No snapshot for code '{code}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InsufficientDataError(CovidStatsError):
    """A series is too short to derive a current total and delta."""

    def __init__(self, series: str, length: int):
        self.series = series
        self.length = length
        super().__init__(f"Series '{series}' has {length} element(s), need at least 2")


class InvalidInputError(CovidStatsError, ValueError):
    """Value outside the domain a formatter or transform accepts."""


class DecodeFailureError(CovidStatsError):
    """Malformed JSON payload from the bundle, bulk file, cache or network."""


class FormatVersionError(DecodeFailureError):
    """Payload was written for a different wire format version."""

    def __init__(self, found: int, expected: int):
        self.found = found
        self.expected = expected
        super().__init__(f"Unsupported format version {found} (expected {expected})")


class InitializationError(CovidStatsError):
    """The snapshot store could not be opened."""
