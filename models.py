"""
Wire records and JSON decoding.

Three payload shapes share the same envelope (time + version):
- bundled location table:  {"time", "version", "globals": {code: location}}
- bulk snapshot file:      {"time", "version", "snapshots": {code: snapshot}}
- per-code remote payload: {"time", "version", "snapshot": snapshot}
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Union

from dateutil.parser import isoparse

from config import FORMAT_VERSION
from errors import DecodeFailureError, FormatVersionError


@dataclass(frozen=True)
class TrackedLocation:
    """A reporting region from the bundled location table."""

    title: Optional[str] = None
    admin: Optional[str] = None  # County level, US only
    province_state: Optional[str] = None
    country_region: Optional[str] = None
    lat: Optional[str] = None
    long: Optional[str] = None


@dataclass(frozen=True)
class Snapshot:
    """Last N cumulative daily counts for one location, oldest first."""

    last_deaths: Tuple[int, ...]
    last_confirmed: Tuple[int, ...]


@dataclass(frozen=True)
class IndividualSnapshot:
    """Per-code payload served by the remote data endpoint."""

    snapshot: Snapshot
    time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = FORMAT_VERSION


@dataclass(frozen=True)
class SnapshotData:
    """Bulk snapshot file covering many codes."""

    snapshots: Dict[str, Snapshot] = field(default_factory=dict)
    time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = FORMAT_VERSION


@dataclass(frozen=True)
class GlobalData:
    """All of the locations we are tracking."""

    globals: Dict[str, TrackedLocation] = field(default_factory=dict)
    time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = FORMAT_VERSION


# =============================================================================
# Decoding
# =============================================================================

def load_json(content: Union[str, bytes]) -> Dict[str, Any]:
    """Parse a JSON object, raising DecodeFailureError on anything else."""
    try:
        payload = json.loads(content)
    except (ValueError, TypeError) as e:
        raise DecodeFailureError(f"Invalid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise DecodeFailureError(f"Expected a JSON object, got {type(payload).__name__}")
    return payload


def parse_time(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp. Naive timestamps are taken as UTC."""
    if not isinstance(value, str):
        raise DecodeFailureError(f"Expected ISO-8601 time string, got {value!r}")
    try:
        parsed = isoparse(value)
    except (ValueError, OverflowError) as e:
        raise DecodeFailureError(f"Invalid time '{value}': {e}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def check_version(payload: Dict[str, Any]) -> int:
    """Return the payload version, raising FormatVersionError on mismatch."""
    version = payload.get('version', FORMAT_VERSION)
    if isinstance(version, bool) or not isinstance(version, int):
        raise DecodeFailureError(f"Invalid format version {version!r}")
    if version != FORMAT_VERSION:
        raise FormatVersionError(version, FORMAT_VERSION)
    return version


def _int_series(raw: Any, key: str) -> Tuple[int, ...]:
    if not isinstance(raw, list):
        raise DecodeFailureError(f"'{key}' must be a list of integers")
    for item in raw:
        if isinstance(item, bool) or not isinstance(item, int):
            raise DecodeFailureError(f"'{key}' contains non-integer value {item!r}")
    return tuple(raw)


def _optional_str(raw: Dict[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeFailureError(f"'{key}' must be a string, got {value!r}")
    return value


def snapshot_from_dict(raw: Any) -> Snapshot:
    """Decode a {"lastDeaths": [...], "lastConfirmed": [...]} mapping."""
    if not isinstance(raw, dict):
        raise DecodeFailureError("Snapshot must be a JSON object")
    deaths = _int_series(raw.get('lastDeaths'), 'lastDeaths')
    confirmed = _int_series(raw.get('lastConfirmed'), 'lastConfirmed')
    if len(deaths) != len(confirmed):
        raise DecodeFailureError(
            f"'lastDeaths' has {len(deaths)} values but 'lastConfirmed' has {len(confirmed)}"
        )
    return Snapshot(last_deaths=deaths, last_confirmed=confirmed)


def location_from_dict(raw: Any) -> TrackedLocation:
    """Decode one entry of the bundled "globals" mapping."""
    if not isinstance(raw, dict):
        raise DecodeFailureError("Location must be a JSON object")
    return TrackedLocation(
        title=_optional_str(raw, 'title'),
        admin=_optional_str(raw, 'admin'),
        province_state=_optional_str(raw, 'proviceState'),  # sic, wire spelling
        country_region=_optional_str(raw, 'countryRegion'),
        lat=_optional_str(raw, 'lat'),
        long=_optional_str(raw, 'long'),
    )


def _envelope(payload: Dict[str, Any]) -> Tuple[datetime, int]:
    version = check_version(payload)
    if 'time' in payload:
        return parse_time(payload['time']), version
    return datetime.now(timezone.utc), version


def decode_individual_snapshot(content: Union[str, bytes]) -> IndividualSnapshot:
    """Decode the per-code remote payload."""
    payload = load_json(content)
    time, version = _envelope(payload)
    if 'snapshot' not in payload:
        raise DecodeFailureError("Missing 'snapshot' field")
    return IndividualSnapshot(
        snapshot=snapshot_from_dict(payload['snapshot']),
        time=time,
        version=version,
    )


def decode_snapshot_data(content: Union[str, bytes]) -> SnapshotData:
    """Decode the bulk snapshot file."""
    payload = load_json(content)
    time, version = _envelope(payload)
    raw = payload.get('snapshots', {})
    if not isinstance(raw, dict):
        raise DecodeFailureError("'snapshots' must be a JSON object")
    return SnapshotData(
        snapshots={code: snapshot_from_dict(item) for code, item in raw.items()},
        time=time,
        version=version,
    )


def decode_global_data(content: Union[str, bytes]) -> GlobalData:
    """Decode the bundled location table."""
    payload = load_json(content)
    time, version = _envelope(payload)
    raw = payload.get('globals', {})
    if not isinstance(raw, dict):
        raise DecodeFailureError("'globals' must be a JSON object")
    return GlobalData(
        globals={code: location_from_dict(item) for code, item in raw.items()},
        time=time,
        version=version,
    )


def encode_individual_snapshot(isnap: IndividualSnapshot) -> str:
    """Serialize a per-code payload back to its wire form (used by the disk cache)."""
    return json.dumps({
        'time': isnap.time.isoformat(),
        'version': isnap.version,
        'snapshot': {
            'lastDeaths': list(isnap.snapshot.last_deaths),
            'lastConfirmed': list(isnap.snapshot.last_confirmed),
        },
    })
