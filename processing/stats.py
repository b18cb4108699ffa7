"""
Stats Builder - combine a location and a snapshot into a display record.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

from config import US_COUNTRY_CODE
from models import Snapshot, TrackedLocation
from .transforms import current_total_and_delta, make_delta


@dataclass(frozen=True)
class Stats:
    """Contains the data for a given location."""

    update_time: datetime

    # Caption for the location
    caption: str
    # Subcaption to show for the location
    subcaption: Optional[str]

    # Total number of cases for that location
    total_cases: int
    # Number of new cases in the last day
    delta_cases: int
    # Cumulative cases, oldest first
    cases: Tuple[int, ...]
    # Change of cases per day
    cases_delta: Tuple[int, ...]

    total_deaths: int
    delta_deaths: int
    deaths: Tuple[int, ...]
    deaths_delta: Tuple[int, ...]

    lat: Optional[str] = None
    long: Optional[str] = None

    # Set only on the fallback record from placeholder_stats()
    is_placeholder: bool = False


def make_caption(location: TrackedLocation) -> Tuple[str, Optional[str]]:
    """
    Pick the (caption, subcaption) pair for a location.

    US locations are shown by county with the state underneath; everywhere
    else by province/state with the country underneath. When the finer
    level is missing, the coarser one becomes the caption and there is no
    subcaption.
    """
    if location.country_region == US_COUNTRY_CODE:
        if not location.admin:
            return location.province_state or '', None
        return location.admin, location.province_state

    if not location.province_state:
        return location.country_region or '', None
    return location.province_state, location.country_region


def make_stat(
    location: TrackedLocation,
    snapshot: Snapshot,
    date: Optional[datetime] = None
) -> Stats:
    """
    Build the display record for a location.

    Args:
        location: Location metadata from the bundled table
        snapshot: Cumulative deaths/confirmed series, oldest first
        date: Update time, defaults to now (UTC)

    Returns:
        A new Stats record

    Raises:
        InsufficientDataError: if either series has fewer than two values
    """
    total_deaths, delta_deaths = current_total_and_delta(snapshot.last_deaths, 'lastDeaths')
    total_cases, delta_cases = current_total_and_delta(snapshot.last_confirmed, 'lastConfirmed')

    caption, subcaption = make_caption(location)

    return Stats(
        update_time=date or datetime.now(timezone.utc),
        caption=caption,
        subcaption=subcaption,
        total_cases=total_cases,
        delta_cases=delta_cases,
        cases=tuple(snapshot.last_confirmed),
        cases_delta=tuple(make_delta(snapshot.last_confirmed)),
        total_deaths=total_deaths,
        delta_deaths=delta_deaths,
        deaths=tuple(snapshot.last_deaths),
        deaths_delta=tuple(make_delta(snapshot.last_deaths)),
        lat=location.lat,
        long=location.long,
    )


def placeholder_stats(caption: str, date: Optional[datetime] = None) -> Stats:
    """
    Fixed stand-in record for callers that asked for fallback mode.

    The caption says why real data is missing ("CODE" for an unknown
    snapshot, "GLOBAL" for an unknown location).
    """
    return Stats(
        update_time=date or datetime.now(timezone.utc),
        caption=caption,
        subcaption=None,
        total_cases=1234,
        delta_cases=11,
        cases=(),
        cases_delta=(),
        total_deaths=897,
        delta_deaths=2,
        deaths=(),
        deaths_delta=(),
        is_placeholder=True,
    )
