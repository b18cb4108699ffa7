"""
Series Transforms - cumulative series to per-period deltas.

Snapshots carry cumulative counts (oldest first). The display needs:
- the current total (last value)
- the current delta (last value minus the one before)
- the per-period delta series
"""

from typing import List, Sequence, Tuple

import numpy as np

from errors import InsufficientDataError, InvalidInputError


def make_delta(values: Sequence[int]) -> List[int]:
    """
    Convert a cumulative series into a per-period delta series.

    Args:
        values: Cumulative counts, oldest first

    Returns:
        List of length len(values) - 1 where result[i] = values[i+1] - values[i].
        A single-element series yields an empty list.

    Raises:
        InvalidInputError: if the series is empty
    """
    if len(values) == 0:
        raise InvalidInputError("Cannot compute deltas of an empty series")

    # object dtype keeps Python int semantics (no overflow on large counts)
    return np.diff(np.asarray(values, dtype=object)).tolist()


def last_two(values: Sequence[int], series: str = 'series') -> Tuple[int, int]:
    """
    Get the last two values of a series as (previous, current).

    Raises:
        InsufficientDataError: if the series has fewer than two values
    """
    if len(values) < 2:
        raise InsufficientDataError(series, len(values))
    return values[-2], values[-1]


def current_total_and_delta(values: Sequence[int], series: str = 'series') -> Tuple[int, int]:
    """Return (total, delta) where total is the last value and delta the last change."""
    previous, current = last_two(values, series)
    return current, current - previous
