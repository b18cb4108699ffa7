"""Processing module - Series transforms, stats building and number formatting."""

from .transforms import make_delta, last_two, current_total_and_delta
from .stats import Stats, make_stat, make_caption, placeholder_stats
from .formatter import NumberFormatter, Tier, fmt_large, fmt_delta, fmt_digit

__all__ = [
    'make_delta',
    'last_two',
    'current_total_and_delta',
    'Stats',
    'make_stat',
    'make_caption',
    'placeholder_stats',
    'NumberFormatter',
    'Tier',
    'fmt_large',
    'fmt_delta',
    'fmt_digit',
]
