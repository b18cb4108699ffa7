"""
Magnitude Formatter - render counts for compact display.

Two tiered renderings plus a plain one:
- fmt_large:  absolute values   ("950", "250k", "2M")
- fmt_delta:  non-negative changes, always signed ("+50", "+15.0k", "+3.42M")
- fmt_digit:  any integer, full precision, no suffix ("-1,234")

Digit grouping and the decimal mark come from config (en-US by default).
"""

import numbers
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from typing import Sequence

from config import config
from errors import InvalidInputError


@dataclass(frozen=True)
class Tier:
    """One magnitude band: values >= threshold are divided by divisor and suffixed."""

    threshold: int
    divisor: int
    suffix: str
    max_digits: int      # Fractional digits kept after rounding
    min_digits: int = 0  # Fractional digits never trimmed


# Highest threshold first
LARGE_TIERS = (
    Tier(1_000_000, 1_000_000, 'M', max_digits=0),
    Tier(100_000, 1_000, 'k', max_digits=0),
    Tier(0, 1, '', max_digits=2),
)

DELTA_TIERS = (
    Tier(1_000_000, 1_000_000, 'M', max_digits=2),
    Tier(10_000, 1_000, 'k', max_digits=1, min_digits=1),
    Tier(0, 1, '', max_digits=2),
)


def _check_integer(n) -> int:
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise InvalidInputError(f"Expected an integer, got {n!r}")
    return int(n)


def _check_non_negative(n) -> int:
    value = _check_integer(n)
    if value < 0:
        raise InvalidInputError(f"Expected a non-negative value, got {value}")
    return value


def _scale(value: int, divisor: int) -> Decimal:
    """Exact value / divisor for integers of any size."""
    with localcontext() as ctx:
        ctx.prec = len(str(abs(value))) + len(str(divisor))
        return Decimal(value) / Decimal(divisor)


def _quantize(value: Decimal, max_digits: int) -> Decimal:
    with localcontext() as ctx:
        # Enough precision to hold every integer digit plus the fraction
        ctx.prec = max(28, value.adjusted() + max_digits + 2)
        return value.quantize(Decimal(1).scaleb(-max_digits), rounding=ROUND_HALF_EVEN)


class NumberFormatter:
    """Tiered number formatting for one grouping/decimal convention."""

    def __init__(self, group_separator: str = ',', decimal_separator: str = '.'):
        self.group_separator = group_separator
        self.decimal_separator = decimal_separator

    def decimal(self, value, max_digits: int = 2, min_digits: int = 0) -> str:
        """
        Grouped decimal string with at most max_digits fractional digits.

        Rounds half to even on the exact decimal value; trailing fractional
        zeros are dropped down to min_digits.
        """
        if isinstance(value, numbers.Integral) and min_digits == 0:
            # Exact for integers of any size
            text = f"{int(value):,}"
        else:
            if not isinstance(value, Decimal):
                value = Decimal(str(value))
            text = f"{_quantize(value, max_digits):,f}"

        integer, _, fraction = text.partition('.')
        fraction = fraction.rstrip('0').ljust(min_digits, '0')

        integer = integer.replace(',', self.group_separator)
        if fraction:
            return f"{integer}{self.decimal_separator}{fraction}"
        return integer

    def tiered(self, n: int, tiers: Sequence[Tier]) -> str:
        """Render a non-negative integer using the first tier whose threshold it meets."""
        value = _check_non_negative(n)
        for tier in tiers:
            if value >= tier.threshold:
                scaled = value if tier.divisor == 1 else _scale(value, tier.divisor)
                return self.decimal(scaled, tier.max_digits, tier.min_digits) + tier.suffix
        raise InvalidInputError(f"No tier covers {value}")

    def large(self, n: int) -> str:
        """Absolute value: plain below 100k, thousands below 1M, millions above."""
        return self.tiered(n, LARGE_TIERS)

    def delta(self, n: int) -> str:
        """Signed change: plain below 10k, thousands below 1M, millions above."""
        return '+' + self.tiered(n, DELTA_TIERS)

    def digit(self, n: int) -> str:
        """Any integer as a grouped decimal string, no suffix."""
        return self.decimal(_check_integer(n), max_digits=2)


# Formatter for the configured convention
default_formatter = NumberFormatter(config.group_separator, config.decimal_separator)


def fmt_large(n: int) -> str:
    """Format an absolute count ("500", "250k", "2M")."""
    return default_formatter.large(n)


def fmt_delta(n: int) -> str:
    """Format a non-negative change with a leading "+" ("+50", "+15.0k", "+3.42M")."""
    return default_formatter.delta(n)


def fmt_digit(n: int) -> str:
    """Format any integer with digit grouping and no magnitude suffix."""
    return default_formatter.digit(n)
