"""Integer money helpers.

Amounts are whole currency units. Every percentage computation goes through
``round_half_up`` so quotes, invoices and modification summaries agree.
"""

from decimal import ROUND_HALF_UP, Decimal

_UNIT = Decimal("1")
_HUNDRED = Decimal("100")


def round_half_up(value: Decimal | int) -> int:
    """Round to the nearest whole unit, halves away from zero."""
    return int(Decimal(value).quantize(_UNIT, rounding=ROUND_HALF_UP))


def percent_of(amount: int, percentage: Decimal | int | float) -> int:
    """Return ``round_half_up(amount * percentage / 100)``."""
    pct = percentage if isinstance(percentage, Decimal) else Decimal(str(percentage))
    return round_half_up(Decimal(amount) * pct / _HUNDRED)


def fraction_of(amount: int, rate: Decimal | str) -> int:
    """Return ``round_half_up(amount * rate)`` for a rate such as ``0.20``."""
    return round_half_up(Decimal(amount) * Decimal(rate))
