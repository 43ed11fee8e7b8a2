"""Dynamic (per-date) nightly pricing."""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable

from bookingengine.core.money import round_half_up
from bookingengine.schemas.listing import DynamicPriceRange


def price_for_date(
    day: date,
    base_price: int,
    dynamic_prices: Iterable[DynamicPriceRange],
) -> int:
    """Price of one night: the first override covering ``day``, else base."""
    for price_range in dynamic_prices:
        if price_range.covers(day):
            return price_range.price_per_unit
    return base_price


def average_price_for_period(
    base_price: int,
    dynamic_prices: Iterable[DynamicPriceRange],
    start: date,
    end: date,
) -> int:
    """Average nightly price over the nights in ``[start, end)``.

    Returns ``base_price`` when there are no overrides or no nights.
    """
    dynamic_prices = tuple(dynamic_prices)
    nights = (end - start).days
    if not dynamic_prices or nights <= 0:
        return base_price

    total = 0
    for offset in range(nights):
        total += price_for_date(start + timedelta(days=offset), base_price, dynamic_prices)
    return round_half_up(Decimal(total) / Decimal(nights))
