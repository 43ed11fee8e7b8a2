"""Duration discount resolution.

Only one discount ever applies. The long-stay tier wins whenever its
threshold is reached; otherwise the standard tier applies if reached.
"""

from dataclasses import dataclass

from bookingengine.core.money import percent_of
from bookingengine.schemas.listing import DiscountConfig
from bookingengine.schemas.pricing import DiscountType


@dataclass(frozen=True)
class DiscountResult:
    discount_amount: int
    discount_type: DiscountType


NO_DISCOUNT = DiscountResult(discount_amount=0, discount_type=DiscountType.NONE)


def select_discount(
    units: int,
    discount: DiscountConfig,
    long_stay_discount: DiscountConfig | None = None,
) -> tuple[DiscountConfig | None, DiscountType]:
    """Return the tier that applies to ``units`` and its type."""
    if long_stay_discount is not None and long_stay_discount.applies_to(units):
        return long_stay_discount, DiscountType.LONG_STAY
    if discount.applies_to(units):
        return discount, DiscountType.STANDARD
    return None, DiscountType.NONE


def calculate_discount(
    base_price: int,
    units: int,
    discount: DiscountConfig,
    long_stay_discount: DiscountConfig | None = None,
) -> DiscountResult:
    """Calculate the discount on ``base_price`` for a duration of ``units``.

    Args:
        base_price: Pre-discount price (units and hourly supplement)
        units: Nights or days
        discount: Standard tier
        long_stay_discount: Optional long-stay tier

    Returns:
        DiscountResult: amount (rounded half-up) and type
    """
    tier, discount_type = select_discount(units, discount, long_stay_discount)
    if tier is None:
        return NO_DISCOUNT
    return DiscountResult(
        discount_amount=percent_of(base_price, tier.percentage),
        discount_type=discount_type,
    )
