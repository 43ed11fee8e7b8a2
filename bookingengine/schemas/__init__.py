"""Pydantic schemas for engine inputs and outputs."""

from bookingengine.schemas.booking import (
    BlockedPeriod,
    Booking,
    CancellationRecord,
    DateRange,
)
from bookingengine.schemas.listing import (
    DiscountConfig,
    DynamicPriceRange,
    ListingPricingConfig,
)
from bookingengine.schemas.modification import ModificationRequest
from bookingengine.schemas.pricing import (
    AncillaryFees,
    BookingPriceBreakdown,
    DiscountType,
    Voucher,
    VoucherStatus,
)
from bookingengine.schemas.results import (
    CancellationResult,
    EngineResult,
    ModificationOutcome,
    ModificationResult,
    PenaltyResult,
    QuoteResult,
)

__all__ = [
    # Listing
    "DiscountConfig",
    "DynamicPriceRange",
    "ListingPricingConfig",
    # Booking
    "BlockedPeriod",
    "Booking",
    "CancellationRecord",
    "DateRange",
    # Pricing
    "AncillaryFees",
    "BookingPriceBreakdown",
    "DiscountType",
    "Voucher",
    "VoucherStatus",
    # Modification
    "ModificationRequest",
    # Results
    "CancellationResult",
    "EngineResult",
    "ModificationOutcome",
    "ModificationResult",
    "PenaltyResult",
    "QuoteResult",
]
