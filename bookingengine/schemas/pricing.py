"""Pricing schemas: ancillary fees, vouchers and the price breakdown."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from bookingengine.core.exceptions import ErrorKind
from bookingengine.schemas.listing import ListingPricingConfig
from bookingengine.services.commission_service import ServiceType


class DiscountType(str, Enum):
    """Which discount tier was applied."""

    NONE = "none"
    STANDARD = "standard"
    LONG_STAY = "long_stay"


class AncillaryFees(BaseModel):
    """Fees charged alongside the stay or rental price."""

    model_config = ConfigDict(frozen=True)

    cleaning_fee: int = Field(default=0, ge=0)
    free_cleaning_min_units: int | None = Field(None, ge=1)
    service_fee_override: int | None = Field(None, ge=0)
    taxes: int = Field(default=0, ge=0)

    @classmethod
    def from_listing(cls, listing: ListingPricingConfig) -> "AncillaryFees":
        return cls(
            cleaning_fee=listing.cleaning_fee,
            free_cleaning_min_units=listing.free_cleaning_min_units,
            service_fee_override=listing.service_fee_override,
            taxes=listing.taxes,
        )


class VoucherStatus(str, Enum):
    ACTIVE = "active"
    USED = "used"
    EXPIRED = "expired"


class Voucher(BaseModel):
    """Promotional voucher snapshot supplied by the voucher collaborator."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., min_length=1, max_length=50)
    discount_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    discount_amount: int | None = Field(None, ge=0)
    status: VoucherStatus = VoucherStatus.ACTIVE
    valid_until: datetime | None = None
    used_on_booking_id: str | None = None


class BookingPriceBreakdown(BaseModel):
    """Full price breakdown for a stay or rental.

    ``final_total == price_after_discount + service_fee_ttc + cleaning_fee + taxes``
    and ``host_net_amount == price_after_discount - host_commission_ttc``.
    """

    model_config = ConfigDict(frozen=True)

    service_type: ServiceType
    currency: str
    units: int
    extra_hours: int = 0
    price_per_unit: int
    hours_price: int = 0
    base_price: int

    # Discounts
    discount_amount: int
    discount_type: DiscountType
    voucher_discount: int = 0
    voucher_error: ErrorKind | None = None

    driver_fee: int = 0
    price_after_discount: int

    # Guest-side platform fee
    service_fee_ht: int
    service_fee_vat: int
    service_fee_ttc: int

    # Host-side commission
    host_commission_ht: int
    host_commission_vat: int
    host_commission_ttc: int

    cleaning_fee: int
    taxes: int
    final_total: int
    host_net_amount: int
