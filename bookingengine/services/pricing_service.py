"""Pricing engine.

ORDER OF CALCULATION:
1. Unit price × nights/days (+ hourly supplement for vehicles)
2. Duration discount (long-stay beats standard, never stacked), then voucher
3. Driver fee added AFTER discount (vehicles, never discounted)
4. Service fee and host commission on the post-discount price, with VAT
5. Cleaning fee (properties) and local taxes added undiscounted, without VAT

Every screen, job and workflow that shows or charges a total goes through
``compute_price`` so quoted and charged figures cannot drift apart.
"""

import logging
from datetime import date, datetime

from bookingengine.config import settings
from bookingengine.core.exceptions import (
    EngineError,
    InvalidDateRange,
    MaxOccupancyViolation,
    MinimumUnitsViolation,
    VoucherInvalid,
)
from bookingengine.schemas.listing import DiscountConfig, ListingPricingConfig
from bookingengine.schemas.pricing import AncillaryFees, BookingPriceBreakdown, Voucher
from bookingengine.schemas.results import QuoteResult
from bookingengine.services.commission_service import ServiceType, commission_service
from bookingengine.services.discount_service import calculate_discount
from bookingengine.services.dynamic_pricing_service import average_price_for_period
from bookingengine.services.fee_service import cleaning_fee_for, local_taxes_for
from bookingengine.services.voucher_service import validate_voucher, voucher_discount

logger = logging.getLogger(__name__)


def compute_price(
    price_per_unit: int,
    units: int,
    discount: DiscountConfig,
    long_stay_discount: DiscountConfig | None,
    fees: AncillaryFees,
    service_type: str | ServiceType,
    *,
    extra_hours: int = 0,
    hourly_rate: int | None = None,
    driver_fee: int | None = None,
    voucher: Voucher | None = None,
    now: datetime | None = None,
) -> BookingPriceBreakdown:
    """Compute the full price breakdown for a stay or rental.

    ``units`` is charged as given: minimum-stay policy belongs to the caller
    (see ``PricingService.quote``), the engine never clamps it.

    Args:
        price_per_unit: Nightly or daily price
        units: Nights or days, at least one
        discount: Standard discount tier
        long_stay_discount: Optional long-stay tier
        fees: Cleaning fee, service fee override and local taxes
        service_type: ``property`` or ``vehicle``
        extra_hours: Vehicle hours beyond the last full day
        hourly_rate: Vehicle hourly price; hours are free when unset
        driver_fee: Vehicle driver fee, when a driver was requested
        voucher: Optional voucher snapshot
        now: Current time, required to validate a voucher

    Returns:
        BookingPriceBreakdown: all amounts in whole currency units

    Raises:
        InvalidDateRange: ``units`` is below one
        VoucherInvalid: a voucher was given without ``now``
    """
    if units < 1:
        raise InvalidDateRange(f"At least one billing unit is required, got {units}")

    service_type = ServiceType(service_type)
    is_vehicle = service_type == ServiceType.VEHICLE

    hours_price = 0
    if is_vehicle and hourly_rate and extra_hours > 0:
        hours_price = extra_hours * hourly_rate
    base_price = price_per_unit * units + hours_price

    tier = calculate_discount(base_price, units, discount, long_stay_discount)
    discount_amount = tier.discount_amount

    voucher_amount = 0
    voucher_error = None
    if voucher is not None:
        if now is None:
            raise VoucherInvalid(
                f"Voucher {voucher.code} cannot be checked without the current time"
            )
        check = validate_voucher(voucher, now)
        if check.valid:
            voucher_amount = voucher_discount(voucher, base_price - discount_amount)
        else:
            # Price falls back to no voucher discount; the caller sees the flag.
            voucher_error = check.error
            logger.warning(f"Voucher {voucher.code} rejected: {check.detail}")
    discount_amount += voucher_amount

    price_after_discount = base_price - discount_amount

    applied_driver_fee = driver_fee if is_vehicle and driver_fee else 0
    price_after_discount += applied_driver_fee

    cleaning_fee = 0 if is_vehicle else cleaning_fee_for(fees, units)
    taxes = local_taxes_for(fees)

    service_fee = commission_service.compute_service_fee(
        price_after_discount, service_type, fees.service_fee_override
    )
    host_commission = commission_service.compute_host_commission(
        price_after_discount, service_type
    )

    final_total = price_after_discount + service_fee.ttc + cleaning_fee + taxes

    breakdown = BookingPriceBreakdown(
        service_type=service_type,
        currency=settings.currency,
        units=units,
        extra_hours=extra_hours if hours_price else 0,
        price_per_unit=price_per_unit,
        hours_price=hours_price,
        base_price=base_price,
        discount_amount=discount_amount,
        discount_type=tier.discount_type,
        voucher_discount=voucher_amount,
        voucher_error=voucher_error,
        driver_fee=applied_driver_fee,
        price_after_discount=price_after_discount,
        service_fee_ht=service_fee.ht,
        service_fee_vat=service_fee.vat,
        service_fee_ttc=service_fee.ttc,
        host_commission_ht=host_commission.ht,
        host_commission_vat=host_commission.vat,
        host_commission_ttc=host_commission.ttc,
        cleaning_fee=cleaning_fee,
        taxes=taxes,
        final_total=final_total,
        host_net_amount=price_after_discount - host_commission.ttc,
    )
    logger.debug(
        f"Priced {units} {service_type.value} unit(s): base={base_price}, "
        f"discount={discount_amount} ({tier.discount_type.value}), total={final_total}"
    )
    return breakdown


def count_units(service_type: str | ServiceType, start_date: date, end_date: date) -> int:
    """Billable nights (property) or days (vehicle) between two dates.

    Vehicles are billed at least one day, even for a same-day rental.
    """
    if end_date < start_date:
        raise InvalidDateRange("End date must be after start date")
    days = (end_date - start_date).days
    if ServiceType(service_type) == ServiceType.VEHICLE:
        return max(1, days)
    if days < 1:
        raise InvalidDateRange("Check-out must be after check-in")
    return days


class PricingService:
    """Listing-aware pricing: unit counting, policy checks, dynamic prices."""

    def unit_price(self, listing: ListingPricingConfig, start_date: date, end_date: date) -> int:
        """Nightly price for the period, averaging any dynamic overrides."""
        if listing.is_vehicle or not listing.dynamic_prices:
            return listing.base_price_per_unit
        return average_price_for_period(
            listing.base_price_per_unit, listing.dynamic_prices, start_date, end_date
        )

    def validate_request(
        self,
        listing: ListingPricingConfig,
        units: int,
        guests: int,
    ) -> None:
        """Check duration and occupancy against the listing's policy."""
        if units < listing.min_units:
            unit_name = "days" if listing.is_vehicle else "nights"
            raise MinimumUnitsViolation(f"Minimum duration is {listing.min_units} {unit_name}")
        if listing.max_units is not None and units > listing.max_units:
            unit_name = "days" if listing.is_vehicle else "nights"
            raise InvalidDateRange(f"Maximum duration is {listing.max_units} {unit_name}")
        if guests < 1:
            raise MaxOccupancyViolation("At least one guest is required")
        if guests > listing.max_guests:
            raise MaxOccupancyViolation(f"Maximum {listing.max_guests} guests allowed")

    def price_booking(
        self,
        listing: ListingPricingConfig,
        start_date: date,
        end_date: date,
        *,
        guests: int = 1,
        extra_hours: int = 0,
        with_driver: bool = False,
        voucher: Voucher | None = None,
        now: datetime | None = None,
    ) -> BookingPriceBreakdown:
        """Validate and price a stay or rental; raises ``EngineError``."""
        units = count_units(listing.service_type, start_date, end_date)
        self.validate_request(listing, units, guests)
        return compute_price(
            self.unit_price(listing, start_date, end_date),
            units,
            listing.discount,
            listing.long_stay_discount,
            AncillaryFees.from_listing(listing),
            listing.service_type,
            extra_hours=extra_hours,
            hourly_rate=listing.hourly_rate,
            driver_fee=listing.driver_fee if with_driver else None,
            voucher=voucher,
            now=now,
        )

    def quote(
        self,
        listing: ListingPricingConfig,
        start_date: date,
        end_date: date,
        *,
        guests: int = 1,
        extra_hours: int = 0,
        with_driver: bool = False,
        voucher: Voucher | None = None,
        now: datetime | None = None,
    ) -> QuoteResult:
        """Price a proposed stay or rental.

        Returns:
            QuoteResult: the breakdown, or ``success=False`` with the error kind
        """
        try:
            breakdown = self.price_booking(
                listing,
                start_date,
                end_date,
                guests=guests,
                extra_hours=extra_hours,
                with_driver=with_driver,
                voucher=voucher,
                now=now,
            )
        except EngineError as exc:
            logger.info(f"Quote rejected for listing {listing.listing_id}: {exc.detail}")
            return QuoteResult.failure(exc)
        return QuoteResult(breakdown=breakdown)


pricing_service = PricingService()
