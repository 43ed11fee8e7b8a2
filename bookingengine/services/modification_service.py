"""Booking modification workflow.

A change against a pending booking is applied to the booking directly: no
counterparty has committed and no money is fixed yet. A change against a
confirmed booking opens a modification request the host or owner must
approve; a price increase must be charged before the approval is final.

Both price snapshots go through ``compute_price`` so the difference shown to
the guest is exactly what will be charged or refunded.

The one-pending-request rule is checked here but must also be enforced by a
unique constraint on ``(booking_id) WHERE status = 'pending'``.
"""

import logging
import uuid
from datetime import date, datetime
from typing import Iterable

from bookingengine.core.exceptions import (
    DuplicatePendingRequest,
    EngineError,
    InvalidDateRange,
    InvalidTransition,
    SurplusNotCaptured,
)
from bookingengine.domain.booking_state import BookingStatus, assert_can_modify
from bookingengine.domain.modification_state import (
    ModificationStatus,
    assert_modification_transition,
    can_open_request,
)
from bookingengine.schemas.booking import BlockedPeriod, Booking, DateRange
from bookingengine.schemas.listing import ListingPricingConfig
from bookingengine.schemas.modification import ModificationRequest
from bookingengine.schemas.pricing import AncillaryFees, BookingPriceBreakdown
from bookingengine.schemas.results import ModificationOutcome, ModificationResult
from bookingengine.services.availability_service import ensure_available
from bookingengine.services.pricing_service import (
    PricingService,
    compute_price,
    count_units,
    pricing_service,
)

logger = logging.getLogger(__name__)


class ModificationService:
    """Service for the modification request lifecycle."""

    def __init__(self, pricing: PricingService | None = None) -> None:
        self.pricing = pricing or pricing_service

    def _price(
        self,
        listing: ListingPricingConfig,
        booking: Booking,
        start_date: date,
        end_date: date,
    ) -> BookingPriceBreakdown:
        units = count_units(listing.service_type, start_date, end_date)
        return compute_price(
            self.pricing.unit_price(listing, start_date, end_date),
            units,
            listing.discount,
            listing.long_stay_discount,
            AncillaryFees.from_listing(listing),
            listing.service_type,
            extra_hours=booking.extra_hours,
            hourly_rate=listing.hourly_rate,
            driver_fee=listing.driver_fee if booking.with_driver else None,
        )

    def submit_change(
        self,
        booking: Booking,
        listing: ListingPricingConfig,
        requested_start_date: date,
        requested_end_date: date,
        requested_guests: int | None = None,
        *,
        now: datetime,
        existing_bookings: Iterable[Booking] = (),
        blocked_ranges: Iterable[BlockedPeriod | DateRange] = (),
        booking_requests: Iterable[ModificationRequest] = (),
        guest_message: str | None = None,
        request_id: str | None = None,
    ) -> ModificationResult:
        """Submit a guest's change of dates and/or guest count.

        Args:
            booking: Booking being changed
            listing: Pricing configuration of the booked listing
            requested_start_date: New check-in / pickup date
            requested_end_date: New check-out / return date
            requested_guests: New guest count (unchanged when omitted)
            now: Current time
            existing_bookings: Other bookings of the listing
            blocked_ranges: Host/owner blocked periods
            booking_requests: Modification requests already filed for the booking
            guest_message: Optional message to the host or owner
            request_id: Identifier for the new request (generated if omitted)

        Returns:
            ModificationResult: ``applied`` for a pending booking, ``requested``
            for a confirmed one, or the validation error
        """
        guests = booking.guests if requested_guests is None else requested_guests
        try:
            assert_can_modify(booking.status)

            if booking.status != BookingStatus.PENDING:
                allowed, reason = can_open_request(
                    [r.status for r in booking_requests if r.booking_id == booking.id]
                )
                if not allowed:
                    raise DuplicatePendingRequest(reason)

            if requested_end_date < requested_start_date:
                raise InvalidDateRange("End date must be after start date")
            if (
                requested_start_date == booking.start_date
                and requested_end_date == booking.end_date
                and guests == booking.guests
            ):
                raise InvalidDateRange("The requested dates and guests are unchanged")

            requested_units = count_units(
                listing.service_type, requested_start_date, requested_end_date
            )
            self.pricing.validate_request(listing, requested_units, guests)

            ensure_available(
                existing_bookings,
                blocked_ranges,
                DateRange.occupied(requested_start_date, requested_end_date),
                exclude_booking_id=booking.id,
            )

            current = self._price(listing, booking, booking.start_date, booking.end_date)
            requested = self._price(listing, booking, requested_start_date, requested_end_date)
        except EngineError as exc:
            logger.warning(f"Modification of booking {booking.id} rejected: {exc.detail}")
            return ModificationResult.failure(exc)

        price_difference = requested.final_total - current.final_total
        # Stored total may carry a voucher or an older listing price
        requested_total = booking.total_price + price_difference

        if booking.status == BookingStatus.PENDING:
            updated = booking.model_copy(
                update={
                    "start_date": requested_start_date,
                    "end_date": requested_end_date,
                    "guests": guests,
                    "units": requested.units,
                    "price_per_unit": requested.price_per_unit,
                    "total_price": requested_total,
                    "discount_amount": requested.discount_amount,
                    "updated_at": now,
                }
            )
            logger.info(f"Pending booking {booking.id} modified in place")
            return ModificationResult(
                outcome=ModificationOutcome.APPLIED,
                booking=updated,
                current_breakdown=current,
                requested_breakdown=requested,
                price_difference=price_difference,
            )

        request = ModificationRequest(
            id=request_id or str(uuid.uuid4()),
            booking_id=booking.id,
            original_start_date=booking.start_date,
            original_end_date=booking.end_date,
            original_guests=booking.guests,
            original_total_price=booking.total_price,
            requested_start_date=requested_start_date,
            requested_end_date=requested_end_date,
            requested_guests=guests,
            requested_total_price=requested_total,
            requested_units=requested.units,
            requested_price_per_unit=requested.price_per_unit,
            requested_discount_amount=requested.discount_amount,
            price_difference=price_difference,
            status=ModificationStatus.PENDING,
            guest_message=guest_message,
            created_at=now,
        )
        logger.info(
            f"Modification request {request.id} opened for booking {booking.id} "
            f"(difference={price_difference})"
        )
        return ModificationResult(
            outcome=ModificationOutcome.REQUESTED,
            booking=booking,
            request=request,
            current_breakdown=current,
            requested_breakdown=requested,
            price_difference=price_difference,
        )

    def approve(
        self,
        request: ModificationRequest,
        booking: Booking,
        *,
        now: datetime,
        surplus_captured: bool = False,
        owner_message: str | None = None,
    ) -> ModificationResult:
        """Approve a pending request and apply it to the booking.

        When the new total is higher, ``surplus_captured`` must confirm the
        payment collaborator already charged the difference.
        """
        try:
            if request.booking_id != booking.id:
                raise InvalidTransition(
                    f"Request {request.id} does not belong to booking {booking.id}"
                )
            assert_modification_transition(request.status, ModificationStatus.APPROVED)
            assert_can_modify(booking.status)
            if request.requires_surplus_payment and not surplus_captured:
                raise SurplusNotCaptured(
                    f"A surplus of {request.surplus_amount} must be paid before approval"
                )
        except EngineError as exc:
            logger.warning(f"Approval of request {request.id} rejected: {exc.detail}")
            return ModificationResult.failure(exc)

        approved = request.model_copy(
            update={
                "status": ModificationStatus.APPROVED,
                "owner_response_message": owner_message,
                "responded_at": now,
            }
        )
        updated = booking.model_copy(
            update={
                "start_date": request.requested_start_date,
                "end_date": request.requested_end_date,
                "guests": request.requested_guests,
                "units": request.requested_units,
                "price_per_unit": request.requested_price_per_unit,
                "total_price": request.requested_total_price,
                "discount_amount": request.requested_discount_amount,
                "updated_at": now,
            }
        )
        logger.info(f"Modification request {request.id} approved")
        return ModificationResult(
            booking=updated,
            request=approved,
            price_difference=request.price_difference,
        )

    def reject(
        self,
        request: ModificationRequest,
        *,
        now: datetime,
        owner_message: str | None = None,
    ) -> ModificationResult:
        """Reject a pending request; the booking is left unchanged."""
        try:
            assert_modification_transition(request.status, ModificationStatus.REJECTED)
        except EngineError as exc:
            return ModificationResult.failure(exc)

        rejected = request.model_copy(
            update={
                "status": ModificationStatus.REJECTED,
                "owner_response_message": owner_message,
                "responded_at": now,
            }
        )
        logger.info(f"Modification request {request.id} rejected")
        return ModificationResult(request=rejected, price_difference=request.price_difference)

    def withdraw(self, request: ModificationRequest, *, now: datetime) -> ModificationResult:
        """Requester withdraws a pending request before any response."""
        try:
            assert_modification_transition(request.status, ModificationStatus.CANCELLED)
        except EngineError as exc:
            return ModificationResult.failure(exc)

        cancelled = request.model_copy(
            update={"status": ModificationStatus.CANCELLED, "responded_at": now}
        )
        logger.info(f"Modification request {request.id} withdrawn")
        return ModificationResult(request=cancelled, price_difference=request.price_difference)


modification_service = ModificationService()
