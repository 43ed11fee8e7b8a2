"""Cancellation penalty and refund service.

Penalties are a pure function of the booking, who cancels and the injected
current time. Percentages apply to the booking's base price; service fee
reversal is handled by the payment collaborator.
"""

import logging
from datetime import datetime, time
from decimal import Decimal

from bookingengine.core.exceptions import EngineError, TerminalBookingState
from bookingengine.core.money import percent_of
from bookingengine.domain.booking_state import BookingStatus, assert_can_cancel, is_terminal
from bookingengine.domain.cancellation_policy import (
    COUNTERPARTY_ACTORS,
    IN_PROGRESS_PENALTY_PERCENT,
    PROPERTY_GUEST_TIERS,
    PROPERTY_HOST_TIERS,
    VEHICLE_OWNER_TIERS,
    VEHICLE_RENTER_TIERS,
    CancelActor,
    CancellationPolicy,
    get_policy_description,
    resolve_actor,
    resolve_policy,
    select_tier,
)
from bookingengine.schemas.booking import Booking, CancellationRecord
from bookingengine.schemas.listing import ListingPricingConfig
from bookingengine.schemas.results import CancellationResult, PenaltyResult
from bookingengine.services.commission_service import ServiceType

logger = logging.getLogger(__name__)

_SECONDS_PER_HOUR = Decimal("3600")


def start_datetime(booking: Booking, now: datetime) -> datetime:
    """Moment the stay or rental starts, in the same timezone style as ``now``."""
    start = booking.start_at or datetime.combine(booking.start_date, time.min)
    if start.tzinfo is None and now.tzinfo is not None:
        start = start.replace(tzinfo=now.tzinfo)
    elif start.tzinfo is not None and now.tzinfo is None:
        start = start.replace(tzinfo=None)
    return start


def hours_until_start(booking: Booking, now: datetime) -> Decimal:
    seconds = (start_datetime(booking, now) - now).total_seconds()
    return Decimal(str(seconds)) / _SECONDS_PER_HOUR


def is_in_progress(booking: Booking, now: datetime) -> bool:
    """Today falls within the booked dates (inclusive)."""
    if booking.status == BookingStatus.IN_PROGRESS:
        return True
    today = now.date()
    return booking.start_date <= today <= booking.end_date and hours_until_start(booking, now) <= 0


def _days_elapsed(booking: Booking, now: datetime) -> int:
    return max(0, (now.date() - booking.start_date).days)


def _penalty_for_tier(base_price: int, price_per_unit: int, tier) -> int:
    penalty = percent_of(base_price, tier.penalty_percent)
    if tier.penalty_nights:
        penalty += tier.penalty_nights * price_per_unit
    return min(penalty, base_price)


def _vehicle_penalty(booking: Booking, actor: CancelActor, now: datetime) -> PenaltyResult:
    base_price = booking.base_price
    is_owner = actor in COUNTERPARTY_ACTORS

    if is_in_progress(booking, now):
        # Today is already started, so it is not refundable.
        remaining_days = max(0, booking.units - _days_elapsed(booking, now) - 1)
        remaining_amount = remaining_days * booking.price_per_unit
        penalty = percent_of(remaining_amount, IN_PROGRESS_PENALTY_PERCENT["vehicle"])
        refund = remaining_amount if is_owner else remaining_amount - penalty
        return PenaltyResult(
            penalty=penalty,
            refund_amount=refund,
            description=(
                f"Cancellation during the rental (50% penalty on {remaining_days} "
                "remaining day(s))"
            ),
        )

    hours = hours_until_start(booking, now)
    if hours <= 0:
        penalty = percent_of(base_price, Decimal("50"))
        return PenaltyResult(
            penalty=penalty,
            refund_amount=base_price - penalty,
            description="The rental has already started",
        )

    if is_owner:
        tier = select_tier(VEHICLE_OWNER_TIERS, hours)
        # The renter is always refunded in full; the penalty hits the owner's payout.
        return PenaltyResult(
            penalty=percent_of(base_price, tier.penalty_percent),
            refund_amount=base_price,
            description=tier.description,
        )

    tier = select_tier(VEHICLE_RENTER_TIERS, hours)
    penalty = percent_of(base_price, tier.penalty_percent)
    return PenaltyResult(
        penalty=penalty,
        refund_amount=base_price - penalty,
        description=tier.description,
    )


def _guest_result(
    policy: CancellationPolicy,
    penalty: int,
    refund_amount: int,
    description: str,
) -> PenaltyResult:
    return PenaltyResult(
        penalty=penalty,
        refund_amount=refund_amount,
        description=description,
        policy=policy,
        policy_description=get_policy_description(policy),
    )


def _property_penalty(
    booking: Booking,
    actor: CancelActor,
    now: datetime,
    policy: CancellationPolicy,
) -> PenaltyResult:
    base_price = booking.base_price
    is_host = actor in COUNTERPARTY_ACTORS

    if is_in_progress(booking, now):
        remaining_nights = max(0, booking.units - _days_elapsed(booking, now))
        remaining_amount = remaining_nights * booking.price_per_unit
        if is_host:
            return PenaltyResult(
                penalty=percent_of(remaining_amount, IN_PROGRESS_PENALTY_PERCENT["property_host"]),
                refund_amount=remaining_amount,
                description=(
                    "Cancellation during the stay: 40% of the unused nights "
                    "(guest refunded in full)"
                ),
            )
        if policy == CancellationPolicy.NON_REFUNDABLE:
            return _guest_result(
                policy, remaining_amount, 0, "Non-refundable booking (no refund)"
            )
        penalty = percent_of(remaining_amount, IN_PROGRESS_PENALTY_PERCENT["property_guest"])
        return _guest_result(
            policy,
            penalty,
            remaining_amount - penalty,
            (
                f"Cancellation during the stay (50% penalty on {remaining_nights} "
                "unused night(s))"
            ),
        )

    hours = hours_until_start(booking, now)
    if is_host:
        tier = select_tier(PROPERTY_HOST_TIERS, hours)
        return PenaltyResult(
            penalty=percent_of(base_price, tier.penalty_percent),
            refund_amount=base_price,
            description=tier.description,
        )

    tier = select_tier(PROPERTY_GUEST_TIERS[policy], hours)
    penalty = _penalty_for_tier(base_price, booking.price_per_unit, tier)
    return _guest_result(policy, penalty, base_price - penalty, tier.description)


def compute_penalty(
    booking: Booking,
    actor: str | CancelActor,
    now: datetime,
    listing: ListingPricingConfig | None = None,
) -> PenaltyResult:
    """Compute the cancellation penalty and refund for a booking.

    Args:
        booking: Booking snapshot
        actor: guest, host, renter, owner or system
        now: Current time
        listing: Listing config; its ``cancellation_policy`` drives guest
            cancellations of property stays

    Returns:
        PenaltyResult: penalty, refund amount and a description

    Raises:
        TerminalBookingState: booking is completed or cancelled
        InvalidActor: ``actor`` is not a known role
    """
    actor = resolve_actor(actor)
    if is_terminal(booking.status):
        raise TerminalBookingState(
            f"A {booking.status.value} booking can no longer be cancelled"
        )

    if booking.status == BookingStatus.PENDING:
        # Payment is not captured until the host or owner confirms.
        return PenaltyResult(
            penalty=0,
            refund_amount=0,
            description="No penalty (request still pending)",
        )

    if actor == CancelActor.SYSTEM:
        return PenaltyResult(
            penalty=0,
            refund_amount=booking.base_price,
            description="Cancelled by the platform (full refund)",
        )

    if booking.service_type == ServiceType.VEHICLE:
        return _vehicle_penalty(booking, actor, now)

    policy = resolve_policy(listing.cancellation_policy if listing else None)
    return _property_penalty(booking, actor, now, policy)


class CancellationService:
    """Service for cancellation previews and cancellations."""

    def preview(
        self,
        booking: Booking,
        actor: str | CancelActor,
        now: datetime,
        listing: ListingPricingConfig | None = None,
    ) -> CancellationResult:
        """Penalty the actor would incur by cancelling now."""
        try:
            penalty = compute_penalty(booking, actor, now, listing)
        except EngineError as exc:
            return CancellationResult.failure(exc)
        return CancellationResult(penalty=penalty, booking=booking)

    def cancel(
        self,
        booking: Booking,
        actor: str | CancelActor,
        now: datetime,
        reason: str | None = None,
        listing: ListingPricingConfig | None = None,
    ) -> CancellationResult:
        """Cancel a booking.

        Returns a cancelled copy of the booking carrying the penalty; the
        input booking is left untouched.
        """
        try:
            actor = resolve_actor(actor)
            assert_can_cancel(booking.status)
            penalty = compute_penalty(booking, actor, now, listing)
        except EngineError as exc:
            logger.warning(f"Cancellation of booking {booking.id} rejected: {exc.detail}")
            return CancellationResult.failure(exc)

        cancelled = booking.model_copy(
            update={
                "status": BookingStatus.CANCELLED,
                "cancellation": CancellationRecord(
                    penalty=penalty.penalty,
                    refund_amount=penalty.refund_amount,
                    reason=reason,
                    cancelled_by=actor,
                    cancelled_at=now,
                ),
                "updated_at": now,
            }
        )
        logger.info(
            f"Booking {booking.id} cancelled by {actor.value}: "
            f"penalty={penalty.penalty}, refund={penalty.refund_amount}"
        )
        return CancellationResult(penalty=penalty, booking=cancelled)


cancellation_service = CancellationService()
