from __future__ import annotations

from datetime import date, timedelta

import pytest

from bookingengine.core.exceptions import ErrorKind, InvalidActor, TerminalBookingState
from bookingengine.domain.booking_state import BookingStatus
from bookingengine.domain.cancellation_policy import (
    CancelActor,
    CancellationPolicy,
    get_policy_description,
    resolve_policy,
)
from bookingengine.services.cancellation_service import cancellation_service, compute_penalty
from bookingengine.services.commission_service import ServiceType


@pytest.fixture
def vehicle_booking(make_booking, now):
    """Three-day rental at 20 000 per day starting ``hours`` from now."""

    def _make(hours: float, **overrides):
        start_at = now + timedelta(hours=hours)
        data = {
            "service_type": ServiceType.VEHICLE,
            "start_at": start_at,
            "start_date": start_at.date(),
            "end_date": start_at.date() + timedelta(days=3),
            "price_per_unit": 20_000,
            "units": 3,
            "total_price": 66_000,
        }
        data.update(overrides)
        return make_booking(**data)

    return _make


@pytest.fixture
def property_booking(make_booking, now):
    """Three-night stay at 50 000 per night checking in ``hours`` from now."""

    def _make(hours: float, **overrides):
        start_at = now + timedelta(hours=hours)
        data = {
            "start_at": start_at,
            "start_date": start_at.date(),
            "end_date": start_at.date() + timedelta(days=3),
        }
        data.update(overrides)
        return make_booking(**data)

    return _make


@pytest.mark.parametrize(
    "hours, expected_penalty",
    [
        (7 * 24, 0),
        (6 * 24 + 23, 9_000),
        (72, 9_000),
        (71, 18_000),
        (24, 18_000),
        (23, 30_000),
        (1, 30_000),
    ],
)
def test_vehicle_renter_tiers(vehicle_booking, now, hours, expected_penalty):
    result = compute_penalty(vehicle_booking(hours), CancelActor.RENTER, now)

    assert result.penalty == expected_penalty
    assert result.refund_amount == 60_000 - expected_penalty


def test_renter_cancelling_thirty_hours_before_pays_thirty_percent(vehicle_booking, now):
    result = compute_penalty(vehicle_booking(30), "renter", now)

    assert result.penalty == 18_000
    assert result.refund_amount == 42_000
    assert "30%" in result.description


@pytest.mark.parametrize(
    "hours, expected_penalty",
    [
        (29 * 24, 0),
        (28 * 24, 12_000),
        (8 * 24, 12_000),
        (7 * 24, 24_000),
        (49, 24_000),
        (48, 30_000),
        (2, 30_000),
    ],
)
def test_vehicle_owner_tiers_always_refund_renter(vehicle_booking, now, hours, expected_penalty):
    result = compute_penalty(vehicle_booking(hours), CancelActor.OWNER, now)

    assert result.penalty == expected_penalty
    assert result.refund_amount == 60_000


def test_vehicle_start_passed_outside_rental_period(make_booking, now):
    booking = make_booking(
        service_type=ServiceType.VEHICLE,
        start_date=date(2025, 2, 20),
        end_date=date(2025, 2, 23),
        price_per_unit=20_000,
    )

    result = compute_penalty(booking, CancelActor.RENTER, now)

    assert result.penalty == 30_000
    assert result.refund_amount == 30_000


@pytest.mark.parametrize(
    "actor, expected_refund",
    [
        (CancelActor.RENTER, 20_000),
        (CancelActor.OWNER, 40_000),
    ],
)
def test_vehicle_cancelled_during_rental(make_booking, now, actor, expected_refund):
    # Day 3 of 5: two days elapsed, today consumed, two days left
    booking = make_booking(
        service_type=ServiceType.VEHICLE,
        status=BookingStatus.IN_PROGRESS,
        start_date=date(2025, 2, 27),
        end_date=date(2025, 3, 4),
        price_per_unit=20_000,
        units=5,
    )

    result = compute_penalty(booking, actor, now)

    assert result.penalty == 20_000
    assert result.refund_amount == expected_refund


@pytest.mark.parametrize(
    "policy, hours, expected_penalty",
    [
        (CancellationPolicy.FLEXIBLE, 48, 0),
        (CancellationPolicy.FLEXIBLE, 47, 50_000),
        (CancellationPolicy.MODERATE, 5 * 24, 0),
        (CancellationPolicy.MODERATE, 5 * 24 - 1, 75_000),
        (CancellationPolicy.MODERATE, 24, 75_000),
        (CancellationPolicy.MODERATE, 23, 150_000),
        (CancellationPolicy.STRICT, 7 * 24, 75_000),
        (CancellationPolicy.STRICT, 7 * 24 - 1, 150_000),
        (CancellationPolicy.NON_REFUNDABLE, 30 * 24, 150_000),
    ],
)
def test_property_guest_tiers_follow_listing_policy(
    property_booking, make_listing, now, policy, hours, expected_penalty
):
    listing = make_listing(cancellation_policy=policy)

    result = compute_penalty(property_booking(hours), CancelActor.GUEST, now, listing)

    assert result.penalty == expected_penalty
    assert result.refund_amount == 150_000 - expected_penalty


def test_flexible_one_night_penalty_is_capped_at_base_price(property_booking, make_listing, now):
    listing = make_listing(cancellation_policy=CancellationPolicy.FLEXIBLE)
    booking = property_booking(
        10, end_date=(now + timedelta(hours=10)).date() + timedelta(days=1), units=1
    )

    result = compute_penalty(booking, CancelActor.GUEST, now, listing)

    assert result.penalty == 50_000
    assert result.refund_amount == 0


def test_missing_listing_uses_moderate_policy(property_booking, now):
    result = compute_penalty(property_booking(100), CancelActor.GUEST, now)

    assert result.penalty == 75_000


@pytest.mark.parametrize("policy", ["weird", "", None])
def test_unknown_policy_falls_back_to_moderate(policy):
    assert resolve_policy(policy) == CancellationPolicy.MODERATE


@pytest.mark.parametrize(
    "hours, expected_penalty",
    [
        (28 * 24 + 1, 0),
        (28 * 24, 30_000),
        (49, 30_000),
        (48, 60_000),
        (3, 60_000),
    ],
)
def test_property_host_tiers_refund_guest_in_full(
    property_booking, make_listing, now, hours, expected_penalty
):
    # Host tiers do not depend on the listing policy
    listing = make_listing(cancellation_policy=CancellationPolicy.NON_REFUNDABLE)

    result = compute_penalty(property_booking(hours), CancelActor.HOST, now, listing)

    assert result.penalty == expected_penalty
    assert result.refund_amount == 150_000


@pytest.mark.parametrize(
    "actor, policy, expected_penalty, expected_refund",
    [
        (CancelActor.GUEST, CancellationPolicy.MODERATE, 75_000, 75_000),
        (CancelActor.GUEST, CancellationPolicy.NON_REFUNDABLE, 150_000, 0),
        (CancelActor.HOST, CancellationPolicy.MODERATE, 60_000, 150_000),
    ],
)
def test_property_cancelled_during_stay(
    make_booking, make_listing, now, actor, policy, expected_penalty, expected_refund
):
    # Night 3 of 5: two nights consumed, three left
    booking = make_booking(
        status=BookingStatus.IN_PROGRESS,
        start_date=date(2025, 2, 27),
        end_date=date(2025, 3, 4),
        units=5,
    )

    result = compute_penalty(booking, actor, now, make_listing(cancellation_policy=policy))

    assert result.penalty == expected_penalty
    assert result.refund_amount == expected_refund


@pytest.mark.parametrize("actor", list(CancelActor))
def test_pending_booking_cancels_without_penalty(property_booking, now, actor):
    booking = property_booking(2, status=BookingStatus.PENDING)

    result = compute_penalty(booking, actor, now)

    assert result.penalty == 0
    assert result.refund_amount == 0


def test_system_cancellation_refunds_in_full(vehicle_booking, now):
    result = compute_penalty(vehicle_booking(5), CancelActor.SYSTEM, now)

    assert result.penalty == 0
    assert result.refund_amount == 60_000


@pytest.mark.parametrize("status", [BookingStatus.COMPLETED, BookingStatus.CANCELLED])
def test_terminal_booking_cannot_be_cancelled(make_booking, now, status):
    booking = make_booking(status=status)

    with pytest.raises(TerminalBookingState):
        compute_penalty(booking, CancelActor.GUEST, now)

    result = cancellation_service.cancel(booking, CancelActor.GUEST, now)
    assert result.success is False
    assert result.error == ErrorKind.TERMINAL_BOOKING_STATE
    assert result.booking is None


def test_cancel_returns_cancelled_copy(vehicle_booking, now):
    booking = vehicle_booking(30)

    result = cancellation_service.cancel(booking, "renter", now, reason="Change of plans")

    assert result.success is True
    assert result.penalty.penalty == 18_000
    assert result.booking.status == BookingStatus.CANCELLED
    assert result.booking.cancellation.cancelled_by == CancelActor.RENTER
    assert result.booking.cancellation.penalty == 18_000
    assert result.booking.cancellation.refund_amount == 42_000
    assert result.booking.cancellation.reason == "Change of plans"
    assert result.booking.cancellation.cancelled_at == now
    assert result.booking.updated_at == now
    # Input untouched
    assert booking.status == BookingStatus.CONFIRMED
    assert booking.cancellation is None


def test_preview_leaves_booking_unchanged(vehicle_booking, now):
    booking = vehicle_booking(30)

    result = cancellation_service.preview(booking, CancelActor.RENTER, now)

    assert result.success is True
    assert result.penalty.refund_amount == 42_000
    assert result.booking == booking


def test_guest_penalty_carries_listing_policy(property_booking, make_listing, now):
    listing = make_listing(cancellation_policy=CancellationPolicy.STRICT)

    guest = cancellation_service.preview(property_booking(200), CancelActor.GUEST, now, listing)
    host = cancellation_service.preview(property_booking(200), CancelActor.HOST, now, listing)

    assert guest.penalty.policy == CancellationPolicy.STRICT
    assert guest.penalty.policy_description == get_policy_description("strict")
    assert "50% refund up to 7 days" in guest.penalty.policy_description
    assert host.penalty.policy is None
    assert host.penalty.policy_description is None


def test_listing_default_policy_matches_missing_listing(property_booking, make_listing, now):
    booking = property_booking(100)

    with_listing = compute_penalty(booking, CancelActor.GUEST, now, make_listing())
    without_listing = compute_penalty(booking, CancelActor.GUEST, now)

    assert make_listing().cancellation_policy == CancellationPolicy.MODERATE
    assert with_listing == without_listing


@pytest.mark.parametrize("actor", ["admin", "", "HOST"])
def test_unknown_actor_is_a_typed_failure(vehicle_booking, now, actor):
    booking = vehicle_booking(30)

    with pytest.raises(InvalidActor):
        compute_penalty(booking, actor, now)

    for result in (
        cancellation_service.cancel(booking, actor, now),
        cancellation_service.preview(booking, actor, now),
    ):
        assert result.success is False
        assert result.error == ErrorKind.INVALID_ACTOR
        assert result.booking is None


def test_policy_descriptions():
    assert "48 hours" in get_policy_description("flexible")
    assert get_policy_description(CancellationPolicy.NON_REFUNDABLE) == "This booking is non-refundable."
    assert get_policy_description("unknown") == "Unknown cancellation policy"
