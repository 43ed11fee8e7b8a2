"""Stale pending bookings and modification requests.

Used by the scheduled expiry job: it loads candidates, calls these helpers
and persists the cancelled copies they return.
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable

from bookingengine.config import settings
from bookingengine.domain.booking_state import BookingStatus
from bookingengine.domain.cancellation_policy import CancelActor
from bookingengine.domain.modification_state import ModificationStatus
from bookingengine.schemas.booking import Booking
from bookingengine.schemas.modification import ModificationRequest
from bookingengine.schemas.results import CancellationResult
from bookingengine.services.cancellation_service import cancellation_service, start_datetime

logger = logging.getLogger(__name__)

PENDING_BOOKING_EXPIRED_REASON = "Request expired without a response from the host"


def is_pending_booking_expired(booking: Booking, now: datetime, ttl_hours: int | None = None) -> bool:
    """A pending booking expires after the TTL or once its start has passed."""
    if booking.status != BookingStatus.PENDING:
        return False
    if start_datetime(booking, now) <= now:
        return True
    if booking.created_at is None:
        return False
    ttl = timedelta(hours=ttl_hours or settings.pending_booking_ttl_hours)
    return booking.created_at + ttl <= now


def find_expired_pending_bookings(
    bookings: Iterable[Booking],
    now: datetime,
    ttl_hours: int | None = None,
) -> list[Booking]:
    return [b for b in bookings if is_pending_booking_expired(b, now, ttl_hours)]


def expire_pending_bookings(
    bookings: Iterable[Booking],
    now: datetime,
    ttl_hours: int | None = None,
) -> list[CancellationResult]:
    """Cancel every expired pending booking on behalf of the platform."""
    results = []
    for booking in find_expired_pending_bookings(bookings, now, ttl_hours):
        results.append(
            cancellation_service.cancel(
                booking,
                CancelActor.SYSTEM,
                now,
                reason=PENDING_BOOKING_EXPIRED_REASON,
            )
        )
    if results:
        logger.info(f"Expired {len(results)} pending booking(s)")
    return results


def expire_pending_requests(
    requests: Iterable[ModificationRequest],
    now: datetime,
    ttl_hours: int | None = None,
) -> list[ModificationRequest]:
    """Return cancelled copies of pending requests older than the TTL."""
    ttl = timedelta(hours=ttl_hours or settings.modification_request_ttl_hours)
    expired = [
        request.model_copy(
            update={"status": ModificationStatus.CANCELLED, "responded_at": now}
        )
        for request in requests
        if request.status == ModificationStatus.PENDING and request.created_at + ttl <= now
    ]
    if expired:
        logger.info(f"Expired {len(expired)} pending modification request(s)")
    return expired
