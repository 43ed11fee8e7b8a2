"""Availability conflict detection.

Ranges are half-open ``[start, end)``: a checkout on the day another booking
checks in is not a conflict. Only confirmed (or in-progress) bookings and
blocked periods take dates away; pending bookings never block other guests,
the first one confirmed wins.

This is an optimistic pre-filter. The persistence layer must enforce the
final check atomically (exclusion constraint or transactional
check-and-insert).
"""

import logging
from typing import Iterable

from bookingengine.core.exceptions import DateConflict
from bookingengine.domain.booking_state import BLOCKING_STATUSES
from bookingengine.schemas.booking import BlockedPeriod, Booking, DateRange

logger = logging.getLogger(__name__)


def ranges_overlap(a: DateRange, b: DateRange) -> bool:
    """``[s1, e1)`` and ``[s2, e2)`` overlap iff ``s1 < e2 and s2 < e1``."""
    return a.start < b.end and b.start < a.end


def blocking_ranges(
    existing_bookings: Iterable[Booking],
    exclude_booking_id: str | None = None,
) -> list[DateRange]:
    """Date ranges of bookings that block the calendar."""
    return [
        booking.date_range
        for booking in existing_bookings
        if booking.status.value in BLOCKING_STATUSES and booking.id != exclude_booking_id
    ]


def has_conflict(
    existing_bookings: Iterable[Booking],
    blocked_ranges: Iterable[BlockedPeriod | DateRange],
    proposed: DateRange,
    exclude_booking_id: str | None = None,
) -> bool:
    """Check whether ``proposed`` overlaps a blocking booking or blocked period.

    Args:
        existing_bookings: Bookings of the listing (any status)
        blocked_ranges: Host/owner blocked periods
        proposed: Requested range
        exclude_booking_id: Booking being modified, ignored in the check

    Returns:
        bool: True if the dates are not available
    """
    for taken in blocking_ranges(existing_bookings, exclude_booking_id):
        if ranges_overlap(taken, proposed):
            return True
    return any(ranges_overlap(blocked, proposed) for blocked in blocked_ranges)


def ensure_available(
    existing_bookings: Iterable[Booking],
    blocked_ranges: Iterable[BlockedPeriod | DateRange],
    proposed: DateRange,
    exclude_booking_id: str | None = None,
) -> None:
    """Raise ``DateConflict`` when ``proposed`` is not available."""
    if has_conflict(existing_bookings, blocked_ranges, proposed, exclude_booking_id):
        logger.warning(f"Date conflict for {proposed.start} → {proposed.end}")
        raise DateConflict()
