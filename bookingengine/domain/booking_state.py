"""Booking state machine.

States: pending → confirmed → in_progress → completed, with cancelled
reachable from every non-terminal state. Time moves confirmed bookings
forward; actors drive confirmation and cancellation.
"""

from datetime import date
from enum import Enum

from bookingengine.core.exceptions import InvalidTransition, TerminalBookingState


class BookingStatus(str, Enum):
    """Booking lifecycle states."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


BOOKING_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"in_progress", "completed", "cancelled"},
    "in_progress": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}

TERMINAL_STATUSES = frozenset({"completed", "cancelled"})

# Statuses whose dates block other guests. Pending bookings never do.
BLOCKING_STATUSES = frozenset({"confirmed", "in_progress"})


def _value(status: str | BookingStatus) -> str:
    return status.value if isinstance(status, BookingStatus) else status


def is_terminal(status: str | BookingStatus) -> bool:
    return _value(status) in TERMINAL_STATUSES


def assert_booking_transition(current: str | BookingStatus, target: str | BookingStatus) -> None:
    current, target = _value(current), _value(target)
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidTransition(f"Invalid booking transition: {current} → {target}")


def assert_can_modify(status: str | BookingStatus) -> None:
    """Completed and cancelled bookings cannot be modified."""
    if is_terminal(status):
        raise TerminalBookingState(
            f"A {_value(status)} booking can no longer be modified"
        )


def assert_can_cancel(status: str | BookingStatus) -> None:
    """Completed and cancelled bookings cannot be cancelled again."""
    if is_terminal(status):
        raise TerminalBookingState(
            f"A {_value(status)} booking can no longer be cancelled"
        )


def derive_status(
    status: str | BookingStatus,
    start_date: date,
    end_date: date,
    today: date,
) -> BookingStatus:
    """Return the status implied by the calendar.

    A confirmed booking whose range contains today is in progress; a
    confirmed or in-progress booking whose end date has passed is completed.
    Pending and terminal bookings are returned unchanged.
    """
    current = BookingStatus(_value(status))
    if current not in (BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS):
        return current
    if end_date < today:
        return BookingStatus.COMPLETED
    if start_date <= today <= end_date:
        return BookingStatus.IN_PROGRESS
    return current
