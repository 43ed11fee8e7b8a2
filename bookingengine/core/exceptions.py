"""Engine error taxonomy.

Domain helpers raise these; service entry points catch ``EngineError`` and
turn it into a typed result so callers can branch on ``ErrorKind``.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Validation failure kinds surfaced to callers."""

    INVALID_DATE_RANGE = "InvalidDateRange"
    MINIMUM_UNITS_VIOLATION = "MinimumUnitsViolation"
    MAX_OCCUPANCY_VIOLATION = "MaxOccupancyViolation"
    DATE_CONFLICT = "DateConflict"
    DUPLICATE_PENDING_REQUEST = "DuplicatePendingRequest"
    TERMINAL_BOOKING_STATE = "TerminalBookingState"
    VOUCHER_INVALID = "VoucherInvalid"
    INVALID_TRANSITION = "InvalidTransition"
    SURPLUS_NOT_CAPTURED = "SurplusNotCaptured"
    INVALID_ACTOR = "InvalidActor"


class EngineError(Exception):
    """Base engine exception."""

    kind: ErrorKind = ErrorKind.INVALID_TRANSITION
    default_detail: str = "The operation is not allowed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidDateRange(EngineError):
    """End date is not after start date, or nothing changed."""

    kind = ErrorKind.INVALID_DATE_RANGE
    default_detail = "End date must be after start date"


class MinimumUnitsViolation(EngineError):
    """Duration is below the listing's minimum stay or rental."""

    kind = ErrorKind.MINIMUM_UNITS_VIOLATION
    default_detail = "Duration is below the listing minimum"


class MaxOccupancyViolation(EngineError):
    """Guest or renter count exceeds the listing's maximum."""

    kind = ErrorKind.MAX_OCCUPANCY_VIOLATION
    default_detail = "Too many guests for this listing"


class DateConflict(EngineError):
    """Proposed range overlaps a confirmed booking or a blocked period."""

    kind = ErrorKind.DATE_CONFLICT
    default_detail = "The selected dates are not available"


class DuplicatePendingRequest(EngineError):
    """A modification request is already awaiting a response."""

    kind = ErrorKind.DUPLICATE_PENDING_REQUEST
    default_detail = "A modification request is already pending for this booking"


class TerminalBookingState(EngineError):
    """Booking is completed or cancelled."""

    kind = ErrorKind.TERMINAL_BOOKING_STATE
    default_detail = "This booking can no longer be changed"


class VoucherInvalid(EngineError):
    """Voucher missing, expired or already consumed."""

    kind = ErrorKind.VOUCHER_INVALID
    default_detail = "This voucher cannot be applied"


class InvalidTransition(EngineError):
    """State machine transition not allowed from the current state."""

    kind = ErrorKind.INVALID_TRANSITION
    default_detail = "Invalid state transition"


class SurplusNotCaptured(EngineError):
    """Approval attempted before the price surplus was charged."""

    kind = ErrorKind.SURPLUS_NOT_CAPTURED
    default_detail = "The price surplus must be captured before approval"


class InvalidActor(EngineError):
    """Cancelling party is not a known role."""

    kind = ErrorKind.INVALID_ACTOR
    default_detail = "Unknown cancelling party"
