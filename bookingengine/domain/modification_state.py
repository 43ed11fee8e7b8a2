"""Modification request state machine.

States: pending → approved | rejected | cancelled. All three outcomes are
terminal for the request; the guest may open a new one afterwards.
"""

from enum import Enum

from bookingengine.core.exceptions import InvalidTransition


class ModificationStatus(str, Enum):
    """Modification request states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


MODIFICATION_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"approved", "rejected", "cancelled"},
    "approved": set(),
    "rejected": set(),
    "cancelled": set(),
}


def assert_modification_transition(current: str, target: str) -> None:
    """Validate modification request state transition."""
    current = getattr(current, "value", current)
    target = getattr(target, "value", target)
    allowed = MODIFICATION_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidTransition(
            f"Invalid modification request transition: {current} → {target}"
        )


def can_open_request(open_statuses: list[str]) -> tuple[bool, str | None]:
    """Check whether a new request may be opened given the booking's requests."""
    if any(getattr(s, "value", s) == "pending" for s in open_statuses):
        return False, "A modification request is already pending for this booking"
    return True, None
