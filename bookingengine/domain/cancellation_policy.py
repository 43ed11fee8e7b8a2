"""Cancellation penalty tables.

Property stays (guest cancels, keyed by the listing's policy):
- flexible: free up to 48h before check-in, one night charged after
- moderate: free up to 5 days before, 50% up to 24h, 100% after
- strict: 50% up to 7 days before, 100% after
- non_refundable: 100%

Property stays (host cancels): free more than 28 days out, 20% down to 48h,
40% inside 48h. The guest is always refunded in full.

Vehicle rentals (owner cancels): free more than 28 days out, 20% more than
7 days out, 40% more than 48h out, 50% otherwise. Renter refunded in full.

Vehicle rentals (renter cancels): free from 7 days out, 15% from 72h,
30% from 24h, 50% inside 24h.

All percentages are penalties on the booking's base price.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from bookingengine.core.exceptions import InvalidActor


class CancellationPolicy(str, Enum):
    """Cancellation policy types for property listings."""

    FLEXIBLE = "flexible"
    MODERATE = "moderate"
    STRICT = "strict"
    NON_REFUNDABLE = "non_refundable"


class CancelActor(str, Enum):
    """Who is cancelling."""

    GUEST = "guest"
    HOST = "host"
    RENTER = "renter"
    OWNER = "owner"
    SYSTEM = "system"


COUNTERPARTY_ACTORS = frozenset({CancelActor.HOST, CancelActor.OWNER})

DAY_HOURS = 24


@dataclass(frozen=True)
class PenaltyTier:
    """One row of a penalty table.

    ``min_hours`` of ``None`` matches anything. ``strict`` selects ``>``
    instead of ``>=`` against the threshold.
    """

    min_hours: int | None
    penalty_percent: Decimal
    description: str
    penalty_nights: int = 0
    strict: bool = False

    def matches(self, hours_until_start: Decimal) -> bool:
        if self.min_hours is None:
            return True
        if self.strict:
            return hours_until_start > self.min_hours
        return hours_until_start >= self.min_hours


# Evaluated in order - first match wins
PROPERTY_GUEST_TIERS: dict[CancellationPolicy, list[PenaltyTier]] = {
    CancellationPolicy.FLEXIBLE: [
        PenaltyTier(48, Decimal("0"), "Free cancellation (48 hours or more before check-in)"),
        PenaltyTier(
            None,
            Decimal("0"),
            "Cancellation less than 48 hours before check-in (one night charged)",
            penalty_nights=1,
        ),
    ],
    CancellationPolicy.MODERATE: [
        PenaltyTier(5 * DAY_HOURS, Decimal("0"), "Free cancellation (5 days or more before check-in)"),
        PenaltyTier(DAY_HOURS, Decimal("50"), "Cancellation 1 to 5 days before check-in (50% penalty)"),
        PenaltyTier(None, Decimal("100"), "Cancellation less than 24 hours before check-in (no refund)"),
    ],
    CancellationPolicy.STRICT: [
        PenaltyTier(7 * DAY_HOURS, Decimal("50"), "Cancellation 7 days or more before check-in (50% penalty)"),
        PenaltyTier(None, Decimal("100"), "Cancellation less than 7 days before check-in (no refund)"),
    ],
    CancellationPolicy.NON_REFUNDABLE: [
        PenaltyTier(None, Decimal("100"), "Non-refundable booking (no refund)"),
    ],
}

PROPERTY_HOST_TIERS: list[PenaltyTier] = [
    PenaltyTier(28 * DAY_HOURS, Decimal("0"), "Free cancellation (more than 28 days before check-in)", strict=True),
    PenaltyTier(48, Decimal("20"), "Cancellation between 28 days and 48 hours before check-in (20% penalty)", strict=True),
    PenaltyTier(None, Decimal("40"), "Cancellation 48 hours or less before check-in (40% penalty)"),
]

VEHICLE_OWNER_TIERS: list[PenaltyTier] = [
    PenaltyTier(28 * DAY_HOURS, Decimal("0"), "Free cancellation (more than 28 days before)", strict=True),
    PenaltyTier(7 * DAY_HOURS, Decimal("20"), "Cancellation between 7 and 28 days before (20% penalty)", strict=True),
    PenaltyTier(48, Decimal("40"), "Cancellation between 48 hours and 7 days before (40% penalty)", strict=True),
    PenaltyTier(None, Decimal("50"), "Cancellation 48 hours or less before pickup (50% penalty)"),
]

VEHICLE_RENTER_TIERS: list[PenaltyTier] = [
    PenaltyTier(7 * DAY_HOURS, Decimal("0"), "Free cancellation (7 days or more before)"),
    PenaltyTier(3 * DAY_HOURS, Decimal("15"), "Cancellation between 3 and 7 days before (15% penalty)"),
    PenaltyTier(DAY_HOURS, Decimal("30"), "Cancellation between 24 hours and 3 days before (30% penalty)"),
    PenaltyTier(None, Decimal("50"), "Cancellation less than 24 hours before pickup (50% penalty)"),
]

# Share of the remaining (unconsumed) units charged when a stay or rental
# is cancelled while in progress.
IN_PROGRESS_PENALTY_PERCENT = {
    "property_host": Decimal("40"),
    "property_guest": Decimal("50"),
    "vehicle": Decimal("50"),
}


def resolve_policy(policy: str | CancellationPolicy | None) -> CancellationPolicy:
    """Map a listing's declared policy to a known one.

    Unknown or missing policies default to moderate.
    """
    if isinstance(policy, CancellationPolicy):
        return policy
    try:
        return CancellationPolicy(policy)
    except ValueError:
        return CancellationPolicy.MODERATE


def resolve_actor(actor: str | CancelActor) -> CancelActor:
    """Map a role string to ``CancelActor``; raises ``InvalidActor``."""
    try:
        return CancelActor(actor)
    except ValueError:
        raise InvalidActor(f"Unknown cancelling party: {actor!r}") from None


def select_tier(tiers: list[PenaltyTier], hours_until_start: Decimal) -> PenaltyTier:
    """Return the first tier matching the time left before the start."""
    for tier in tiers:
        if tier.matches(hours_until_start):
            return tier
    return tiers[-1]


def get_policy_description(policy: str | CancellationPolicy) -> str:
    """Get human-readable policy description."""
    descriptions = {
        CancellationPolicy.FLEXIBLE: (
            "Full refund up to 48 hours before check-in. "
            "One night is charged if cancelled less than 48 hours before."
        ),
        CancellationPolicy.MODERATE: (
            "Full refund up to 5 days before check-in. "
            "50% refund if cancelled 1-5 days before. "
            "No refund if cancelled less than 24 hours before."
        ),
        CancellationPolicy.STRICT: (
            "50% refund up to 7 days before check-in. "
            "No refund if cancelled less than 7 days before."
        ),
        CancellationPolicy.NON_REFUNDABLE: "This booking is non-refundable.",
    }

    if isinstance(policy, str):
        try:
            policy = CancellationPolicy(policy)
        except ValueError:
            return "Unknown cancellation policy"

    return descriptions.get(policy, "Unknown cancellation policy")
