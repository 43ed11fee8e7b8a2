"""Typed results returned across the engine boundary."""

from enum import Enum
from typing import Self

from pydantic import BaseModel, ConfigDict

from bookingengine.core.exceptions import EngineError, ErrorKind
from bookingengine.domain.cancellation_policy import CancellationPolicy
from bookingengine.schemas.booking import Booking
from bookingengine.schemas.modification import ModificationRequest
from bookingengine.schemas.pricing import BookingPriceBreakdown


class EngineResult(BaseModel):
    """Base result: ``success`` plus an error kind when it failed."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    error: ErrorKind | None = None
    detail: str | None = None

    @classmethod
    def failure(cls, exc: EngineError) -> Self:
        return cls(success=False, error=exc.kind, detail=exc.detail)


class QuoteResult(EngineResult):
    """Price quote for a proposed stay or rental."""

    breakdown: BookingPriceBreakdown | None = None


class PenaltyResult(BaseModel):
    """Cancellation penalty and the amount returned to the customer."""

    model_config = ConfigDict(frozen=True)

    penalty: int
    refund_amount: int
    description: str
    # Set when the listing policy drove the result (guest cancels a stay)
    policy: CancellationPolicy | None = None
    policy_description: str | None = None


class CancellationResult(EngineResult):
    """Outcome of cancelling a booking."""

    penalty: PenaltyResult | None = None
    booking: Booking | None = None


class ModificationOutcome(str, Enum):
    """What a change submission produced."""

    APPLIED = "applied"  # pending booking updated in place
    REQUESTED = "requested"  # confirmed booking, awaiting counterparty


class ModificationResult(EngineResult):
    """Outcome of a modification workflow step."""

    outcome: ModificationOutcome | None = None
    booking: Booking | None = None
    request: ModificationRequest | None = None
    current_breakdown: BookingPriceBreakdown | None = None
    requested_breakdown: BookingPriceBreakdown | None = None
    price_difference: int = 0
