"""Modification request schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from bookingengine.domain.modification_state import ModificationStatus


class ModificationRequest(BaseModel):
    """A guest's change request against a confirmed booking."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    booking_id: str

    # Snapshot of the booking when the request was made
    original_start_date: date
    original_end_date: date
    original_guests: int = Field(..., ge=1)
    original_total_price: int

    # What the guest asked for
    requested_start_date: date
    requested_end_date: date
    requested_guests: int = Field(..., ge=1)
    requested_total_price: int
    requested_units: int = Field(..., ge=1)
    requested_price_per_unit: int = Field(..., ge=0)
    requested_discount_amount: int = Field(default=0, ge=0)

    # requested total minus current total; positive means the guest owes more
    price_difference: int = 0

    status: ModificationStatus = ModificationStatus.PENDING
    guest_message: str | None = Field(None, max_length=1000)
    owner_response_message: str | None = Field(None, max_length=1000)

    created_at: datetime
    responded_at: datetime | None = None

    @property
    def requires_surplus_payment(self) -> bool:
        return self.price_difference > 0

    @property
    def surplus_amount(self) -> int:
        return max(0, self.price_difference)

    @property
    def refund_amount(self) -> int:
        return max(0, -self.price_difference)
