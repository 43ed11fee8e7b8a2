"""Booking-related schemas."""

from datetime import date, datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookingengine.domain.booking_state import BookingStatus
from bookingengine.domain.cancellation_policy import CancelActor
from bookingengine.services.commission_service import ServiceType


class DateRange(BaseModel):
    """Half-open date range ``[start, end)``.

    A checkout day equal to another range's check-in day does not overlap it.
    """

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @field_validator("end")
    @classmethod
    def validate_end(cls, v: date, info) -> date:
        start = info.data.get("start")
        if start and v <= start:
            raise ValueError("end must be after start")
        return v

    @property
    def days(self) -> int:
        return (self.end - self.start).days

    @classmethod
    def occupied(cls, start: date, end: date) -> "DateRange":
        """Calendar days taken by a booking from ``start`` to ``end``.

        Same-day vehicle rentals still occupy their start day.
        """
        if end <= start:
            end = start + timedelta(days=1)
        return cls(start=start, end=end)


class BlockedPeriod(DateRange):
    """Dates blocked by the host or owner."""

    reason: str | None = Field(None, max_length=255)


class CancellationRecord(BaseModel):
    """How and by whom a booking was cancelled."""

    model_config = ConfigDict(frozen=True)

    penalty: int = 0
    refund_amount: int = 0
    reason: str | None = Field(None, max_length=1000)
    cancelled_by: CancelActor
    cancelled_at: datetime


class Booking(BaseModel):
    """Booking snapshot supplied by the persistence collaborator."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    listing_id: str | None = None
    service_type: ServiceType = ServiceType.PROPERTY

    # Dates
    start_date: date
    end_date: date
    start_at: datetime | None = None  # precise vehicle pickup time

    # Guests / renters
    guests: int = Field(default=1, ge=1)

    # Pricing snapshot
    price_per_unit: int = Field(..., ge=0)
    units: int = Field(..., ge=1)
    extra_hours: int = Field(default=0, ge=0)
    hourly_rate: int | None = Field(None, ge=0)
    with_driver: bool = False
    total_price: int = Field(..., ge=0)
    discount_amount: int = Field(default=0, ge=0)
    payment_method: str | None = None

    # Status
    status: BookingStatus = BookingStatus.PENDING

    # Cancellation
    cancellation: CancellationRecord | None = None

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("end_date")
    @classmethod
    def validate_end_date(cls, v: date, info) -> date:
        start_date = info.data.get("start_date")
        if start_date and v < start_date:
            raise ValueError("end_date must not be before start_date")
        return v

    @property
    def date_range(self) -> DateRange:
        return DateRange.occupied(self.start_date, self.end_date)

    @property
    def base_price(self) -> int:
        """Pre-discount price of the booked units and hours."""
        hours_price = self.extra_hours * self.hourly_rate if self.hourly_rate else 0
        return self.price_per_unit * self.units + hours_price
