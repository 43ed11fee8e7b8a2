"""Listing pricing configuration schemas."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bookingengine.domain.cancellation_policy import CancellationPolicy
from bookingengine.services.commission_service import ServiceType


class DiscountConfig(BaseModel):
    """A duration-based discount tier."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    min_units: int | None = Field(None, ge=1)
    percentage: Decimal | None = Field(None, ge=0, le=100)

    def applies_to(self, units: int) -> bool:
        """True when the tier is fully configured and ``units`` reaches it."""
        if not self.enabled or not self.min_units or not self.percentage:
            return False
        return units >= self.min_units


class DynamicPriceRange(BaseModel):
    """Per-night price override for an inclusive date range."""

    model_config = ConfigDict(frozen=True)

    start_date: date
    end_date: date
    price_per_unit: int = Field(..., ge=0)

    @field_validator("end_date")
    @classmethod
    def validate_end_date(cls, v: date, info) -> date:
        start_date = info.data.get("start_date")
        if start_date and v < start_date:
            raise ValueError("end_date must not be before start_date")
        return v

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


class ListingPricingConfig(BaseModel):
    """Pricing configuration owned by a property or vehicle listing.

    Read-only to the engine; one instance is passed to each computation.
    """

    model_config = ConfigDict(frozen=True)

    listing_id: str | None = None
    service_type: ServiceType = ServiceType.PROPERTY

    # Pricing (whole currency units)
    base_price_per_unit: int = Field(..., ge=0)
    discount: DiscountConfig = Field(default_factory=DiscountConfig)
    long_stay_discount: DiscountConfig | None = None
    dynamic_prices: tuple[DynamicPriceRange, ...] = ()

    # Ancillary fees
    cleaning_fee: int = Field(default=0, ge=0)
    free_cleaning_min_units: int | None = Field(None, ge=1)
    service_fee_override: int | None = Field(None, ge=0)
    taxes: int = Field(default=0, ge=0)

    # Vehicle only
    driver_fee: int | None = Field(None, ge=0)
    hourly_rate: int | None = Field(None, ge=0)

    # Policies
    min_units: int = Field(default=1, ge=1)
    max_units: int | None = Field(None, ge=1)
    max_guests: int = Field(default=1, ge=1)
    cancellation_policy: CancellationPolicy = CancellationPolicy.MODERATE

    @model_validator(mode="after")
    def validate_vehicle_fields(self) -> "ListingPricingConfig":
        if self.service_type != ServiceType.VEHICLE and (
            self.driver_fee is not None or self.hourly_rate is not None
        ):
            raise ValueError("driver_fee and hourly_rate only apply to vehicles")
        if self.max_units is not None and self.max_units < self.min_units:
            raise ValueError("max_units must not be below min_units")
        return self

    @property
    def is_vehicle(self) -> bool:
        return self.service_type == ServiceType.VEHICLE

    @property
    def hourly_rental_enabled(self) -> bool:
        return self.is_vehicle and bool(self.hourly_rate)
