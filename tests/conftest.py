"""Shared fixtures for engine tests."""

from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Callable

import pytest

from bookingengine.domain.booking_state import BookingStatus
from bookingengine.schemas import (
    Booking,
    DiscountConfig,
    ListingPricingConfig,
    ModificationRequest,
)
from bookingengine.services.commission_service import ServiceType

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_listing() -> Callable[..., ListingPricingConfig]:
    def _make(**overrides) -> ListingPricingConfig:
        data = {
            "listing_id": "listing-1",
            "service_type": ServiceType.PROPERTY,
            "base_price_per_unit": 50_000,
            "max_guests": 4,
        }
        data.update(overrides)
        return ListingPricingConfig(**data)

    return _make


@pytest.fixture
def make_vehicle_listing(make_listing) -> Callable[..., ListingPricingConfig]:
    def _make(**overrides) -> ListingPricingConfig:
        data = {
            "listing_id": "vehicle-1",
            "service_type": ServiceType.VEHICLE,
            "base_price_per_unit": 20_000,
            "max_guests": 5,
        }
        data.update(overrides)
        return make_listing(**data)

    return _make


@pytest.fixture
def make_booking() -> Callable[..., Booking]:
    def _make(**overrides) -> Booking:
        data = {
            "id": "booking-1",
            "listing_id": "listing-1",
            "service_type": ServiceType.PROPERTY,
            "start_date": date(2025, 3, 10),
            "end_date": date(2025, 3, 13),
            "guests": 2,
            "price_per_unit": 50_000,
            "units": 3,
            "total_price": 171_600,
            "status": BookingStatus.CONFIRMED,
            "created_at": NOW,
        }
        data.update(overrides)
        return Booking(**data)

    return _make


@pytest.fixture
def long_stay_listing(make_listing) -> ListingPricingConfig:
    return make_listing(
        discount=DiscountConfig(enabled=True, min_units=5, percentage=Decimal("10")),
        long_stay_discount=DiscountConfig(enabled=True, min_units=7, percentage=Decimal("20")),
    )


@pytest.fixture
def make_request() -> Callable[..., ModificationRequest]:
    def _make(**overrides) -> ModificationRequest:
        data = {
            "id": "request-1",
            "booking_id": "booking-1",
            "original_start_date": date(2025, 3, 10),
            "original_end_date": date(2025, 3, 13),
            "original_guests": 2,
            "original_total_price": 171_600,
            "requested_start_date": date(2025, 3, 10),
            "requested_end_date": date(2025, 3, 15),
            "requested_guests": 2,
            "requested_total_price": 286_000,
            "requested_units": 5,
            "requested_price_per_unit": 50_000,
            "price_difference": 114_400,
            "created_at": NOW,
        }
        data.update(overrides)
        return ModificationRequest(**data)

    return _make
