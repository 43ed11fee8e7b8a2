from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from bookingengine.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.currency == "XOF"
    assert settings.vat_rate == Decimal("0.20")
    assert settings.pending_booking_ttl_hours == 24
    assert settings.modification_request_ttl_hours == 48


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BOOKING_ENGINE_VAT_RATE", "0.18")
    monkeypatch.setenv("BOOKING_ENGINE_PENDING_BOOKING_TTL_HOURS", "12")

    settings = Settings(_env_file=None)

    assert settings.vat_rate == Decimal("0.18")
    assert settings.pending_booking_ttl_hours == 12


def test_currency_override_and_validation(monkeypatch):
    monkeypatch.setenv("BOOKING_ENGINE_CURRENCY", "EUR")
    assert Settings(_env_file=None).currency == "EUR"

    monkeypatch.setenv("BOOKING_ENGINE_CURRENCY", "euro")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
