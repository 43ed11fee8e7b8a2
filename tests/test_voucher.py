from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest

from bookingengine.core.exceptions import ErrorKind, VoucherInvalid
from bookingengine.schemas import Voucher, VoucherStatus
from bookingengine.services.voucher_service import (
    assert_voucher_usable,
    validate_voucher,
    voucher_discount,
)


def test_active_voucher_is_valid(now):
    voucher = Voucher(code="SPRING", discount_percentage=Decimal("15"), valid_until=now)

    check = validate_voucher(voucher, now)

    assert check.valid is True
    assert check.error is None


@pytest.mark.parametrize(
    "voucher_kwargs",
    [
        {"status": VoucherStatus.USED},
        {"status": VoucherStatus.EXPIRED},
        {"used_on_booking_id": "booking-7"},
    ],
)
def test_consumed_or_disabled_voucher_is_invalid(now, voucher_kwargs):
    voucher = Voucher(code="SPRING", discount_percentage=Decimal("15"), **voucher_kwargs)

    check = validate_voucher(voucher, now)

    assert check.valid is False
    assert check.error == ErrorKind.VOUCHER_INVALID
    assert "SPRING" in check.detail


def test_voucher_past_validity_is_invalid(now):
    voucher = Voucher(code="SPRING", valid_until=now - timedelta(seconds=1))

    with pytest.raises(VoucherInvalid):
        assert_voucher_usable(voucher, now)


def test_missing_voucher_is_invalid(now):
    check = validate_voucher(None, now)

    assert check.valid is False
    assert check.detail == "Voucher not found"


@pytest.mark.parametrize(
    "voucher, amount, expected",
    [
        (Voucher(code="P10", discount_percentage=Decimal("10")), 12_345, 1_235),
        (Voucher(code="F5K", discount_amount=5_000), 12_345, 5_000),
        (Voucher(code="F50K", discount_amount=50_000), 12_345, 12_345),
        (Voucher(code="P100", discount_percentage=Decimal("100")), 8_000, 8_000),
    ],
)
def test_voucher_discount(voucher, amount, expected):
    assert voucher_discount(voucher, amount) == expected
