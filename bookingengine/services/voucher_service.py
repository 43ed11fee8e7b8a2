"""Voucher validation.

The voucher collaborator looks the code up; the engine only decides whether
the snapshot it received can still be applied, and how much it takes off.
"""

from dataclasses import dataclass
from datetime import datetime

from bookingengine.core.exceptions import ErrorKind, VoucherInvalid
from bookingengine.core.money import percent_of
from bookingengine.schemas.pricing import Voucher, VoucherStatus


@dataclass(frozen=True)
class VoucherCheck:
    valid: bool
    error: ErrorKind | None = None
    detail: str | None = None


def assert_voucher_usable(voucher: Voucher | None, now: datetime) -> None:
    """Raise ``VoucherInvalid`` when the voucher cannot be applied."""
    if voucher is None:
        raise VoucherInvalid("Voucher not found")
    if voucher.status != VoucherStatus.ACTIVE:
        raise VoucherInvalid(f"Voucher {voucher.code} is {voucher.status.value}")
    if voucher.used_on_booking_id:
        raise VoucherInvalid(f"Voucher {voucher.code} has already been used")
    if voucher.valid_until is not None and voucher.valid_until < now:
        raise VoucherInvalid(f"Voucher {voucher.code} has expired")


def validate_voucher(voucher: Voucher | None, now: datetime) -> VoucherCheck:
    try:
        assert_voucher_usable(voucher, now)
    except VoucherInvalid as exc:
        return VoucherCheck(valid=False, error=exc.kind, detail=exc.detail)
    return VoucherCheck(valid=True)


def voucher_discount(voucher: Voucher, amount: int) -> int:
    """Discount granted by a valid voucher on ``amount``, never above it."""
    if voucher.discount_amount is not None:
        discount = voucher.discount_amount
    else:
        discount = percent_of(amount, voucher.discount_percentage)
    return max(0, min(discount, amount))
