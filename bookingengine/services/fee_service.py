"""Ancillary fee calculations.

Cleaning fee and local taxes are pass-through amounts already including tax;
VAT is never applied to them.
"""

from bookingengine.schemas.pricing import AncillaryFees


def effective_cleaning_fee(
    cleaning_fee: int,
    units: int,
    free_cleaning_min_units: int | None = None,
) -> int:
    """Cleaning is free once the stay reaches ``free_cleaning_min_units``."""
    if free_cleaning_min_units is not None and units >= free_cleaning_min_units:
        return 0
    return cleaning_fee


def cleaning_fee_for(fees: AncillaryFees, units: int) -> int:
    return effective_cleaning_fee(fees.cleaning_fee, units, fees.free_cleaning_min_units)


def local_taxes_for(fees: AncillaryFees) -> int:
    """Local taxes are a flat per-listing amount added undiscounted."""
    return fees.taxes
