"""Commission calculation service.

CRITICAL BUSINESS LOGIC:
- Furnished properties: 14% total platform commission
  - 12% service fee charged to the traveler on top of the stay price
  - 2% taken from the host's earnings
- Vehicle rentals: 12% total platform commission
  - 10% service fee charged to the renter
  - 2% taken from the owner's earnings
- Both are computed on the price AFTER discount, and both carry 20% VAT
- The host commission comes out of the host's share; it is never added to
  the guest's total
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from bookingengine.config import settings
from bookingengine.core.money import fraction_of, percent_of


class ServiceType(str, Enum):
    """Kinds of listing the marketplace prices."""

    PROPERTY = "property"
    VEHICLE = "vehicle"


@dataclass(frozen=True)
class CommissionRates:
    """Platform rates for one service type, as percentages."""

    traveler_fee_percent: Decimal
    host_fee_percent: Decimal

    @property
    def total_percent(self) -> Decimal:
        return self.traveler_fee_percent + self.host_fee_percent


# Fixed rate table, not configurable per listing
COMMISSION_RATES: dict[ServiceType, CommissionRates] = {
    ServiceType.PROPERTY: CommissionRates(
        traveler_fee_percent=Decimal("12"),
        host_fee_percent=Decimal("2"),
    ),
    ServiceType.VEHICLE: CommissionRates(
        traveler_fee_percent=Decimal("10"),
        host_fee_percent=Decimal("2"),
    ),
}


@dataclass(frozen=True)
class VatSplit:
    """An HT amount with its VAT and TTC counterparts."""

    ht: int
    vat: int
    ttc: int


def split_vat(amount_ht: int, vat_rate: Decimal | None = None) -> VatSplit:
    """Split an HT base into HT / VAT / TTC.

    ``VAT = round_half_up(HT * rate)`` and ``TTC = HT + VAT`` so the three
    always add up exactly.
    """
    rate = settings.vat_rate if vat_rate is None else vat_rate
    vat = fraction_of(amount_ht, rate)
    return VatSplit(ht=amount_ht, vat=vat, ttc=amount_ht + vat)


class CommissionService:
    """Service for platform fee and host commission calculations."""

    def get_commission_rates(self, service_type: str | ServiceType) -> CommissionRates:
        """Get the rate table row for a service type.

        Args:
            service_type: ``property`` or ``vehicle`` (string or enum)

        Returns:
            CommissionRates: traveler and host percentages
        """
        return COMMISSION_RATES[ServiceType(service_type)]

    def compute_service_fee(
        self,
        price_after_discount: int,
        service_type: str | ServiceType,
        override_ht: int | None = None,
    ) -> VatSplit:
        """Calculate the guest-side service fee.

        A listing may carry a fixed HT override; otherwise the traveler
        percentage is applied to the post-discount price.

        Args:
            price_after_discount: Stay or rental price after discount
            service_type: The service type
            override_ht: Optional fixed HT service fee

        Returns:
            VatSplit: HT / VAT / TTC service fee
        """
        if override_ht is not None:
            return split_vat(override_ht)
        rates = self.get_commission_rates(service_type)
        return split_vat(percent_of(price_after_discount, rates.traveler_fee_percent))

    def compute_host_commission(
        self,
        price_after_discount: int,
        service_type: str | ServiceType,
    ) -> VatSplit:
        """Calculate the commission withheld from the host or owner.

        Args:
            price_after_discount: Stay or rental price after discount
            service_type: The service type

        Returns:
            VatSplit: HT / VAT / TTC commission
        """
        rates = self.get_commission_rates(service_type)
        return split_vat(percent_of(price_after_discount, rates.host_fee_percent))

    def compute_host_net(self, price_after_discount: int, service_type: str | ServiceType) -> int:
        """Host payout: post-discount price minus the TTC commission.

        The platform remits the VAT, so the full TTC amount is withheld.
        """
        commission = self.compute_host_commission(price_after_discount, service_type)
        return price_after_discount - commission.ttc


commission_service = CommissionService()
