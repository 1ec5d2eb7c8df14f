"""Fee algebra: pure conversions between organizer net and public gross amounts.

Rates are percentages (``3.5`` means 3.5%). Every function takes the rate snapshot in
effect at computation time, so results never depend on shared state.
"""

from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal

import structlog

from common.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
CENTS = Decimal("0.01")


@dataclass(frozen=True)
class FeeRates:
    """Snapshot of the platform's financial settings."""

    commission_rate: Decimal
    pasarela_rate: Decimal
    pasarela_fixed: Decimal
    iva_rate: Decimal

    @property
    def commission(self) -> Decimal:
        return self.commission_rate / HUNDRED

    @property
    def gateway(self) -> Decimal:
        return self.pasarela_rate / HUNDRED

    @property
    def tax_factor(self) -> Decimal:
        """``1 + v`` where ``v`` is the tax rate as a fraction."""
        return ONE + self.iva_rate / HUNDRED

    def as_log_context(self) -> dict[str, str]:
        return {
            "commission_rate": str(self.commission_rate),
            "pasarela_rate": str(self.pasarela_rate),
            "pasarela_fixed": str(self.pasarela_fixed),
            "iva_rate": str(self.iva_rate),
        }


@dataclass(frozen=True)
class AbsorbedFee:
    fee: Decimal
    net: Decimal


@dataclass(frozen=True)
class TierQuote:
    """Price, fee and organizer net for a tier."""

    price: Decimal
    fee: Decimal
    net_price: Decimal


def gross_up(net: Decimal, rates: FeeRates) -> Decimal:
    """Return the public charge that leaves the organizer exactly ``net`` after fees and tax.

    gross = ceil((net + net*c*(1+v) + f*(1+v)) / (1 - g*(1+v)))

    The result is rounded up to the next whole currency unit so the organizer never
    receives less than requested.

    Raises:
        ValueError: if ``net`` is negative.
        ConfigurationError: if the combined gateway rate leaves a non-positive denominator.
    """
    net = Decimal(net)
    if net < ZERO:
        raise ValueError("Net amount cannot be negative.")
    if net == ZERO:
        return ZERO

    tax = rates.tax_factor
    denominator = ONE - rates.gateway * tax
    if denominator <= ZERO:
        logger.error("fee_rates_unsolvable", net=str(net), **rates.as_log_context())
        raise ConfigurationError(net=net, rates=rates)

    numerator = net + net * rates.commission * tax + rates.pasarela_fixed * tax
    return (numerator / denominator).to_integral_value(rounding=ROUND_CEILING)


def absorbed_fee(total: Decimal, rates: FeeRates) -> AbsorbedFee:
    """Split a flat public price into the fee it absorbs and what remains for the organizer."""
    total = Decimal(total)
    if total <= ZERO:
        return AbsorbedFee(fee=ZERO, net=ZERO)

    tax = rates.tax_factor
    fee_commission = total * rates.commission * tax
    fee_gateway = total * rates.gateway * tax + rates.pasarela_fixed * tax
    fee = (fee_commission + fee_gateway).quantize(CENTS, rounding=ROUND_HALF_UP)
    net = total - fee
    if net <= ZERO:
        return AbsorbedFee(fee=ZERO, net=ZERO)
    return AbsorbedFee(fee=fee, net=net)


def quote_tier(amount: Decimal, absorb_fee: bool, rates: FeeRates) -> TierQuote:
    """Compute the stored price/fee/net triple for a tier.

    With ``absorb_fee`` the amount is the public price and fees come out of it;
    otherwise the amount is what the organizer wants to receive and the price is grossed up.
    """
    amount = Decimal(amount)
    if absorb_fee:
        split = absorbed_fee(amount, rates)
        return TierQuote(price=max(amount, ZERO), fee=split.fee, net_price=split.net)
    price = gross_up(amount, rates)
    return TierQuote(price=price, fee=price - amount, net_price=amount)
