from decimal import Decimal

import pytest

from common.exceptions import ConfigurationError, ErrorCode
from finance.service.fees import FeeRates, absorbed_fee, gross_up, quote_tier

DEFAULT_RATES = FeeRates(
    commission_rate=Decimal("3.5"),
    pasarela_rate=Decimal("3.5"),
    pasarela_fixed=Decimal("4.50"),
    iva_rate=Decimal("16"),
)
NO_COMMISSION = FeeRates(
    commission_rate=Decimal("0"),
    pasarela_rate=Decimal("3.5"),
    pasarela_fixed=Decimal("4.50"),
    iva_rate=Decimal("16"),
)


def test_gross_up_reference_values() -> None:
    assert gross_up(Decimal("100"), DEFAULT_RATES) == Decimal("114")


def test_gross_up_rounds_up_to_whole_units() -> None:
    gross = gross_up(Decimal("200"), DEFAULT_RATES)

    assert gross == Decimal("223")
    assert gross == gross.to_integral_value()


def test_gross_up_zero() -> None:
    assert gross_up(Decimal("0"), DEFAULT_RATES) == Decimal("0")


def test_gross_up_rejects_negative_net() -> None:
    with pytest.raises(ValueError):
        gross_up(Decimal("-1"), DEFAULT_RATES)


@pytest.mark.parametrize("pasarela_rate", [Decimal("86.3"), Decimal("90"), Decimal("100")])
def test_gross_up_unsolvable_rates(pasarela_rate: Decimal) -> None:
    rates = FeeRates(
        commission_rate=Decimal("3.5"),
        pasarela_rate=pasarela_rate,
        pasarela_fixed=Decimal("4.50"),
        iva_rate=Decimal("16"),
    )

    with pytest.raises(ConfigurationError) as exc_info:
        gross_up(Decimal("100"), rates)

    assert exc_info.value.code == ErrorCode.CONFIGURATION_ERROR


def test_absorbed_fee_reference_values() -> None:
    split = absorbed_fee(Decimal("114"), DEFAULT_RATES)

    # 114*0.035*1.16 twice, plus 4.50*1.16
    assert split.fee == Decimal("14.48")
    assert split.net == Decimal("99.52")


@pytest.mark.parametrize("total", [Decimal("0"), Decimal("-10"), Decimal("5")])
def test_absorbed_fee_without_room_for_a_net(total: Decimal) -> None:
    split = absorbed_fee(total, DEFAULT_RATES)

    assert split.fee == Decimal("0")
    assert split.net == Decimal("0")


@pytest.mark.parametrize("net", ["1", "25", "100", "150.50", "200"])
def test_absorbing_a_grossed_up_price_returns_the_net(net: str) -> None:
    gross = gross_up(Decimal(net), DEFAULT_RATES)

    assert abs(absorbed_fee(gross, DEFAULT_RATES).net - Decimal(net)) <= 1


@pytest.mark.parametrize("net", ["1", "100", "999.99", "10000"])
def test_absorbing_without_commission_never_undershoots(net: str) -> None:
    gross = gross_up(Decimal(net), NO_COMMISSION)

    recovered = absorbed_fee(gross, NO_COMMISSION).net

    assert Decimal(net) - Decimal("0.01") <= recovered < Decimal(net) + 1


@pytest.mark.parametrize("net", ["1000", "5000"])
def test_absorbing_large_amounts_loses_only_the_commission_on_the_fee(net: str) -> None:
    """Gross-up charges commission on the net, absorption on the whole price."""
    gross = gross_up(Decimal(net), DEFAULT_RATES)
    commission_on_fee = DEFAULT_RATES.commission * DEFAULT_RATES.tax_factor * (gross - Decimal(net))

    recovered = absorbed_fee(gross, DEFAULT_RATES).net

    assert Decimal(net) - commission_on_fee - Decimal("0.01") <= recovered < Decimal(net) + 1


def test_quote_rider_pays_fees() -> None:
    quote = quote_tier(Decimal("100"), absorb_fee=False, rates=DEFAULT_RATES)

    assert (quote.price, quote.fee, quote.net_price) == (Decimal("114"), Decimal("14"), Decimal("100"))


def test_quote_organizer_absorbs_fees() -> None:
    quote = quote_tier(Decimal("114"), absorb_fee=True, rates=DEFAULT_RATES)

    assert (quote.price, quote.fee, quote.net_price) == (Decimal("114"), Decimal("14.48"), Decimal("99.52"))
