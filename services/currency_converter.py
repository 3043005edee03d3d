"""Currency conversion routed through ARS as pivot currency."""

from __future__ import annotations

from domain.models import CurrencyCode, ExchangeRateSet


def _code(currency: str | CurrencyCode) -> str:
    if isinstance(currency, CurrencyCode):
        return currency.value
    return str(currency)


def convert_amount(
    amount: float,
    from_currency: str | CurrencyCode,
    to_currency: str | CurrencyCode,
    rates: ExchangeRateSet,
) -> float:
    """Convert ``amount`` between currency codes using ``rates``.

    The amount is first expressed in ARS and then divided by the target rate.
    Unknown source codes are taken as ARS amounts; unknown target codes return
    the ARS amount. No rounding is applied.
    """

    source = _code(from_currency)
    target = _code(to_currency)
    if source == target:
        return amount

    source_rate = rates.rate_for(source)
    amount_in_ars = amount if source_rate is None else amount * source_rate

    target_rate = rates.rate_for(target)
    if target_rate is None:
        return amount_in_ars
    return amount_in_ars / target_rate


class CurrencyConverter:
    """Bind a rate snapshot so callers can convert several amounts."""

    def __init__(self, rates: ExchangeRateSet) -> None:
        self.rates = rates

    def convert(self, amount: float, from_currency: str | CurrencyCode, to_currency: str | CurrencyCode) -> float:
        return convert_amount(amount, from_currency, to_currency, self.rates)


__all__ = ["CurrencyConverter", "convert_amount"]
