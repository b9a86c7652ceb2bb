"""Exchange-rate table for converting amounts into the reporting currency"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from domainfolio.domain.exceptions import ExchangeRateUnavailableError


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    name: str
    symbol: str


SUPPORTED_CURRENCIES: List[CurrencyInfo] = [
    CurrencyInfo("USD", "US Dollar", "$"),
    CurrencyInfo("EUR", "Euro", "€"),
    CurrencyInfo("GBP", "British Pound", "£"),
    CurrencyInfo("CNY", "Chinese Yuan", "¥"),
    CurrencyInfo("JPY", "Japanese Yen", "¥"),
    CurrencyInfo("CAD", "Canadian Dollar", "C$"),
    CurrencyInfo("AUD", "Australian Dollar", "A$"),
    CurrencyInfo("CHF", "Swiss Franc", "CHF"),
    CurrencyInfo("HKD", "Hong Kong Dollar", "HK$"),
    CurrencyInfo("SGD", "Singapore Dollar", "S$"),
]


def currency_info(code: str) -> Optional[CurrencyInfo]:
    return next((c for c in SUPPORTED_CURRENCIES if c.code == code.upper()), None)


@dataclass
class ExchangeRateTable:
    """
    Quotes of 1 unit of base_currency in other currencies, e.g. base USD,
    rates {"EUR": 0.85} means 1 USD = 0.85 EUR.

    Built explicitly by whoever fetched the quotes; there is no shared
    module-level instance.
    """

    base_currency: str
    rates: Dict[str, float] = field(default_factory=dict)
    as_of: Optional[date] = None

    def rate(self, from_currency: str, to_currency: str) -> float:
        """
        Multiplier converting from_currency into to_currency.

        Resolution order: identity, direct quote from base, inverse quote to
        base, cross rate through base.

        Raises:
            ExchangeRateUnavailableError: a leg of the conversion has no quote
        """
        source = from_currency.upper()
        target = to_currency.upper()
        base = self.base_currency.upper()

        if source == target:
            return 1.0
        if source == base:
            return self._quote(target)
        if target == base:
            return 1 / self._quote(source)
        return self._quote(target) / self._quote(source)

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        return amount * self.rate(from_currency, to_currency)

    def _quote(self, code: str) -> float:
        quote = self.rates.get(code)
        if not quote:
            raise ExchangeRateUnavailableError(f"No exchange rate for {self.base_currency}/{code}")
        return quote
