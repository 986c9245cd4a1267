"""
Supported currencies, locale-aware amount formatting and fixed-rate conversion.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Mapping, Optional

from .money import round_money, to_decimal

logger = logging.getLogger(__name__)

NBSP = "\u00a0"
NARROW_NBSP = "\u202f"


@dataclass(frozen=True)
class Currency:
    code: str
    name: str
    symbol: str

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "name": self.name, "symbol": self.symbol}


@dataclass(frozen=True)
class NumberFormat:
    """Separators and symbol placement for one locale"""
    decimal: str
    group: str
    symbol_first: bool


SUPPORTED_CURRENCIES: List[Currency] = [
    Currency("EUR", "Euro", "€"),
    Currency("USD", "US Dollar", "$"),
    Currency("GBP", "British Pound", "£"),
    Currency("CHF", "Swiss Franc", "CHF"),
    Currency("CAD", "Canadian Dollar", "C$"),
    Currency("JPY", "Japanese Yen", "¥"),
    Currency("AUD", "Australian Dollar", "A$"),
    Currency("SEK", "Swedish Krona", "kr"),
    Currency("NOK", "Norwegian Krone", "kr"),
    Currency("DKK", "Danish Krone", "kr"),
]

LOCALE_FORMATS: Dict[str, NumberFormat] = {
    "en-US": NumberFormat(decimal=".", group=",", symbol_first=True),
    "en-GB": NumberFormat(decimal=".", group=",", symbol_first=True),
    "fr-FR": NumberFormat(decimal=",", group=NARROW_NBSP, symbol_first=False),
    "de-DE": NumberFormat(decimal=",", group=".", symbol_first=False),
}

# Units of each currency per 1 EUR; used when no live rates are supplied.
DEFAULT_EXCHANGE_RATES: Dict[str, Decimal] = {
    "EUR": Decimal("1"),
    "USD": Decimal("1.08"),
    "GBP": Decimal("0.86"),
    "CHF": Decimal("0.96"),
    "CAD": Decimal("1.48"),
    "JPY": Decimal("161.50"),
    "AUD": Decimal("1.66"),
    "SEK": Decimal("11.45"),
    "NOK": Decimal("11.85"),
    "DKK": Decimal("7.46"),
}


class CurrencyService:
    """
    Formats and converts amounts for the supported currencies.

    Built once by the application factory and handed to whatever needs it;
    instances hold no mutable state.
    """

    def __init__(
        self,
        exchange_rates: Optional[Mapping[str, Decimal]] = None,
        default_locale: str = "en-US",
    ) -> None:
        rates = exchange_rates if exchange_rates is not None else DEFAULT_EXCHANGE_RATES
        self.exchange_rates: Dict[str, Decimal] = {code: Decimal(str(rate)) for code, rate in rates.items()}
        self.exchange_rates.setdefault("EUR", Decimal("1"))
        if default_locale not in LOCALE_FORMATS:
            logger.warning("Unknown default locale %s, using en-US", default_locale)
            default_locale = "en-US"
        self.default_locale = default_locale
        self._currencies = {currency.code: currency for currency in SUPPORTED_CURRENCIES}

    def get_currency_info(self, code: str) -> Optional[Currency]:
        return self._currencies.get(code)

    def is_supported(self, code: str) -> bool:
        return code in self._currencies

    def list_currencies(self) -> List[Currency]:
        return list(self._currencies.values())

    def format_currency(self, amount, currency_code: str, locale: Optional[str] = None) -> str:
        """Render amount with two fraction digits, e.g. "€1,234.50" or "1 234,50 €"."""
        value = to_decimal(amount)
        currency = self.get_currency_info(currency_code)
        if currency is None:
            return f"{currency_code} {value:.2f}"

        fmt = LOCALE_FORMATS.get(locale or self.default_locale)
        if fmt is None:
            logger.debug("No number format for locale %s, using %s", locale, self.default_locale)
            fmt = LOCALE_FORMATS[self.default_locale]

        sign = "-" if value < 0 else ""
        digits = f"{abs(value):,.2f}"
        digits = digits.replace(",", "\x00").replace(".", fmt.decimal).replace("\x00", fmt.group)

        if fmt.symbol_first:
            gap = NBSP if currency.symbol[-1].isalpha() else ""
            return f"{sign}{currency.symbol}{gap}{digits}"
        return f"{sign}{digits}{NBSP}{currency.symbol}"

    def convert_amount(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
        """Convert through EUR using the configured rates."""
        if from_currency == to_currency:
            return amount

        from_rate = self._rate(from_currency)
        to_rate = self._rate(to_currency)
        return round_money(amount / from_rate * to_rate)

    def _rate(self, code: str) -> Decimal:
        rate = self.exchange_rates.get(code)
        if not rate:
            logger.warning("No exchange rate for %s, treating it as 1:1 with EUR", code)
            return Decimal("1")
        return rate
