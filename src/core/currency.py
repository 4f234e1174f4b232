"""Currency reference data and formatting helpers.

The portfolio reports in JPY, so default FX rates are quoted as
units of JPY per one unit of the given currency.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    name: str
    symbol: str


SUPPORTED_CURRENCIES: tuple[CurrencyInfo, ...] = (
    CurrencyInfo("JPY", "Japanese Yen", "¥"),
    CurrencyInfo("USD", "US Dollar", "$"),
    CurrencyInfo("EUR", "Euro", "€"),
    CurrencyInfo("GBP", "British Pound", "£"),
    CurrencyInfo("CHF", "Swiss Franc", "CHF"),
    CurrencyInfo("CAD", "Canadian Dollar", "C$"),
    CurrencyInfo("AUD", "Australian Dollar", "A$"),
    CurrencyInfo("HKD", "Hong Kong Dollar", "HK$"),
    CurrencyInfo("SGD", "Singapore Dollar", "S$"),
    CurrencyInfo("KRW", "Korean Won", "₩"),
    CurrencyInfo("CNY", "Chinese Yuan", "¥"),
    CurrencyInfo("INR", "Indian Rupee", "₹"),
)

_BY_CODE: dict[str, CurrencyInfo] = {c.code: c for c in SUPPORTED_CURRENCIES}

# Approximate rates to JPY
DEFAULT_FX_RATES: dict[str, float] = {
    "JPY": 1.0,
    "USD": 150.0,
    "EUR": 170.0,
    "GBP": 190.0,
    "CHF": 165.0,
    "CAD": 110.0,
    "AUD": 100.0,
    "HKD": 19.0,
    "SGD": 110.0,
    "KRW": 0.11,
    "CNY": 20.5,
    "INR": 1.8,
}

# Currencies quoted without minor units
ZERO_DECIMAL_CURRENCIES = frozenset({"JPY", "KRW"})


def get_currency_symbol(currency_code: str) -> str:
    """Return the display symbol for ``currency_code``, or the code itself."""
    info = _BY_CODE.get(currency_code)
    return info.symbol if info else currency_code


def get_default_fx_rate(currency_code: str) -> float:
    """Return the fallback rate to JPY, 1.0 for unknown currencies."""
    return DEFAULT_FX_RATES.get(currency_code, 1.0)


def format_currency_value(amount: float, currency_code: str) -> str:
    """Format ``amount`` with its symbol and thousands separators.

    JPY and KRW are rendered without decimals, everything else with two.
    """
    symbol = get_currency_symbol(currency_code)
    if currency_code in ZERO_DECIMAL_CURRENCIES:
        return f"{symbol}{amount:,.0f}"
    return f"{symbol}{amount:,.2f}"


def get_currency_pair(from_currency: str, to_currency: str = "JPY") -> str:
    """Return the FX pair ticker, or an empty string when no conversion is needed."""
    if from_currency == to_currency:
        return ""
    return f"{from_currency}{to_currency}"
