"""Display helpers for balance amounts."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from splitledger.config import get_settings


CURRENCY_SYMBOLS = {
    "USD": "$",
    "INR": "₹",
    "EUR": "€",
    "GBP": "£",
}


def round_money(value: Decimal, places: Optional[int] = None) -> Decimal:
    """Round half-up to `places` (defaults to money_decimal_places)."""
    if places is None:
        places = get_settings().money_decimal_places
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def get_symbol(currency: str) -> str:
    # Unknown codes fall back to the dollar sign
    return CURRENCY_SYMBOLS.get(currency.upper(), "$")


def format_amount(value: Decimal, currency: str) -> str:
    """Render e.g. Decimal("33.333") in USD as "$33.33"."""
    rounded = round_money(value)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{get_symbol(currency)}{abs(rounded)}"
