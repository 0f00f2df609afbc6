from decimal import ROUND_HALF_UP, Decimal
from typing import Union

CENT = Decimal("0.01")

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "TWD": "NT$"}


def to_money(value: Union[str, int, float, Decimal, None]) -> Decimal:
    """Convert a JSON number or string into a cent-quantized Decimal."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def format_price(amount, currency: str = "USD") -> str:
    value = to_money(amount)
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol:
        return f"{symbol}{value:,.2f}"
    return f"{currency.upper()} {value:,.2f}"
