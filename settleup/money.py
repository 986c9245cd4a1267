from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# One currency minor unit; balances within this of zero count as settled.
EPSILON = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            raise ValueError("Cannot convert value to Decimal") from None
    else:
        raise ValueError("Cannot convert value to Decimal")

    if not amount.is_finite():
        raise ValueError("Cannot convert value to Decimal")
    try:
        return round_money(amount)
    except InvalidOperation:
        # too many digits to hold at cent precision
        raise ValueError("Cannot convert value to Decimal") from None


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def amounts_close(a: Decimal, b: Decimal, tolerance: Decimal = EPSILON) -> bool:
    return abs(a - b) <= tolerance
