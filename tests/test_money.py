from decimal import Decimal

import pytest

from settleup.money import round_money, to_decimal


def test_to_decimal_rounds_to_cents():
    assert to_decimal(0.1 + 0.2) == Decimal("0.30")
    assert to_decimal("12.345") == Decimal("12.35")
    assert to_decimal(7) == Decimal("7.00")


def test_round_money_half_cents():
    assert round_money(Decimal("0.125")) == Decimal("0.13")
    assert round_money(Decimal("-0.125")) == Decimal("-0.13")


@pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", None, True, [1], 1e30, "1e40"])
def test_to_decimal_rejects_bad_values(value):
    with pytest.raises(ValueError):
        to_decimal(value)
