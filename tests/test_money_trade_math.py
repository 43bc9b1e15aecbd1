from decimal import Decimal

import pytest

from fifogains.reporting.money import Money, Quantity, format_decimal, minimum
from fifogains.reporting.trade_math import (
    proportional_cost,
    realized_profit,
    unit_price,
)


def _nok(value: str, precision: int = 2) -> Money:
    return Money.from_decimal(Decimal(value), "NOK", precision)


def _qty(value: str) -> Quantity:
    return Quantity.from_decimal(Decimal(value))


def test_money_from_decimal_and_format():
    m = _nok("100")
    assert m.amount == 10000
    assert m.to_format(2) == "100.00"
    assert m.to_decimal() == Decimal("100.00")
    assert str(m) == "100.00 NOK"


def test_money_add_subtract_require_same_currency_and_precision():
    assert _nok("1.50").add(_nok("2.25")) == _nok("3.75")
    assert _nok("1.50").subtract(_nok("2.25")) == _nok("-0.75")
    with pytest.raises(ValueError, match="currency"):
        _nok("1").add(Money.from_decimal(Decimal("1"), "USD"))
    with pytest.raises(ValueError, match="precision"):
        _nok("1").add(_nok("1", 4))


def test_money_divide_truncates_toward_zero():
    assert Money(1000, "NOK").divide(3).amount == 333
    assert Money(-1000, "NOK").divide(3).amount == -333
    assert Money(2000, "NOK").divide(3).amount == 666
    with pytest.raises(ZeroDivisionError):
        Money(1, "NOK").divide(0)


def test_money_convert_precision():
    assert _nok("12.34").convert_precision(4) == Money(123400, "NOK", 4)
    assert Money(123456, "NOK", 4).convert_precision(2) == Money(1234, "NOK", 2)
    assert Money(-123456, "NOK", 4).convert_precision(2) == Money(-1234, "NOK", 2)


def test_minimum():
    assert minimum([_nok("3"), _nok("1"), _nok("2")]) == _nok("1")
    with pytest.raises(ValueError):
        minimum([])


def test_format_rounds_half_away_from_zero():
    assert Money(105, "NOK", 4).to_format(3) == "0.011"
    assert Money(-105, "NOK", 4).to_format(3) == "-0.011"
    assert format_decimal(Decimal("2.5"), 0) == "3"


def test_quantity_scaling_and_format():
    q = _qty("1.23456")
    assert q.units == 12346
    assert q.to_format() == "1.2346"
    assert _qty("10").to_format() == "10.0000"
    assert min(_qty("3"), _qty("2")) == _qty("2")
    assert _qty("3").subtract(_qty("3")).is_zero()


def test_unit_price_from_total_and_quantity():
    price = unit_price(_nok("100.00"), _qty("10"))
    assert price == Money(100000, "NOK", 4)
    assert price.to_format(3) == "10.000"
    # 100 / 3 = 33.3333... truncated at 4 dp
    assert unit_price(_nok("100.00"), _qty("3")).amount == 333333
    with pytest.raises(ValueError):
        unit_price(_nok("100"), Quantity.zero())


def test_proportional_cost_exact_split():
    total = _nok("100.00")
    piece = proportional_cost(total, _qty("3"), _qty("10"))
    assert piece == _nok("30.00")
    assert total.subtract(piece) == _nok("70.00")


def test_proportional_cost_full_lot_returns_whole_cost():
    total = _nok("100.00")
    assert proportional_cost(total, _qty("3"), _qty("3")) == total
    # Truncated share for an inexact split
    assert proportional_cost(total, _qty("1"), _qty("3")) == _nok("33.33")


def test_realized_profit_sign():
    buy = Money(100000, "NOK", 4)
    assert realized_profit(Money(150000, "NOK", 4), buy, _qty("10")).to_format(2) == "50.00"
    assert realized_profit(Money(50000, "NOK", 4), buy, _qty("10")).to_format(2) == "-50.00"
    assert realized_profit(buy, buy, _qty("10")).is_zero()
