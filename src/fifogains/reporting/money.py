from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import ClassVar, Iterable

from fifogains.conv import to_minor_units

MONEY_PRECISION = 2
PRICE_PRECISION = 4
QUANTITY_PRECISION = 4


def _div_trunc(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero (floor division rounds negatives down)."""
    if denominator == 0:
        raise ZeroDivisionError("division by zero")
    q = abs(numerator) // abs(denominator)
    return q if (numerator >= 0) == (denominator > 0) else -q


def format_decimal(value: Decimal, places: int) -> str:
    """Render with a fixed number of fractional digits, half away from zero."""
    quant = Decimal(1).scaleb(-places)
    return f"{value.quantize(quant, rounding=ROUND_HALF_UP):f}"


@dataclass(frozen=True)
class Money:
    """Exact fixed-point amount: integer minor units at a decimal precision."""

    amount: int
    currency: str
    precision: int = MONEY_PRECISION

    @classmethod
    def from_decimal(
        cls, value: Decimal, currency: str, precision: int = MONEY_PRECISION
    ) -> Money:
        return cls(to_minor_units(value, precision), currency, precision)

    def _check_compatible(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValueError(
                f"currency mismatch: {self.currency} vs {other.currency}"
            )
        if self.precision != other.precision:
            raise ValueError(
                f"precision mismatch: {self.precision} vs {other.precision}"
            )

    def add(self, other: Money) -> Money:
        self._check_compatible(other)
        return Money(self.amount + other.amount, self.currency, self.precision)

    def subtract(self, other: Money) -> Money:
        self._check_compatible(other)
        return Money(self.amount - other.amount, self.currency, self.precision)

    def multiply(self, factor: int) -> Money:
        return Money(self.amount * factor, self.currency, self.precision)

    def divide(self, divisor: int) -> Money:
        """Divide by an integer, truncating toward zero."""
        return Money(_div_trunc(self.amount, divisor), self.currency, self.precision)

    def convert_precision(self, precision: int) -> Money:
        if precision >= self.precision:
            factor = 10 ** (precision - self.precision)
            return Money(self.amount * factor, self.currency, precision)
        divisor = 10 ** (self.precision - precision)
        return Money(_div_trunc(self.amount, divisor), self.currency, precision)

    def less_than(self, other: Money) -> bool:
        self._check_compatible(other)
        return self.amount < other.amount

    def is_zero(self) -> bool:
        return self.amount == 0

    def to_decimal(self) -> Decimal:
        return Decimal(self.amount).scaleb(-self.precision)

    def to_format(self, places: int) -> str:
        return format_decimal(self.to_decimal(), places)

    def __str__(self) -> str:
        return f"{self.to_format(self.precision)} {self.currency}"


def minimum(amounts: Iterable[Money]) -> Money:
    """Smallest of several compatible amounts."""
    items = list(amounts)
    if not items:
        raise ValueError("minimum() of no amounts")
    lowest = items[0]
    for m in items[1:]:
        if m.less_than(lowest):
            lowest = m
    return lowest


@dataclass(frozen=True, order=True)
class Quantity:
    """Share count in ten-thousandths of a share."""

    units: int
    SCALE: ClassVar[int] = 10 ** QUANTITY_PRECISION

    @classmethod
    def from_decimal(cls, value: Decimal) -> Quantity:
        return cls(to_minor_units(value, QUANTITY_PRECISION))

    @classmethod
    def zero(cls) -> Quantity:
        return cls(0)

    def add(self, other: Quantity) -> Quantity:
        return Quantity(self.units + other.units)

    def subtract(self, other: Quantity) -> Quantity:
        return Quantity(self.units - other.units)

    def is_zero(self) -> bool:
        return self.units == 0

    def is_positive(self) -> bool:
        return self.units > 0

    def to_decimal(self) -> Decimal:
        return Decimal(self.units).scaleb(-QUANTITY_PRECISION)

    def to_format(self) -> str:
        return format_decimal(self.to_decimal(), QUANTITY_PRECISION)

    def __str__(self) -> str:
        return self.to_format()
