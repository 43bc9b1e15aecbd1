from __future__ import annotations

from .money import PRICE_PRECISION, Money, Quantity


def unit_price(total: Money, quantity: Quantity) -> Money:
    """Per-share price at 4 dp: total rescaled, times the quantity scale, over units."""
    if quantity.is_zero():
        raise ValueError("cannot derive a unit price from a zero quantity")
    return (
        total.convert_precision(PRICE_PRECISION)
        .multiply(Quantity.SCALE)
        .divide(quantity.units)
    )


def proportional_cost(total_cost: Money, take: Quantity, lot_qty: Quantity) -> Money:
    """Share of a lot's cost for `take` of its `lot_qty` units (truncated)."""
    if lot_qty.is_zero():
        raise ValueError("cannot allocate cost from an empty lot")
    if take == lot_qty:
        return total_cost
    return total_cost.multiply(take.units).divide(lot_qty.units)


def realized_profit(sale_price: Money, purchase_price: Money, qty: Quantity) -> Money:
    """(sale unit price - purchase unit price) x quantity, at the price precision."""
    return (
        sale_price.subtract(purchase_price)
        .multiply(qty.units)
        .divide(Quantity.SCALE)
    )
