from __future__ import annotations

from collections import deque
from typing import Iterator

from .fifo_domain import LotSlice, OpenRecord, PurchaseEvent, PurchaseLot
from .money import Quantity
from .trade_math import proportional_cost


class LotLedger:
    """Maintain FIFO purchase lots per security without matching policy concerns.

    Lots are private; callers only ever see frozen LotSlice / OpenRecord views.
    """

    def __init__(self) -> None:
        # dict keeps first-seen security order, which makes open_lots() deterministic
        self._positions: dict[str, deque[PurchaseLot]] = {}

    def add_purchase(self, isin: str, purchase: PurchaseEvent) -> None:
        if not purchase.quantity.is_positive():
            raise ValueError("purchase lot quantity must be positive")
        self._positions.setdefault(isin, deque()).append(
            PurchaseLot.from_event(purchase)
        )

    def sort_by_date(self) -> None:
        """Order each queue by purchase date; equal dates keep insertion order."""
        for isin in list(self._positions):
            lots = sorted(self._positions[isin], key=lambda lot: lot.sort_date)
            self._positions[isin] = deque(lots)

    def consume(self, isin: str, qty: Quantity) -> tuple[list[LotSlice], Quantity]:
        """Take `qty` from the oldest lots; returns the slices and the unmet remainder."""
        if not qty.is_positive():
            raise ValueError("qty to consume must be positive")

        slices: list[LotSlice] = []
        qty_remaining = qty

        lots = self._positions.get(isin)
        while qty_remaining.is_positive() and lots:
            lot = lots[0]
            take = min(qty_remaining, lot.quantity)
            cost_piece = proportional_cost(lot.total_cost, take, lot.quantity)
            slices.append(
                LotSlice(
                    isin=lot.isin,
                    ticker=lot.ticker,
                    purchase_date=lot.purchase_date,
                    sort_date=lot.sort_date,
                    unit_price=lot.unit_price,
                    quantity_taken=take,
                    cost_taken=cost_piece,
                    lot_qty_before=lot.quantity,
                )
            )

            lot.quantity = lot.quantity.subtract(take)
            lot.total_cost = lot.total_cost.subtract(cost_piece)
            qty_remaining = qty_remaining.subtract(take)

            if lot.quantity.is_zero():
                lots.popleft()

        return slices, qty_remaining

    def currency_of(self, isin: str) -> str | None:
        """Currency of the security's open lots; None when nothing is open."""
        lots = self._positions.get(isin)
        if not lots:
            return None
        return lots[0].total_cost.currency

    def has_position(self, isin: str) -> bool:
        return bool(self._positions.get(isin))

    def open_quantity(self, isin: str) -> Quantity:
        total = Quantity.zero()
        for lot in self._positions.get(isin, ()):
            total = total.add(lot.quantity)
        return total

    def open_lots(self) -> Iterator[OpenRecord]:
        for lots in self._positions.values():
            for lot in lots:
                yield OpenRecord(
                    isin=lot.isin,
                    ticker=lot.ticker,
                    purchase_date=lot.purchase_date,
                    sort_date=lot.sort_date,
                    total_cost=lot.total_cost,
                    unit_price=lot.unit_price,
                    quantity=lot.quantity,
                )
