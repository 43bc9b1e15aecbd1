from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Union

from .money import Money, Quantity


@dataclass(frozen=True)
class PurchaseEvent:
    isin: str
    ticker: str
    quantity: Quantity
    total_cost: Money
    unit_price: Money
    purchase_date: str  # as written in the export
    sort_date: dt.date


@dataclass
class PurchaseLot:
    isin: str
    ticker: str
    quantity: Quantity  # remaining quantity in lot
    unit_price: Money  # 4 dp, fixed at purchase
    total_cost: Money  # remaining cost; reduced by allocated slices only
    purchase_date: str
    sort_date: dt.date

    @classmethod
    def from_event(cls, event: PurchaseEvent) -> PurchaseLot:
        return cls(
            isin=event.isin,
            ticker=event.ticker,
            quantity=event.quantity,
            unit_price=event.unit_price,
            total_cost=event.total_cost,
            purchase_date=event.purchase_date,
            sort_date=event.sort_date,
        )


@dataclass(frozen=True)
class SaleEvent:
    isin: str
    ticker: str
    quantity: Quantity
    total_proceeds: Money
    unit_sale_price: Money
    sale_date: str
    sort_date: dt.date


@dataclass(frozen=True)
class LotSlice:
    """Part of a purchase lot handed out by the ledger for one sale."""

    isin: str
    ticker: str
    purchase_date: str
    sort_date: dt.date
    unit_price: Money
    quantity_taken: Quantity
    cost_taken: Money
    lot_qty_before: Quantity


@dataclass(frozen=True)
class OpenRecord:
    """A purchase lot (or its remainder) that no sale has consumed."""

    isin: str
    ticker: str
    purchase_date: str
    sort_date: dt.date
    total_cost: Money
    unit_price: Money
    quantity: Quantity


@dataclass(frozen=True)
class MatchedRecord:
    """A purchase-lot slice paired with the sale that consumed it."""

    isin: str
    ticker: str
    purchase_date: str
    sort_date: dt.date
    total_cost: Money
    unit_price: Money
    quantity: Quantity
    sale_date: str
    unit_sale_price: Money
    profit: Money


ReportRecord = Union[OpenRecord, MatchedRecord]


@dataclass(frozen=True)
class InsufficientLotsEvent:
    isin: str
    ticker: str
    date: str
    remaining_qty: Quantity
    message: str


@dataclass(frozen=True)
class CurrencyMismatchEvent:
    """A purchase or sale whose currency differs from the security's open lots."""

    isin: str
    ticker: str
    date: str
    currency: str
    lot_currency: str
    message: str
