from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .fifo_domain import MatchedRecord, OpenRecord, ReportRecord
from .money import MONEY_PRECISION, PRICE_PRECISION, Money, Quantity

logger = logging.getLogger(__name__)

HEADER = (
    "#",
    "ISIN",
    "Ticker",
    "Purchase date",
    "Amount",
    "Price",
    "Quantity",
    "Sale date",
    "Sale price",
    "Profit/loss",
)

_PRICE_PLACES = 3


@dataclass
class SecurityTotals:
    isin: str
    ticker: str
    currency: str
    realized: Money
    sold_quantity: Quantity = field(default_factory=Quantity.zero)
    open_quantity: Quantity = field(default_factory=Quantity.zero)
    open_cost: Money | None = None


@dataclass
class ReportBuilder:
    records: list[ReportRecord] = field(default_factory=list)

    def __post_init__(self) -> None:
        # (isin, currency) -> totals
        self.security_totals: dict[tuple[str, str], SecurityTotals] = {}
        for record in self.records:
            self._aggregate(record)

    def add_records(self, records: list[ReportRecord]) -> None:
        for record in records:
            self.records.append(record)
            self._aggregate(record)

    def _aggregate(self, record: ReportRecord) -> None:
        currency = record.unit_price.currency
        key = (record.isin, currency)
        t = self.security_totals.get(key)
        if t is None:
            t = SecurityTotals(
                isin=record.isin,
                ticker=record.ticker,
                currency=currency,
                realized=Money(0, currency, PRICE_PRECISION),
            )
            self.security_totals[key] = t
        if isinstance(record, MatchedRecord):
            t.realized = t.realized.add(record.profit)
            t.sold_quantity = t.sold_quantity.add(record.quantity)
        else:
            t.open_quantity = t.open_quantity.add(record.quantity)
            t.open_cost = (
                record.total_cost
                if t.open_cost is None
                else t.open_cost.add(record.total_cost)
            )

    def ordered(self) -> list[ReportRecord]:
        """Records by purchase date; equal dates keep their assembly order."""
        return sorted(self.records, key=lambda r: r.sort_date)

    def rows(self) -> list[list[str]]:
        return [render_row(i, record) for i, record in enumerate(self.ordered())]

    def log_summary(self, log: logging.Logger = logger) -> None:
        for t in self.security_totals.values():
            log.info(
                "%s (%s): sold %s, open %s, realized %s %s",
                t.ticker,
                t.isin,
                t.sold_quantity,
                t.open_quantity,
                t.realized.to_format(MONEY_PRECISION),
                t.currency,
            )


def render_row(index: int, record: ReportRecord) -> list[str]:
    row = [
        str(index),
        record.isin,
        record.ticker,
        record.purchase_date,
        record.total_cost.to_format(MONEY_PRECISION),
        record.unit_price.to_format(_PRICE_PLACES),
        record.quantity.to_format(),
    ]
    if isinstance(record, MatchedRecord):
        row += [
            record.sale_date,
            record.unit_sale_price.to_format(_PRICE_PLACES),
            record.profit.to_format(MONEY_PRECISION),
        ]
    elif isinstance(record, OpenRecord):
        row += ["", "", ""]
    else:
        raise TypeError(f"unsupported record type: {type(record).__name__}")
    return row
