from __future__ import annotations

import logging
from typing import Iterable, Optional

from .events import EventRecorder
from .fifo_domain import (
    CurrencyMismatchEvent,
    InsufficientLotsEvent,
    MatchedRecord,
    PurchaseEvent,
    ReportRecord,
    SaleEvent,
)
from .positions import LotLedger
from .trade_math import realized_profit

logger = logging.getLogger(__name__)


class FifoMatcher:
    """Match sales against the oldest open purchase lots of the same security.

    All purchases are loaded (and date-sorted) before any sale is applied; the
    export's chronology across the two streams is trusted.
    """

    def __init__(
        self,
        *,
        ledger: Optional[LotLedger] = None,
        recorder: Optional[EventRecorder] = None,
    ) -> None:
        self.ledger = ledger or LotLedger()
        self.recorder = recorder or EventRecorder()

    @property
    def shortfalls(self) -> list[InsufficientLotsEvent]:
        return self.recorder.shortfalls

    @property
    def mismatches(self) -> list[CurrencyMismatchEvent]:
        return self.recorder.mismatches

    def _currency_conflict(
        self, kind: str, isin: str, ticker: str, date: str, currency: str
    ) -> bool:
        lot_currency = self.ledger.currency_of(isin)
        if lot_currency is None or lot_currency == currency:
            return False

        message = (
            f"Skipping {kind} of {ticker} ({isin}) on {date}: currency {currency} "
            f"differs from open lots in {lot_currency}."
        )
        logger.warning(message)
        self.recorder.record_mismatch(
            CurrencyMismatchEvent(
                isin=isin,
                ticker=ticker,
                date=date,
                currency=currency,
                lot_currency=lot_currency,
                message=message,
            )
        )
        return True

    def load_purchases(self, purchases: Iterable[PurchaseEvent]) -> None:
        for purchase in purchases:
            if self._currency_conflict(
                "purchase",
                purchase.isin,
                purchase.ticker,
                purchase.purchase_date,
                purchase.total_cost.currency,
            ):
                continue
            self.ledger.add_purchase(purchase.isin, purchase)
        self.ledger.sort_by_date()

    def ingest_sale(self, sale: SaleEvent) -> list[MatchedRecord]:
        if self._currency_conflict(
            "sale",
            sale.isin,
            sale.ticker,
            sale.sale_date,
            sale.unit_sale_price.currency,
        ):
            return []

        slices, qty_remaining = self.ledger.consume(sale.isin, sale.quantity)

        matched = [
            MatchedRecord(
                isin=piece.isin,
                ticker=piece.ticker,
                purchase_date=piece.purchase_date,
                sort_date=piece.sort_date,
                total_cost=piece.cost_taken,
                unit_price=piece.unit_price,
                quantity=piece.quantity_taken,
                sale_date=sale.sale_date,
                unit_sale_price=sale.unit_sale_price,
                profit=realized_profit(
                    sale.unit_sale_price, piece.unit_price, piece.quantity_taken
                ),
            )
            for piece in slices
        ]

        if qty_remaining.is_positive():
            message = (
                f"Unable to find purchase when calculating sale of {sale.ticker} "
                f"({sale.isin}) on {sale.sale_date}; {qty_remaining} of "
                f"{sale.quantity} left unmatched. Skipping."
            )
            logger.warning(message)
            self.recorder.record_shortfall(
                InsufficientLotsEvent(
                    isin=sale.isin,
                    ticker=sale.ticker,
                    date=sale.sale_date,
                    remaining_qty=qty_remaining,
                    message=message,
                )
            )
        return matched

    def run(
        self, purchases: Iterable[PurchaseEvent], sales: Iterable[SaleEvent]
    ) -> list[ReportRecord]:
        """Open lots first (ledger order), then matched slices in sale order."""
        self.recorder.clear()
        self.load_purchases(purchases)

        matched: list[MatchedRecord] = []
        for sale in sorted(sales, key=lambda s: s.sort_date):
            matched.extend(self.ingest_sale(sale))

        logger.info(
            "FIFO matching: %d matched slices, %d unmatched sale(s), "
            "%d currency mismatch(es)",
            len(matched),
            len(self.shortfalls),
            len(self.mismatches),
        )
        records: list[ReportRecord] = list(self.ledger.open_lots())
        records.extend(matched)
        return records
