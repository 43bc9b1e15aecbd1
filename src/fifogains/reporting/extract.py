from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from fifogains.conv import parse_date, to_dec_strict
from fifogains.model import ExportModel, ParseReport
from fifogains.model.nordnet import SourceRow

from .fifo_domain import PurchaseEvent, SaleEvent
from .money import MONEY_PRECISION, Money, Quantity
from .trade_math import unit_price

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """A transaction record with a malformed numeric, date or required field."""


class ZeroQuantityError(ParseError):
    """A purchase or sale whose quantity parses to zero."""


class TransactionKind(enum.Enum):
    PURCHASE = "purchase"
    SALE = "sale"
    IGNORED = "ignored"


@dataclass(frozen=True)
class ExportColumns:
    """Column names of the export (Norwegian Nordnet header by default)."""

    transaction_type: str = "Transaksjonstype"
    security_name: str = "Verdipapir"
    isin: str = "ISIN"
    quantity: str = "Antall"
    unit_price: str = "Kurs"
    total_amount: str = "Beløp"
    # The export repeats "Valuta" after each amount column: fees, Beløp, Kjøpsverdi,
    # Resultat, Kurtasje. The one after Beløp is read first; the fee currency is
    # the fallback.
    currency: tuple[str, ...] = ("Valuta_1", "Valuta")
    trade_date: str = "Handelsdag"

    def missing_from(self, header: tuple[str, ...]) -> list[str]:
        required = [
            self.transaction_type,
            self.security_name,
            self.isin,
            self.quantity,
            self.total_amount,
            self.trade_date,
        ]
        missing = [name for name in required if name not in header]
        if not any(name in header for name in self.currency):
            missing.append(" or ".join(self.currency))
        return missing

    def currency_of(self, row: SourceRow) -> str:
        """First non-blank currency column; "" when the row names none."""
        for name in self.currency:
            value = row.get(name).strip()
            if value:
                return value
        return ""


DEFAULT_PURCHASE_TYPES = frozenset({"KJØPT", "KJØP, BYTTE AV FOND"})
DEFAULT_SALE_TYPES = frozenset({"SALG", "SALG, BYTTE AV FOND"})


@dataclass(frozen=True)
class TransactionVocabulary:
    """Transaction-type values; matched exactly and case-sensitively."""

    purchase: frozenset[str] = DEFAULT_PURCHASE_TYPES
    sale: frozenset[str] = DEFAULT_SALE_TYPES

    def __post_init__(self) -> None:
        overlap = self.purchase & self.sale
        if overlap:
            raise ValueError(
                f"transaction types cannot be both purchase and sale: {sorted(overlap)}"
            )

    def classify(self, value: str) -> TransactionKind:
        if value in self.purchase:
            return TransactionKind.PURCHASE
        if value in self.sale:
            return TransactionKind.SALE
        return TransactionKind.IGNORED


@dataclass
class NormalizedTransactions:
    purchases: list[PurchaseEvent] = field(default_factory=list)
    sales: list[SaleEvent] = field(default_factory=list)
    ignored: int = 0
    skipped: int = 0


def normalize_row(
    row: SourceRow,
    columns: ExportColumns = ExportColumns(),
    vocabulary: TransactionVocabulary = TransactionVocabulary(),
) -> PurchaseEvent | SaleEvent | None:
    """Turn one export row into a typed purchase or sale; None for other types.

    Raises ParseError (or ZeroQuantityError) when the record cannot be used.
    """
    kind = vocabulary.classify(row.get(columns.transaction_type))
    if kind is TransactionKind.IGNORED:
        return None

    ticker = row.get(columns.security_name).strip()
    isin = row.get(columns.isin).strip()
    label = f"{kind.value} of {ticker or '?'} ({isin or 'no ISIN'})"
    if not isin:
        raise ParseError(f"{label}: missing ISIN")

    currency = columns.currency_of(row)
    if not currency:
        logger.debug("%s: no currency given (line %d)", label, row.line_no)

    qty_s = row.get(columns.quantity)
    try:
        quantity = Quantity.from_decimal(to_dec_strict(qty_s))
    except ValueError as e:
        raise ParseError(f"{label}: invalid quantity {qty_s!r}") from e
    if quantity.is_zero():
        raise ZeroQuantityError(f"{label}: quantity {qty_s!r} is zero")

    amount_s = row.get(columns.total_amount)
    try:
        total = Money.from_decimal(to_dec_strict(amount_s), currency, MONEY_PRECISION)
    except ValueError as e:
        raise ParseError(f"{label}: invalid amount {amount_s!r}") from e

    date_s = row.get(columns.trade_date).strip()
    try:
        sort_date = parse_date(date_s)
    except ValueError as e:
        raise ParseError(f"{label}: invalid trade date {date_s!r}") from e

    price = unit_price(total, quantity)
    if kind is TransactionKind.PURCHASE:
        return PurchaseEvent(
            isin=isin,
            ticker=ticker,
            quantity=quantity,
            total_cost=total,
            unit_price=price,
            purchase_date=date_s,
            sort_date=sort_date,
        )
    return SaleEvent(
        isin=isin,
        ticker=ticker,
        quantity=quantity,
        total_proceeds=total,
        unit_sale_price=price,
        sale_date=date_s,
        sort_date=sort_date,
    )


def parse_transactions(
    model: ExportModel,
    columns: ExportColumns = ExportColumns(),
    vocabulary: TransactionVocabulary = TransactionVocabulary(),
) -> tuple[NormalizedTransactions, ParseReport]:
    """Normalize every row of the export; unusable records are reported and skipped."""
    report = ParseReport()
    out = NormalizedTransactions()

    missing = columns.missing_from(model.header)
    if missing:
        report.error(0, f"Export header lacks required column(s): {', '.join(missing)}")
        return out, report

    for row in model.iter_rows():
        try:
            tx = normalize_row(row, columns, vocabulary)
        except ParseError as e:
            report.error(row.line_no, f"Skipping record: {e}")
            out.skipped += 1
            continue

        if tx is None:
            out.ignored += 1
        elif isinstance(tx, PurchaseEvent):
            out.purchases.append(tx)
        else:
            out.sales.append(tx)

    logger.debug(
        "Normalized %d purchases, %d sales; %d ignored, %d skipped",
        len(out.purchases),
        len(out.sales),
        out.ignored,
        out.skipped,
    )
    return out, report
