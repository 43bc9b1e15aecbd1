"""Builders for normalized transactions and raw export text.

Production code gets PurchaseEvent/SaleEvent from the normalizer; tests build
them directly so matching can be exercised without an export file.
"""

from __future__ import annotations

from decimal import Decimal

from fifogains.conv import parse_date
from fifogains.model.nordnet import dedupe_header
from fifogains.reporting.fifo_domain import PurchaseEvent, SaleEvent
from fifogains.reporting.money import Money, Quantity
from fifogains.reporting.trade_math import unit_price

EXPORT_HEADER = [
    "Id",
    "Bokføringsdag",
    "Handelsdag",
    "Oppgjørsdag",
    "Portefølje",
    "Transaksjonstype",
    "Verdipapir",
    "Type verdipapir",
    "ISIN",
    "Antall",
    "Kurs",
    "Rente",
    "Totale Avgifter",
    "Valuta",
    "Beløp",
    "Valuta",
    "Kjøpsverdi",
    "Valuta",
    "Resultat",
    "Valuta",
    "Totalt antall",
    "Saldo",
    "Vekslingskurs",
    "Transaksjonstekst",
    "Makuleringsdato",
    "Sluttseddelnummer",
    "Verifikationsnummer",
    "Kurtasje",
    "Valuta",
]


def purchase(
    isin: str, date: str, qty: str, cost: str, *, ticker: str | None = None, ccy: str = "NOK"
) -> PurchaseEvent:
    quantity = Quantity.from_decimal(Decimal(qty))
    total = Money.from_decimal(Decimal(cost), ccy)
    return PurchaseEvent(
        isin=isin,
        ticker=ticker or isin,
        quantity=quantity,
        total_cost=total,
        unit_price=unit_price(total, quantity),
        purchase_date=date,
        sort_date=parse_date(date),
    )


def sale(
    isin: str, date: str, qty: str, proceeds: str, *, ticker: str | None = None, ccy: str = "NOK"
) -> SaleEvent:
    quantity = Quantity.from_decimal(Decimal(qty))
    total = Money.from_decimal(Decimal(proceeds), ccy)
    return SaleEvent(
        isin=isin,
        ticker=ticker or isin,
        quantity=quantity,
        total_proceeds=total,
        unit_sale_price=unit_price(total, quantity),
        sale_date=date,
        sort_date=parse_date(date),
    )


def export_row(
    tx_type: str,
    name: str,
    isin: str,
    qty: str,
    amount: str,
    date: str,
    *,
    price: str = "",
    ccy: str = "NOK",
    fee_ccy: str | None = None,
    row_id: str = "1",
) -> list[str]:
    """One export line in header order; `ccy` is the currency of the Beløp amount."""
    values = {
        "Id": row_id,
        "Bokføringsdag": date,
        "Handelsdag": date,
        "Oppgjørsdag": date,
        "Portefølje": "12345678",
        "Transaksjonstype": tx_type,
        "Verdipapir": name,
        "Type verdipapir": "Aksje",
        "ISIN": isin,
        "Antall": qty,
        "Kurs": price,
        "Totale Avgifter": "0",
        "Valuta": ccy if fee_ccy is None else fee_ccy,
        "Beløp": amount,
        "Valuta_1": ccy,
        "Valuta_2": ccy,
        "Valuta_3": ccy,
        "Valuta_4": ccy,
    }
    return [values.get(column, "") for column in dedupe_header(EXPORT_HEADER)]


def export_text(rows: list[list[str]], delimiter: str = "\t") -> str:
    lines = [delimiter.join(EXPORT_HEADER)]
    lines += [delimiter.join(r) for r in rows]
    return "\n".join(lines) + "\n"
