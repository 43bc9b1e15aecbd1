from __future__ import annotations

import csv
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TextIO

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from .fifo_domain import MatchedRecord
from .money import MONEY_PRECISION
from .report_builder import HEADER, ReportBuilder


class ReportSink(Protocol):
    def write(self, report: ReportBuilder) -> Path | None:  # written file path, if any
        ...


@dataclass
class CsvReportSink:
    """Every field double-quoted, one row per record; stdout when no path is given."""

    out_path: Path | None = None
    stream: TextIO | None = None

    def write(self, report: ReportBuilder) -> Path | None:
        if self.out_path is not None:
            with open(self.out_path, "w", encoding="utf-8", newline="") as fp:
                self._write_rows(fp, report)
            return Path(self.out_path)
        self._write_rows(self.stream or sys.stdout, report)
        return None

    @staticmethod
    def _write_rows(fp: TextIO, report: ReportBuilder) -> None:
        writer = csv.writer(fp, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(HEADER)
        writer.writerows(report.rows())


@dataclass
class ExcelReportSink:
    out_path: Path

    def write(self, report: ReportBuilder) -> Path:
        out_path = Path(self.out_path)
        wb = Workbook()

        # Remove the default sheet
        ws_default = wb.active
        wb.remove(ws_default)

        money_fmt = "#,##0.00"
        price_fmt = "#,##0.000"
        qty_fmt = "0.0000"

        # Lot sheet (same layout as the CSV, numeric cells)
        ws = wb.create_sheet(title="Lots")
        ws.append(list(HEADER))
        for i, record in enumerate(report.ordered()):
            row = [
                i,
                record.isin,
                record.ticker,
                record.purchase_date,
                float(record.total_cost.to_decimal()),
                float(record.unit_price.to_decimal()),
                float(record.quantity.to_decimal()),
            ]
            if isinstance(record, MatchedRecord):
                row += [
                    record.sale_date,
                    float(record.unit_sale_price.to_decimal()),
                    float(record.profit.to_format(MONEY_PRECISION)),
                ]
            else:
                row += [None, None, None]
            ws.append(row)
            r = ws.max_row
            ws.cell(row=r, column=5).number_format = money_fmt
            ws.cell(row=r, column=6).number_format = price_fmt
            ws.cell(row=r, column=7).number_format = qty_fmt
            ws.cell(row=r, column=9).number_format = price_fmt
            ws.cell(row=r, column=10).number_format = money_fmt

        # Per-security summary
        ws = wb.create_sheet(title="Per Security Summary")
        ws.append(
            [
                "ISIN",
                "Ticker",
                "Currency",
                "Quantity sold",
                "Realized profit/loss",
                "Open quantity",
                "Open cost",
            ]
        )
        for t in sorted(report.security_totals.values(), key=lambda t: (t.isin, t.currency)):
            ws.append(
                [
                    t.isin,
                    t.ticker,
                    t.currency,
                    float(t.sold_quantity.to_decimal()),
                    float(t.realized.to_format(MONEY_PRECISION)),
                    float(t.open_quantity.to_decimal()),
                    None if t.open_cost is None else float(t.open_cost.to_decimal()),
                ]
            )
            r = ws.max_row
            ws.cell(row=r, column=4).number_format = qty_fmt
            ws.cell(row=r, column=5).number_format = money_fmt
            ws.cell(row=r, column=6).number_format = qty_fmt
            ws.cell(row=r, column=7).number_format = money_fmt

        for sheet in wb.worksheets:
            for col in range(1, sheet.max_column + 1):
                sheet.column_dimensions[get_column_letter(col)].width = 16

        out_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(out_path)
        return out_path


def sink_for(out_path: str | None, stream: TextIO | None = None) -> ReportSink:
    """Pick an output sink from the requested path (.xlsx -> workbook, else CSV)."""
    if out_path is None or out_path == "-":
        return CsvReportSink(stream=stream)
    path = Path(out_path)
    if path.suffix.lower() == ".xlsx":
        return ExcelReportSink(out_path=path)
    return CsvReportSink(out_path=path)
