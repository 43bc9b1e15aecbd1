"""
Read a Nordnet transaction export and produce a FIFO realized-gain report:
every purchase lot, split by the sales that consumed it, with cost, unit
prices and profit/loss per slice.

This module acts as the CLI orchestrator, delegating responsibilities to SRP modules:
- Reading the export: fifogains.model
- Normalizing transactions: fifogains.reporting.extract
- FIFO matching: fifogains.reporting.fifo
- Output writing: fifogains.reporting.report_builder / report_sink

Usage
-----
    # Nordnet exports are UTF-16; the report goes to stdout
    fifogains transactions.csv > report.csv

    # Read stdin, write an Excel workbook instead
    fifogains --output report.xlsx < transactions.csv

Diagnostics (skipped records, sales without enough purchases) are logged to
stderr and never mixed into the report.
"""

from __future__ import annotations

import argparse
import logging
from decimal import ROUND_HALF_UP, getcontext

from fifogains.logging import configure_logging
from fifogains.model import NordnetExportParser
from fifogains.model.nordnet import DEFAULT_ENCODING
from fifogains.reporting import (
    ExportColumns,
    FifoMatcher,
    ReportBuilder,
    TransactionVocabulary,
    parse_transactions,
    sink_for,
)
from fifogains.reporting.extract import DEFAULT_PURCHASE_TYPES, DEFAULT_SALE_TYPES

# Monetary precision and rounding
getcontext().prec = 28
getcontext().rounding = ROUND_HALF_UP


def vocabulary_from_args(args: argparse.Namespace) -> TransactionVocabulary:
    purchase = frozenset(args.purchase_type) if args.purchase_type else DEFAULT_PURCHASE_TYPES
    sale = frozenset(args.sale_type) if args.sale_type else DEFAULT_SALE_TYPES
    return TransactionVocabulary(purchase=purchase, sale=sale)


def process_files(args: argparse.Namespace) -> None:
    logger = logging.getLogger(__name__)

    source = "stdin" if args.input == "-" else args.input
    logger.info("Reading %s (%s)", source, args.encoding)

    parser = NordnetExportParser()
    model, report = parser.parse_file(args.input, encoding=args.encoding)
    logger.debug("Parsed %d rows, header: %s", len(model.rows), model.header)

    transactions, normalize_report = parse_transactions(
        model, ExportColumns(), vocabulary_from_args(args)
    )
    report.extend(normalize_report)
    report.log_with(logger)

    logger.info(
        "Extracted: %d purchases, %d sales (%d other rows ignored, %d skipped)",
        len(transactions.purchases),
        len(transactions.sales),
        transactions.ignored,
        transactions.skipped,
    )

    matcher = FifoMatcher()
    records = matcher.run(transactions.purchases, transactions.sales)

    rb = ReportBuilder()
    rb.add_records(records)
    rb.log_summary(logger)

    sink = sink_for(args.output)
    out_path = sink.write(rb)
    if out_path is not None:
        logger.info("Wrote report to %s", out_path)

    if args.strict and (
        report.has_errors or matcher.shortfalls or matcher.mismatches
    ):
        logger.error(
            "Encountered %d skipped record(s), %d unmatched sale(s) and "
            "%d currency mismatch(es).",
            transactions.skipped,
            len(matcher.shortfalls),
            len(matcher.mismatches),
        )
        raise SystemExit(2)


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="FIFO realized-gain report from a Nordnet transaction export"
    )
    p.add_argument(
        "input",
        type=str,
        nargs="?",
        default="-",
        help="Transaction export path; '-' or omitted reads stdin",
    )
    p.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output filename (.csv or .xlsx). If omitted, the CSV goes to stdout",
    )
    p.add_argument(
        "--encoding",
        type=str,
        default=DEFAULT_ENCODING,
        help=f"Text encoding of the export (default: {DEFAULT_ENCODING})",
    )
    p.add_argument(
        "--purchase-type",
        action="append",
        default=None,
        metavar="TYPE",
        help="Transaction type treated as a purchase (repeatable; replaces defaults)",
    )
    p.add_argument(
        "--sale-type",
        action="append",
        default=None,
        metavar="TYPE",
        help="Transaction type treated as a sale (repeatable; replaces defaults)",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 when records were skipped or sales left unmatched",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity: -v (INFO), -vv (DEBUG)",
    )
    return p


def main(argv: list[str] | None = None) -> None:
    parser = build_argparser()
    args = parser.parse_args(argv)

    # Configure logging based on verbosity
    verbosity_map = {
        0: logging.WARNING,  # Default: quiet
        1: logging.INFO,  # -v: informational
        2: logging.DEBUG,  # -vv and above: debug
    }
    level = verbosity_map.get(min(args.verbose, 2), logging.WARNING)
    configure_logging(level=level)

    process_files(args)


if __name__ == "__main__":
    main()
