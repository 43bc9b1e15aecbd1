from .extract import (
    ExportColumns,
    NormalizedTransactions,
    ParseError,
    TransactionKind,
    TransactionVocabulary,
    ZeroQuantityError,
    normalize_row,
    parse_transactions,
)
from .fifo import FifoMatcher
from .fifo_domain import MatchedRecord, OpenRecord, PurchaseEvent, SaleEvent
from .money import Money, Quantity
from .positions import LotLedger
from .report_builder import HEADER, ReportBuilder
from .report_sink import CsvReportSink, ExcelReportSink, ReportSink, sink_for

__all__ = [
    "ExportColumns",
    "NormalizedTransactions",
    "ParseError",
    "TransactionKind",
    "TransactionVocabulary",
    "ZeroQuantityError",
    "normalize_row",
    "parse_transactions",
    "FifoMatcher",
    "MatchedRecord",
    "OpenRecord",
    "PurchaseEvent",
    "SaleEvent",
    "Money",
    "Quantity",
    "LotLedger",
    "HEADER",
    "ReportBuilder",
    "CsvReportSink",
    "ExcelReportSink",
    "ReportSink",
    "sink_for",
]
