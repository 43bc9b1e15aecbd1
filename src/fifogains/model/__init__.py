from .nordnet import (
    ExportModel,
    NordnetExportParser,
    ParseIssue,
    ParseReport,
)

__all__ = [
    "ExportModel",
    "NordnetExportParser",
    "ParseIssue",
    "ParseReport",
]
