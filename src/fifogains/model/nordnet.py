from __future__ import annotations

import csv
import io
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Literal, Sequence

RowDict = dict[str, str]

DEFAULT_ENCODING = "utf-16"
_CANDIDATE_DELIMITERS = "\t;,"


@dataclass(frozen=True)
class SourceRow:
    """A data row mapped onto the export header, with its 1-based line number."""

    line_no: int
    values: RowDict

    def get(self, column: str, default: str = "") -> str:
        return self.values.get(column, default)


@dataclass
class ExportModel:
    """
    In-memory representation of a transaction export: one header, many rows.
    """

    header: tuple[str, ...] = ()
    rows: list[SourceRow] = field(default_factory=list)

    def iter_rows(self) -> Iterator[SourceRow]:
        yield from self.rows


@dataclass(frozen=True)
class ParseIssue:
    line_no: int
    severity: Literal["warning", "error"]
    message: str
    row_preview: Sequence[str] | None = None


@dataclass
class ParseReport:
    """Non-fatal diagnostics collected while reading and normalizing."""

    issues: list[ParseIssue] = field(default_factory=list)

    def warn(self, line_no: int, msg: str, row: Sequence[str] | None = None) -> None:
        self.issues.append(ParseIssue(line_no, "warning", msg, row))

    def error(self, line_no: int, msg: str, row: Sequence[str] | None = None) -> None:
        self.issues.append(ParseIssue(line_no, "error", msg, row))

    @property
    def has_errors(self) -> bool:
        return any(i.severity == "error" for i in self.issues)

    def extend(self, other: ParseReport) -> None:
        self.issues.extend(other.issues)

    def log_with(self, log: logging.Logger) -> None:
        for i in self.issues:
            prefix = "ERROR" if i.severity == "error" else "WARN"
            if i.row_preview is not None:
                log.warning(
                    "%s: line %d: %s | row=%s",
                    prefix,
                    i.line_no,
                    i.message,
                    i.row_preview,
                )
            else:
                log.warning("%s: line %d: %s", prefix, i.line_no, i.message)


class NordnetExportParser:
    """
    Maps the raw export text -> ExportModel (+ ParseReport).

    Export shape (observed): UTF-16 with BOM, tab separated, first row is the
    header. Some column names repeat (e.g. "Valuta" after each amount column).
    """

    def parse_file(
        self, path: str | Path, *, encoding: str = DEFAULT_ENCODING
    ) -> tuple[ExportModel, ParseReport]:
        if str(path) == "-":
            return self.parse_text(read_stdin(encoding))
        with open(path, "r", encoding=encoding, errors="replace", newline="") as fp:
            return self.parse_text(fp.read())

    def parse_text(self, content: str) -> tuple[ExportModel, ParseReport]:
        content = content.lstrip("\ufeff")
        delimiter = sniff_delimiter(content)
        reader = csv.reader(io.StringIO(content, newline=""), delimiter=delimiter)
        return self.parse_rows(reader)

    def parse_rows(
        self, rows: Iterable[Sequence[str]]
    ) -> tuple[ExportModel, ParseReport]:
        report = ParseReport()
        model = ExportModel()
        header: tuple[str, ...] | None = None
        line_no = 0

        for row in rows:
            line_no += 1

            if not row or all(not cell.strip() for cell in row):
                # Trailing newline at EOF is normal; only mention it in the middle.
                if header is not None:
                    report.warn(line_no, "Empty row; skipped.")
                continue

            if header is None:
                header = dedupe_header(cell.strip() for cell in row)
                model.header = header
                continue

            if len(row) != len(header):
                report.warn(
                    line_no,
                    f"Row has {len(row)} cells, header has {len(header)}; "
                    "padded/trimmed to header.",
                    row,
                )
            model.rows.append(SourceRow(line_no, _map_row_to_header(row, header)))

        if header is None:
            report.warn(line_no, "Export contains no header row.")
        return model, report


def read_stdin(encoding: str = DEFAULT_ENCODING) -> str:
    """Blocking read of the whole standard input stream."""
    return sys.stdin.buffer.read().decode(encoding, errors="replace")


def sniff_delimiter(content: str) -> str:
    first_line = content.split("\n", 1)[0]
    try:
        return csv.Sniffer().sniff(first_line, delimiters=_CANDIDATE_DELIMITERS).delimiter
    except csv.Error:
        return "\t"


def dedupe_header(names: Iterable[str]) -> tuple[str, ...]:
    """Keep the first occurrence of a name; suffix repeats with _1, _2, ..."""
    seen: dict[str, int] = {}
    out: list[str] = []
    for name in names:
        count = seen.get(name, 0)
        out.append(name if count == 0 else f"{name}_{count}")
        seen[name] = count + 1
    return tuple(out)


def _map_row_to_header(data_vals: Sequence[str], header: Sequence[str]) -> RowDict:
    """Pad/trim data to header length and zip to a row dict."""
    hlen = len(header)
    if len(data_vals) < hlen:
        vals = list(data_vals) + [""] * (hlen - len(data_vals))
    else:
        vals = list(data_vals[:hlen])
    return dict(zip(header, vals))
