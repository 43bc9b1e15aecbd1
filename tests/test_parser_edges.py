import io
import logging
from types import SimpleNamespace

from fifogains.model.nordnet import (
    NordnetExportParser,
    dedupe_header,
    sniff_delimiter,
)
from fixtures import export_row, export_text


def test_dedupe_header_keeps_first_occurrence():
    assert dedupe_header(["A", "Valuta", "B", "Valuta", "Valuta"]) == (
        "A",
        "Valuta",
        "B",
        "Valuta_1",
        "Valuta_2",
    )


def test_parse_text_maps_rows_in_export_column_order():
    row = export_row(
        "KJØPT", "Equinor", "NO0010096985", "10", "-100,00", "2020-01-01",
        ccy="USD", fee_ccy="NOK",
    )
    model, report = NordnetExportParser().parse_text("\ufeff" + export_text([row]))

    assert report.issues == []
    assert model.header[0] == "Id"
    assert model.header[13:16] == ("Valuta", "Beløp", "Valuta_1")
    assert model.header[-1] == "Valuta_4"
    (parsed,) = list(model.iter_rows())
    assert parsed.line_no == 2
    assert parsed.get("Valuta") == "NOK"
    assert parsed.get("Valuta_1") == "USD"
    assert parsed.get("Transaksjonstype") == "KJØPT"


def test_sniff_delimiter():
    assert sniff_delimiter("a\tb\tc\n1\t2\t3") == "\t"
    assert sniff_delimiter("a;b;c\n") == ";"
    assert sniff_delimiter("a,b,c") == ","
    assert sniff_delimiter("single") == "\t"


def test_semicolon_export_is_read():
    row = export_row("SALG", "Equinor", "NO0010096985", "5", "60,00", "2020-02-01")
    model, report = NordnetExportParser().parse_text(export_text([row], delimiter=";"))
    (parsed,) = list(model.iter_rows())
    assert parsed.get("Antall") == "5"
    assert parsed.get("Beløp") == "60,00"


def test_short_rows_padded_and_blank_rows_reported():
    rows = [
        ["Id", "Handelsdag", "Transaksjonstype"],
        ["1", "2020-01-01"],
        [],
        ["2", "2020-01-02", "SALG", "extra"],
    ]
    model, report = NordnetExportParser().parse_rows(rows)

    assert [r.values for r in model.rows] == [
        {"Id": "1", "Handelsdag": "2020-01-01", "Transaksjonstype": ""},
        {"Id": "2", "Handelsdag": "2020-01-02", "Transaksjonstype": "SALG"},
    ]
    messages = [(i.line_no, i.message) for i in report.issues]
    assert messages[0][0] == 2 and "padded/trimmed" in messages[0][1]
    assert messages[1] == (3, "Empty row; skipped.")
    assert messages[2][0] == 4
    assert report.has_errors is False


def test_empty_export_reports_missing_header():
    model, report = NordnetExportParser().parse_text("")
    assert model.header == ()
    assert model.rows == []
    assert "no header" in report.issues[0].message


def test_parse_file_utf16(tmp_path):
    row = export_row("KJØPT", "Equinor", "NO0010096985", "10", "-100,00", "2020-01-01")
    path = tmp_path / "transactions.csv"
    path.write_text(export_text([row]), encoding="utf-16")

    model, report = NordnetExportParser().parse_file(path)
    assert report.issues == []
    assert model.rows[0].get("Verdipapir") == "Equinor"


def test_parse_file_reads_stdin(monkeypatch):
    row = export_row("KJØPT", "Equinor", "NO0010096985", "10", "-100,00", "2020-01-01")
    data = export_text([row]).encode("utf-16")
    monkeypatch.setattr("sys.stdin", SimpleNamespace(buffer=io.BytesIO(data)))

    model, _ = NordnetExportParser().parse_file("-")
    assert model.rows[0].get("ISIN") == "NO0010096985"


def test_log_with_emits_warnings(caplog):
    rows = [["Id", "ISIN"], ["1"]]
    _, report = NordnetExportParser().parse_rows(rows)
    with caplog.at_level(logging.WARNING):
        report.log_with(logging.getLogger("test"))
    assert "WARN: line 2" in caplog.text
