"""Tests for report lookup and the csv/xlsx/pdf/json formatters."""

import io
import json
from datetime import date

import pytest
from openpyxl import load_workbook

from hrms.db.gateway import ProcedureResult
from hrms.services.reports import (
    REPORTS,
    ReportOptions,
    UnknownReportError,
    UnsupportedFormatError,
    fetch_report_rows,
    render_report,
    rows_to_csv,
    rows_to_pdf,
    rows_to_xlsx,
    save_report,
)

ROWS = [
    {"name": 'Ada "The Countess"', "department": "R&D", "score": 91},
    {"name": "Grace", "department": None, "score": 88},
]


class RecordingGateway:
    def __init__(self, rows=()):
        self.rows = list(rows)
        self.calls = []

    def call(self, name, params=()):
        self.calls.append((name, list(params)))
        return ProcedureResult.of(self.rows)


def test_catalogue_maps_each_key_to_its_procedure():
    assert len(REPORTS) == 9
    for key, definition in REPORTS.items():
        assert definition.procedure == f"sp_report_{key}"


def test_parameter_defaults():
    gateway = RecordingGateway()
    fetch_report_rows(gateway, "new_hires")
    fetch_report_rows(gateway, "top_performers", ReportOptions(limit=3))
    fetch_report_rows(gateway, "performance_trends")
    fetch_report_rows(gateway, "open_positions")
    assert gateway.calls == [
        ("sp_report_new_hires", [12]),
        ("sp_report_top_performers", [3]),
        ("sp_report_performance_trends", [date.today().year]),
        ("sp_report_open_positions", []),
    ]


def test_unknown_report():
    with pytest.raises(UnknownReportError):
        fetch_report_rows(RecordingGateway(), "salaries")


def test_csv_quotes_every_value():
    assert rows_to_csv(ROWS) == (
        "name,department,score\n"
        '"Ada ""The Countess""","R&D","91"\n'
        '"Grace","","88"'
    )


def test_csv_zero_rows_is_empty_string():
    assert rows_to_csv([]) == ""


def test_xlsx_header_and_rows():
    sheet = load_workbook(io.BytesIO(rows_to_xlsx(ROWS, "top_performers"))).active
    values = list(sheet.iter_rows(values_only=True))
    assert values[0] == ("name", "department", "score")
    assert values[1][0] == 'Ada "The Countess"'
    assert len(values) == 3


def test_xlsx_zero_rows_has_no_data_cell():
    sheet = load_workbook(io.BytesIO(rows_to_xlsx([]))).active
    assert list(sheet.iter_rows(values_only=True)) == [("No data",)]


def test_pdf_is_a_pdf_document():
    assert rows_to_pdf(ROWS, "top performers").startswith(b"%PDF")
    assert rows_to_pdf([]).startswith(b"%PDF")


def test_render_json_and_unsupported():
    assert json.loads(render_report("employee_directory", ROWS, "json"))[1]["name"] == "Grace"
    with pytest.raises(UnsupportedFormatError):
        render_report("employee_directory", ROWS, "docx")


def test_save_report_names_file_by_key_and_timestamp(tmp_path):
    filename = save_report(tmp_path / "reports", "open_positions", "csv", "a,b")
    assert filename.startswith("open_positions_")
    assert filename.endswith(".csv")
    assert (tmp_path / "reports" / filename).read_text(encoding="utf-8") == "a,b"
