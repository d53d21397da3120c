"""
Report generation: one fixed `sp_report_*` call per report key, then a
formatter per output type.

JSON and CSV are produced with the standard library; XLSX goes through a
pandas DataFrame written by openpyxl, and PDF is an HTML page rendered with
jinja2 and converted by xhtml2pdf.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

import pandas as pd
from jinja2 import Template
from xhtml2pdf import pisa

from hrms.db.gateway import ProcedureGateway, Row

logger = logging.getLogger(__name__)

NO_DATA = "No data"

FORMATS: dict[str, str] = {
    "json": "application/json",
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
}


class UnknownReportError(LookupError):
    pass


class UnsupportedFormatError(ValueError):
    pass


class ReportFormattingError(RuntimeError):
    pass


@dataclass(frozen=True)
class ReportOptions:
    months: int | None = None
    limit: int | None = None
    year: int | None = None


@dataclass(frozen=True)
class ReportDefinition:
    procedure: str
    params: Callable[[ReportOptions], list[Any]] = lambda options: []


REPORTS: dict[str, ReportDefinition] = {
    "employee_directory": ReportDefinition("sp_report_employee_directory"),
    "department_distribution": ReportDefinition("sp_report_department_distribution"),
    "employment_status": ReportDefinition("sp_report_employment_status"),
    "new_hires": ReportDefinition("sp_report_new_hires", lambda o: [o.months or 12]),
    "evaluation_summary": ReportDefinition("sp_report_evaluation_summary"),
    "top_performers": ReportDefinition("sp_report_top_performers", lambda o: [o.limit or 10]),
    "performance_trends": ReportDefinition(
        "sp_report_performance_trends", lambda o: [o.year or date.today().year]
    ),
    "open_positions": ReportDefinition("sp_report_open_positions"),
    "application_pipeline": ReportDefinition("sp_report_application_pipeline"),
}


def fetch_report_rows(gateway: ProcedureGateway, key: str, options: ReportOptions | None = None) -> list[Row]:
    definition = REPORTS.get(key)
    if definition is None:
        raise UnknownReportError(key)
    return gateway.call(definition.procedure, definition.params(options or ReportOptions())).rows()


def _columns(rows: list[Row]) -> list[str]:
    return list(rows[0].keys())


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def rows_to_json(rows: list[Row]) -> str:
    return json.dumps(rows, indent=2, default=str)


def rows_to_csv(rows: list[Row]) -> str:
    """Header of bare column names, then one fully quoted line per row."""
    if not rows:
        return ""

    columns = _columns(rows)
    buffer = io.StringIO()
    buffer.write(",".join(columns) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for row in rows:
        writer.writerow([_cell(row.get(c)) for c in columns])
    return buffer.getvalue().rstrip("\n")


def rows_to_xlsx(rows: list[Row], sheet_name: str = "Report") -> bytes:
    if rows:
        df = pd.DataFrame(rows, columns=_columns(rows))
        header = True
    else:
        df = pd.DataFrame([[NO_DATA]])
        header = False

    output = io.BytesIO()
    # Excel caps sheet names at 31 characters.
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, header=header, sheet_name=sheet_name[:31])
    return output.getvalue()


_PDF_TEMPLATE = Template(
    """<html>
<head><style>
body { font-family: Helvetica; font-size: 10pt; }
h1 { font-size: 14pt; }
p { margin: 0; }
</style></head>
<body>
<h1>{{ title }}</h1>
{% if header %}
<p><strong>{{ header }}</strong></p>
{% for line in lines %}<p>{{ line }}</p>
{% endfor %}
{% else %}
<p>{{ no_data }}</p>
{% endif %}
</body>
</html>"""
)


def rows_to_pdf(rows: list[Row], title: str = "Report") -> bytes:
    header = ""
    lines: list[str] = []
    if rows:
        columns = _columns(rows)
        header = " | ".join(c.upper() for c in columns)
        lines = [" | ".join(_cell(row.get(c)) for c in columns) for row in rows]

    html = _PDF_TEMPLATE.render(title=title, header=header, lines=lines, no_data=NO_DATA)
    result = io.BytesIO()
    status = pisa.CreatePDF(io.StringIO(html), dest=result)
    if status.err:
        raise ReportFormattingError(f"PDF rendering failed with {status.err} error(s)")
    return result.getvalue()


def render_report(key: str, rows: list[Row], fmt: str) -> str | bytes:
    if fmt == "json":
        return rows_to_json(rows)
    if fmt == "csv":
        return rows_to_csv(rows)
    if fmt == "xlsx":
        return rows_to_xlsx(rows, sheet_name=key)
    if fmt == "pdf":
        return rows_to_pdf(rows, title=key.replace("_", " "))
    raise UnsupportedFormatError(fmt)


def save_report(directory: Path, key: str, fmt: str, content: str | bytes) -> str:
    """Write the rendered report as `<key>_<epoch ms>.<ext>`; returns the file name."""
    directory.mkdir(parents=True, exist_ok=True)
    filename = f"{key}_{int(time.time() * 1000)}.{fmt}"
    path = directory / filename
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    logger.info("Saved report key=%s file=%s", key, filename)
    return filename
