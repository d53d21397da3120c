from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse, Response

from hrms.db.gateway import ProcedureGateway
from hrms.db.session import get_gateway
from hrms.errors import envelope
from hrms.schemas.common import OptionalInt, OptionalPositiveInt
from hrms.services.reports import (
    FORMATS,
    ReportOptions,
    UnknownReportError,
    fetch_report_rows,
    render_report,
    save_report,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=envelope(False, message=message))


@router.get("/{report_name}")
def get_report(
    report_name: str,
    request: Request,
    fmt: str | None = Query(default="json", alias="format"),
    save: str | None = None,
    months: OptionalPositiveInt = None,
    limit: OptionalPositiveInt = None,
    year: OptionalInt = None,
    gateway: ProcedureGateway = Depends(get_gateway),
) -> Any:
    """
    Run one catalogue report and return it as json/csv/xlsx/pdf.

    With `save=1` (or `true`) the file is written under /public/reports and
    only its URL is returned.
    """

    fmt = fmt or "json"
    options = ReportOptions(months=months, limit=limit, year=year)
    try:
        rows = fetch_report_rows(gateway, report_name, options)
        if fmt not in FORMATS:
            return _bad_request("Unsupported format")

        content = render_report(report_name, rows, fmt)
        if save in ("1", "true"):
            reports_dir = request.app.state.settings.resolved_reports_dir()
            filename = save_report(reports_dir, report_name, fmt, content)
            base_url = str(request.base_url).rstrip("/")
            return envelope(True, url=f"{base_url}/public/reports/{filename}")
    except UnknownReportError:
        return _bad_request("Unknown report")
    except Exception as exc:
        logger.exception("Report error key=%s format=%s", report_name, fmt)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=envelope(False, error=str(exc)),
        )

    if fmt == "json":
        return envelope(True, data=rows)
    return Response(
        content=content,
        media_type=FORMATS[fmt],
        headers={"Content-Disposition": f'attachment; filename="{report_name}.{fmt}"'},
    )
