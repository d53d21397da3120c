from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from hrms.db.gateway import ProcedureGateway
from hrms.db.session import GatewayFactory, get_gateway, get_gateway_factory
from hrms.errors import ApiError, envelope
from hrms.schemas.hr import AppointHrIn
from hrms.security.dependencies import ensure_admin, ensure_admin_or_hr
from hrms.services.dashboard import DashboardAggregator, overview

router = APIRouter(prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(ensure_admin_or_hr)])


def get_dashboard(gateway: ProcedureGateway = Depends(get_gateway)) -> DashboardAggregator:
    return DashboardAggregator(gateway)


def appoint_hr(body: AppointHrIn, dashboard: DashboardAggregator) -> dict[str, Any]:
    if not body.uid:
        raise ApiError(status.HTTP_400_BAD_REQUEST, message="uid required")
    dashboard.appoint_hr(body.uid)
    return envelope(True)


@router.get("")
async def get_overview(
    days: str | None = None,
    employee_id: str | None = None,
    factory: GatewayFactory = Depends(get_gateway_factory),
) -> dict[str, Any]:
    return envelope(True, data=await overview(factory, days, employee_id))


@router.get("/stats")
def get_stats(employee_id: str | None = None, dashboard: DashboardAggregator = Depends(get_dashboard)) -> dict[str, Any]:
    return envelope(True, data=dashboard.get_stats(employee_id))


@router.get("/upcoming")
def get_upcoming(
    days: str | None = None,
    employee_id: str | None = None,
    dashboard: DashboardAggregator = Depends(get_dashboard),
) -> dict[str, Any]:
    return envelope(True, data=dashboard.get_upcoming_events(days, employee_id))


@router.get("/notifications")
def get_notifications(
    employee_id: str | None = None,
    dashboard: DashboardAggregator = Depends(get_dashboard),
) -> dict[str, Any]:
    return envelope(True, data=dashboard.get_notifications(employee_id))


@router.get("/tasks")
def get_tasks(employee_id: str | None = None, dashboard: DashboardAggregator = Depends(get_dashboard)) -> dict[str, Any]:
    return envelope(True, data=dashboard.get_tasks(employee_id))


@router.post("/sync")
def sync_calendar(dashboard: DashboardAggregator = Depends(get_dashboard)) -> dict[str, Any]:
    dashboard.sync_calendar()
    return envelope(True)


@router.post("/appoint-hr", dependencies=[Depends(ensure_admin)])
def appoint_hr_from_dashboard(
    body: AppointHrIn,
    dashboard: DashboardAggregator = Depends(get_dashboard),
) -> dict[str, Any]:
    return appoint_hr(body, dashboard)
