from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from hrms.db.gateway import ProcedureGateway
from hrms.db.session import get_gateway
from hrms.errors import envelope
from hrms.routers.dashboard import appoint_hr, get_dashboard
from hrms.schemas.hr import AppointHrIn
from hrms.security.dependencies import ensure_admin
from hrms.services.dashboard import DashboardAggregator

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(ensure_admin)])


@router.get("/users")
def list_users(gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    return envelope(True, data=gateway.call("sp_list_users").rows())


@router.post("/appoint-hr")
def appoint_hr_from_admin(
    body: AppointHrIn,
    dashboard: DashboardAggregator = Depends(get_dashboard),
) -> dict[str, Any]:
    return appoint_hr(body, dashboard)
