from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from hrms.db.gateway import ProcedureGateway
from hrms.db.session import get_gateway
from hrms.errors import envelope
from hrms.schemas.hr import RecruitmentIn

router = APIRouter(tags=["recruitment"])

POSTING_FIELDS = (
    "job_title",
    "department_id",
    "description",
    "requirements",
    "position_type",
    "salary_range",
    "posting_date",
    "closing_date",
    "status",
    "vacancies",
)


@router.get("/recruitment")
def list_recruitments(gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    return envelope(True, data=gateway.call("sp_get_recruitments").rows())


@router.get("/recruitment/{id}")
def get_recruitment(id: str, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    return {"success": True, "data": gateway.call("sp_get_recruitment_by_id", [id]).first()}


@router.post("/recruitment")
def create_recruitment(body: RecruitmentIn, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    p = body.to_params()
    p["position_type"] = p["position_type"] or "full_time"
    gateway.call("sp_create_recruitment", [p["id"], *(p[f] for f in POSTING_FIELDS), p["created_by"]])
    return envelope(True, message="Job posting created")


@router.put("/recruitment/{id}")
def update_recruitment(id: str, body: RecruitmentIn, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    p = body.to_params()
    gateway.call("sp_update_recruitment", [id, *(p[f] for f in POSTING_FIELDS)])
    return envelope(True, message="Job posting updated")


@router.delete("/recruitment/{id}")
def delete_recruitment(id: str, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    gateway.call("sp_delete_recruitment", [id])
    return envelope(True, message="Job posting deleted")
