from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from hrms.db.gateway import ProcedureGateway
from hrms.db.session import get_gateway
from hrms.errors import envelope
from hrms.schemas.hr import ApplicationIn, ApplicationStatusIn

router = APIRouter(tags=["applications"])


@router.get("/recruitment/{recruitment_id}/applications")
def list_applications(recruitment_id: str, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    return envelope(True, data=gateway.call("sp_get_applications_by_recruitment", [recruitment_id]).rows())


@router.post("/recruitment/{recruitment_id}/applications")
def create_application(
    recruitment_id: str,
    body: ApplicationIn,
    gateway: ProcedureGateway = Depends(get_gateway),
) -> dict[str, Any]:
    p = body.to_params()
    gateway.call(
        "sp_add_application",
        [
            p["id"],
            # The posting in the URL wins over whatever the form sent.
            recruitment_id,
            p["applicant_name"],
            p["applicant_email"],
            p["applicant_phone"],
            p["resume_url"],
            p["cover_letter"],
            p["application_date"],
        ],
    )
    return envelope(True, message="Application submitted")


@router.get("/applications/{id}")
def get_application(id: str, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    return {"success": True, "data": gateway.call("sp_get_application_by_id", [id]).first()}


@router.put("/applications/{id}")
def update_application_status(
    id: str,
    body: ApplicationStatusIn,
    gateway: ProcedureGateway = Depends(get_gateway),
) -> dict[str, Any]:
    gateway.call("sp_update_application_status", [id, body.status])
    return envelope(True, message="Application updated")
