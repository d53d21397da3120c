from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from hrms.db.gateway import ProcedureGateway
from hrms.db.session import get_gateway
from hrms.errors import envelope
from hrms.schemas.common import OptionalPositiveInt
from hrms.schemas.hr import EvaluationIn

router = APIRouter(tags=["evaluations"])

SCORE_FIELDS = (
    "evaluator_id",
    "evaluation_period",
    "evaluation_date",
    "performance_score",
    "technical_skills",
    "communication",
    "teamwork",
    "leadership",
    "punctuality",
)


def _params(body: EvaluationIn, default_status: str | None) -> list[Any]:
    p = body.to_params()
    return [
        p["employee_id"],
        *(p[f] for f in SCORE_FIELDS),
        p["comments"] or None,
        1 if p["goals_met"] else 0,
        p["status"] or default_status,
    ]


@router.get("/evaluations")
def list_evaluations(gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    return envelope(True, data=gateway.call("sp_get_all_evaluations").rows())


@router.get("/evaluations/{id}")
def get_evaluation(id: str, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    return {"success": True, "data": gateway.call("sp_get_evaluation_by_id", [id]).first()}


@router.get("/employees/{employee_id}/evaluations")
def list_employee_evaluations(
    employee_id: str,
    status: str | None = None,
    limit: OptionalPositiveInt = None,
    gateway: ProcedureGateway = Depends(get_gateway),
) -> dict[str, Any]:
    rows = gateway.call("sp_get_evaluations_by_employee", [employee_id, status or None, limit]).rows()
    return envelope(True, data=rows)


@router.post("/evaluations")
def create_evaluation(body: EvaluationIn, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    # New evaluations start as drafts unless the caller says otherwise.
    gateway.call("sp_create_evaluation", [body.to_params()["id"], *_params(body, "draft")])
    return envelope(True, message="Evaluation created")


@router.put("/evaluations/{id}")
def update_evaluation(id: str, body: EvaluationIn, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    gateway.call("sp_update_evaluation", [id, *_params(body, None)])
    return envelope(True, message="Evaluation updated")


@router.delete("/evaluations/{id}")
def delete_evaluation(id: str, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    gateway.call("sp_delete_evaluation", [id])
    return envelope(True, message="Evaluation deleted")
