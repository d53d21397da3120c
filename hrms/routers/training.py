from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from hrms.db.gateway import ProcedureGateway
from hrms.db.session import get_gateway
from hrms.errors import envelope
from hrms.schemas.hr import EnrollmentIn, TrainingProgramIn

router = APIRouter(tags=["training"])

PROGRAM_FIELDS = (
    "title",
    "description",
    "trainer",
    "start_date",
    "end_date",
    "location",
    "capacity",
    "cost_per_person",
    "status",
)

ENROLLMENT_FIELDS = (
    "employee_id",
    "enrollment_date",
    "attendance_status",
    "completion_date",
    "certificate_issued",
    "feedback",
    "rating",
)


def _enrollment_params(body: EnrollmentIn) -> list[Any]:
    p = body.to_params()
    if p["certificate_issued"] is not None:
        p["certificate_issued"] = 1 if p["certificate_issued"] else 0
    return [p[f] for f in ENROLLMENT_FIELDS]


@router.get("/training")
def list_training_programs(gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    return envelope(True, data=gateway.call("sp_get_training_programs").rows())


@router.get("/training/{id}")
def get_training_program(id: str, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    return {"success": True, "data": gateway.call("sp_get_training_by_id", [id]).first()}


@router.post("/training")
def create_training_program(body: TrainingProgramIn, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    p = body.to_params()
    gateway.call("sp_create_training_program", [p["id"], *(p[f] for f in PROGRAM_FIELDS), p["created_by"]])
    return envelope(True, message="Training program created")


@router.put("/training/{id}")
def update_training_program(
    id: str,
    body: TrainingProgramIn,
    gateway: ProcedureGateway = Depends(get_gateway),
) -> dict[str, Any]:
    p = body.to_params()
    gateway.call("sp_update_training_program", [id, *(p[f] for f in PROGRAM_FIELDS)])
    return envelope(True, message="Training program updated")


@router.delete("/training/{id}")
def delete_training_program(id: str, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    gateway.call("sp_delete_training_program", [id])
    return envelope(True, message="Training program deleted")


@router.get("/training/{program_id}/enrollments")
def list_enrollments(program_id: str, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    return envelope(True, data=gateway.call("sp_get_enrollments_by_program", [program_id]).rows())


@router.post("/training/{program_id}/enrollments")
def create_enrollment(
    program_id: str,
    body: EnrollmentIn,
    gateway: ProcedureGateway = Depends(get_gateway),
) -> dict[str, Any]:
    gateway.call("sp_create_enrollment", [body.to_params()["id"], program_id, *_enrollment_params(body)])
    return envelope(True, message="Enrollment created")


@router.put("/enrollments/{id}")
def update_enrollment(id: str, body: EnrollmentIn, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    gateway.call("sp_update_enrollment", [id, *_enrollment_params(body)])
    return envelope(True, message="Enrollment updated")


@router.delete("/enrollments/{id}")
def delete_enrollment(id: str, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    gateway.call("sp_delete_enrollment", [id])
    return envelope(True, message="Enrollment deleted")
