from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from hrms.db.gateway import ProcedureGateway
from hrms.db.session import get_gateway
from hrms.errors import envelope
from hrms.schemas.hr import EmployeeIn

router = APIRouter(tags=["employees"])

EMPLOYEE_FIELDS = (
    "user_id",
    "employee_number",
    "first_name",
    "last_name",
    "email",
    "phone",
    "department_id",
    "position",
    "hire_date",
    "employment_status",
    "salary",
    "photo_url",
)


def _params(body: EmployeeIn) -> list[Any]:
    p = body.to_params()
    return [p[f] for f in EMPLOYEE_FIELDS]


@router.get("/employees")
def list_employees(gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    return envelope(True, data=gateway.call("sp_get_employees").rows())


@router.get("/min-employees")
def list_employees_min(gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    """Id and display name only, for pickers."""
    return envelope(True, data=gateway.call("sp_get_employees_min_details").rows())


@router.get("/employees/{id}")
def get_employee(id: str, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    return {"success": True, "data": gateway.call("sp_get_employee_by_id", [id]).first()}


@router.post("/employees")
def create_employee(body: EmployeeIn, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    gateway.call("sp_insert_employee", [body.to_params()["id"], *_params(body)])
    return envelope(True, message="Employee created")


@router.put("/employees/{id}")
def update_employee(id: str, body: EmployeeIn, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    gateway.call("sp_update_employee", [id, *_params(body)])
    return envelope(True, message="Employee updated")


@router.delete("/employees/{id}")
def delete_employee(id: str, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    gateway.call("sp_delete_employee", [id])
    return envelope(True, message="Employee deleted")
