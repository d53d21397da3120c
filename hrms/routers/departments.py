from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from hrms.db.gateway import ProcedureGateway
from hrms.db.session import get_gateway
from hrms.errors import envelope
from hrms.schemas.hr import DepartmentIn

router = APIRouter(tags=["departments"])


def _params(body: DepartmentIn) -> list[Any]:
    p = body.to_params()
    return [p["name"], p["code"], p["description"], p["head_employee_id"]]


@router.get("/departments")
def list_departments(gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    return envelope(True, data=gateway.call("sp_get_departments").rows())


@router.get("/departments/{id}")
def get_department(id: str, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    # A missing row is still a success with null data.
    return {"success": True, "data": gateway.call("sp_get_department_by_id", [id]).first()}


@router.post("/departments")
def create_department(body: DepartmentIn, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    gateway.call("sp_create_department", [body.to_params()["id"], *_params(body)])
    return envelope(True, message="Department created")


@router.put("/departments/{id}")
def update_department(id: str, body: DepartmentIn, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    gateway.call("sp_update_department", [id, *_params(body)])
    return envelope(True, message="Department updated")


@router.delete("/departments/{id}")
def delete_department(id: str, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    gateway.call("sp_delete_department", [id])
    return envelope(True, message="Department deleted")
