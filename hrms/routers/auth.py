from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from hrms.db.gateway import ProcedureGateway
from hrms.db.session import GatewayFactory, get_gateway, get_gateway_factory
from hrms.errors import envelope
from hrms.firebase_auth import IdentityContext
from hrms.schemas.hr import RegistrationIn
from hrms.security.dependencies import get_current_user, get_role_resolver, resolve_request_role
from hrms.security.rate_limit import rate_limit
from hrms.security.roles import RoleResolver

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", dependencies=[Depends(rate_limit("auth"))])
def register(body: RegistrationIn, gateway: ProcedureGateway = Depends(get_gateway)) -> dict[str, Any]:
    p = body.to_params()
    gateway.call("sp_register", [p["name"], p["email"], p["uid"], p["displayPicture"], p["role"]])
    return envelope(True, message="User registered successfully")


@router.get("/me")
def me(
    request: Request,
    user: IdentityContext = Depends(get_current_user),
    factory: GatewayFactory = Depends(get_gateway_factory),
    resolver: RoleResolver = Depends(get_role_resolver),
) -> dict[str, Any]:
    """The verified identity plus the role the server resolves for it."""
    role = resolve_request_role(request, factory, resolver)
    return envelope(True, data={**user.to_dict(), "role": role})
