from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from fastapi import Depends, Request, status

from hrms.db.session import GatewayFactory, get_gateway_factory
from hrms.errors import ApiError
from hrms.firebase_auth import IdentityContext, TokenVerifier
from hrms.security.auth import authenticate_request
from hrms.security.config import SecurityConfig
from hrms.security.context import ADMIN_OR_HR_ROLES, ADMIN_ROLES, AuthzContext
from hrms.security.roles import RoleResolver

logger = logging.getLogger(__name__)


def get_security_config(request: Request) -> SecurityConfig:
    config = getattr(request.app.state, "security_config", None)
    if config is None:
        raise RuntimeError("Security config not loaded. Did app startup run?")
    return config


def get_token_verifier(request: Request) -> TokenVerifier | None:
    return getattr(request.app.state, "token_verifier", None)


def get_role_resolver(request: Request) -> RoleResolver:
    resolver = getattr(request.app.state, "role_resolver", None)
    if resolver is None:
        raise RuntimeError("Role resolver not configured. Did app startup run?")
    return resolver


def get_current_user(request: Request) -> IdentityContext:
    user = getattr(request.state, "user", None)
    if user is None:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, error="Authentication required")
    return user


def _authenticate(request: Request, config: SecurityConfig, verifier: TokenVerifier | None) -> IdentityContext:
    if verifier is None:
        logger.error("Token verifier not configured (set HRMS_FIREBASE_PROJECT_ID)")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, error="Authentication is not configured")
    return authenticate_request(request, config, verifier)


def resolve_request_role(request: Request, factory: GatewayFactory, resolver: RoleResolver) -> str | None:
    """
    Resolve the caller's role once per request; later gates reuse the answer.
    """

    if getattr(request.state, "role_resolved", False):
        return request.state.role

    user = getattr(request.state, "user", None)
    identifier = user.identifier if user is not None else None
    if not identifier:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, error="Not authenticated")

    try:
        with factory() as gateway:
            role = resolver.resolve(gateway, identifier)
    except Exception as exc:
        logger.error("Role check failed path=%s error=%s", request.url.path, exc)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, error="Role check failed") from exc

    request.state.role = role
    request.state.role_resolved = True
    return role


def _check_roles(
    request: Request,
    allowed: frozenset[str],
    factory: GatewayFactory,
    resolver: RoleResolver,
    denied_message: str = "Access denied",
) -> AuthzContext:
    role = resolve_request_role(request, factory, resolver)
    user: IdentityContext = request.state.user
    if not role or role not in allowed:
        logger.info(
            "Access denied path=%s method=%s role=%s required=%s",
            request.url.path,
            request.method,
            role,
            sorted(allowed),
        )
        raise ApiError(status.HTTP_403_FORBIDDEN, error=denied_message)

    authz = AuthzContext(uid=user.uid, role=role, allowed_roles=allowed)
    request.state.authz = authz
    return authz


def enforce_security(
    request: Request,
    config: SecurityConfig = Depends(get_security_config),
    verifier: TokenVerifier | None = Depends(get_token_verifier),
    factory: GatewayFactory = Depends(get_gateway_factory),
    resolver: RoleResolver = Depends(get_role_resolver),
) -> None:
    """
    Global security dependency (configuration-driven).

    Looks up the YAML route rule for (path, method); public routes pass
    straight through, bearer routes get a verified identity, and role-gated
    routes additionally get their role resolved and checked.
    """

    rule = config.match(request.url.path, request.method)
    if not rule.auth_required:
        return

    _authenticate(request, config, verifier)

    if rule.required_roles:
        _check_roles(request, rule.required_roles, factory, resolver)


def authorize(roles: Iterable[str], denied_message: str = "Access denied") -> Callable[..., AuthzContext]:
    """
    Dependency factory: allow only callers whose resolved role is in `roles`.

        router = APIRouter(dependencies=[Depends(authorize(["admin", "hr"]))])
    """

    allowed = frozenset(roles)

    def dependency(
        request: Request,
        config: SecurityConfig = Depends(get_security_config),
        verifier: TokenVerifier | None = Depends(get_token_verifier),
        factory: GatewayFactory = Depends(get_gateway_factory),
        resolver: RoleResolver = Depends(get_role_resolver),
    ) -> AuthzContext:
        _authenticate(request, config, verifier)
        return _check_roles(request, allowed, factory, resolver, denied_message)

    return dependency


ensure_admin = authorize(ADMIN_ROLES, denied_message="Admin only")
ensure_admin_or_hr = authorize(ADMIN_OR_HR_ROLES)
