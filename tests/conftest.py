"""
Pytest fixtures for the test suite.

API tests never touch MySQL: the gateway factory is overridden with a fake
gateway that answers `CALL sp_*` with canned result sets, and the token
verifier is overridden with a fake that maps fixed bearer tokens to users.
"""
from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from contextlib import contextmanager
from typing import Any

import pytest
from fastapi.testclient import TestClient

from hrms.db.gateway import ProcedureResult
from hrms.db.session import get_gateway_factory
from hrms.firebase_auth import IdentityContext, ValidationError
from hrms.main import create_app
from hrms.security.dependencies import get_token_verifier
from hrms.settings import Settings

Handler = ProcedureResult | Callable[[list[Any]], ProcedureResult] | Exception

USERS = {
    "admin-token": IdentityContext(uid="admin-uid", email="admin@example.com", name="Ada Admin"),
    "hr-token": IdentityContext(uid="hr-uid", email="hr@example.com", name="Harper Hr"),
    "employee-token": IdentityContext(uid="employee-uid", email="emp@example.com", name="Eli Employee"),
}

ROLES = {"admin-uid": "admin", "hr-uid": "hr", "employee-uid": "employee"}


class FakeGateway:
    """Records every call and answers from `handlers` (empty result by default)."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[Any]]] = []
        self.handlers: dict[str, Handler] = {"sp_get_user_role": self._role}
        self.roles = dict(ROLES)
        self._lock = threading.Lock()

    def _role(self, params: list[Any]) -> ProcedureResult:
        role = self.roles.get(params[0])
        return ProcedureResult.of([{"role": role}] if role else [])

    def call(self, name: str, params: Sequence[Any] = ()) -> ProcedureResult:
        with self._lock:
            self.calls.append((name, list(params)))
        handler = self.handlers.get(name)
        if handler is None:
            return ProcedureResult()
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            return handler(list(params))
        return handler

    def calls_to(self, name: str) -> list[list[Any]]:
        return [params for called, params in self.calls if called == name]


class FakeVerifier:
    def verify(self, token: str) -> IdentityContext:
        try:
            return USERS[token]
        except KeyError:
            raise ValidationError("Invalid token") from None


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def gateway_factory(gateway):
    @contextmanager
    def factory():
        yield gateway

    return factory


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        db_verify_on_startup=False,
        firebase_project_id="hrms-test",
        reports_dir=str(tmp_path / "reports"),
    )


@pytest.fixture
def app(settings, gateway_factory):
    application = create_app(settings)
    application.dependency_overrides[get_gateway_factory] = lambda: gateway_factory
    application.dependency_overrides[get_token_verifier] = lambda: FakeVerifier()
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def lenient_client(app):
    """Client that returns 500 responses instead of re-raising server errors."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return bearer("admin-token")


@pytest.fixture
def hr_headers() -> dict[str, str]:
    return bearer("hr-token")


@pytest.fixture
def employee_headers() -> dict[str, str]:
    return bearer("employee-token")
