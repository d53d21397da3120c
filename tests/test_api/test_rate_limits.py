"""Rate limiting on registration and the general API bucket."""

import pytest
from fastapi.testclient import TestClient

from hrms.main import create_app
from hrms.settings import Settings

REGISTRATION = {
    "name": "Ada Lovelace",
    "email": "ada@example.com",
    "uid": "ada_1",
    "displayPicture": "https://example.com/ada.png",
}


@pytest.fixture
def limited_client(tmp_path, gateway_factory):
    from hrms.db.session import get_gateway_factory

    settings = Settings(
        db_verify_on_startup=False,
        reports_dir=str(tmp_path / "reports"),
        rate_limit_auth=2,
        rate_limit_general=5,
    )
    app = create_app(settings)
    app.dependency_overrides[get_gateway_factory] = lambda: gateway_factory
    with TestClient(app) as client:
        yield client


def test_registration_limit(limited_client):
    statuses = [limited_client.post("/api/v1/auth/register", json=REGISTRATION).status_code for _ in range(3)]
    assert statuses == [200, 200, 429]


def test_general_limit(limited_client):
    statuses = [limited_client.get("/api/v1/departments").status_code for _ in range(6)]
    assert statuses[:5] == [200] * 5
    resp = limited_client.get("/api/v1/departments")
    assert resp.status_code == 429
    assert resp.json() == {"success": False, "message": "Too many requests, please try again later."}


def test_forwarded_header_does_not_reset_the_limit(limited_client, gateway):
    statuses = [
        limited_client.post(
            "/api/v1/auth/register",
            json=REGISTRATION,
            headers={"X-Forwarded-For": f"10.0.0.{i}"},
        ).status_code
        for i in range(4)
    ]
    assert statuses == [200, 200, 429, 429]
    assert len(gateway.calls_to("sp_register")) == 2
