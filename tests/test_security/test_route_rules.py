"""Tests for the YAML route table and rule matching."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from hrms.security.config import SecurityConfig, SecurityConfigModel, load_security_config
from hrms.settings import Settings


@pytest.fixture(scope="module")
def shipped_config() -> SecurityConfig:
    return load_security_config(Settings().resolved_security_config_path())


def test_reads_are_public(shipped_config):
    for path in ("/api/v1/departments", "/api/v1/employees/abc", "/api/v1/calendar/events", "/api/v1/reports/new_hires"):
        rule = shipped_config.match(path, "GET")
        assert rule.auth_required is False
        assert rule.required_roles == frozenset()


def test_writes_need_admin_or_hr(shipped_config):
    rule = shipped_config.match("/api/v1/departments/abc", "DELETE")
    assert rule.auth_required is True
    assert rule.required_roles == frozenset({"admin", "hr"})

    rule = shipped_config.match("/api/v1/training/p-1/enrollments", "POST")
    assert rule.required_roles == frozenset({"admin", "hr"})


def test_me_requires_bearer_only(shipped_config):
    rule = shipped_config.match("/api/v1/auth/me/", "get")
    assert rule.auth_required is True
    assert rule.required_roles == frozenset()


def test_applications_stay_public(shipped_config):
    assert shipped_config.match("/api/v1/recruitment/r-1/applications", "POST").auth_required is False


def test_exact_rule_beats_template():
    model = SecurityConfigModel.model_validate(
        {
            "routes": [
                {"path": "/items/{id}", "methods": ["GET"], "required_roles": ["admin"]},
                {"path": "/items/public", "methods": ["GET"], "auth_required": False},
            ]
        }
    )
    config = SecurityConfig(model)
    assert config.match("/items/public", "GET").auth_required is False
    assert config.match("/items/42", "GET").required_roles == frozenset({"admin"})


def test_unknown_role_rejected():
    with pytest.raises(ValidationError):
        SecurityConfigModel.model_validate({"routes": [{"path": "/x", "required_roles": ["root"]}]})


def test_missing_security_key(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("routes: []\n", encoding="utf-8")
    with pytest.raises(ValueError, match="security"):
        load_security_config(path)
