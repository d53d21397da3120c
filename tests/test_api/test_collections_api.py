"""CRUD pass-through endpoints: parameter order, envelopes, validation."""

import uuid

from hrms.db.gateway import ProcedureResult

DEPT_ID = str(uuid.uuid4())
HEAD_ID = str(uuid.uuid4())


def test_list_departments(client, gateway):
    gateway.handlers["sp_get_departments"] = ProcedureResult.of([{"id": DEPT_ID, "name": "IT"}])
    resp = client.get("/api/v1/departments")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": [{"id": DEPT_ID, "name": "IT"}]}


def test_get_missing_department_is_null_data(client):
    resp = client.get(f"/api/v1/departments/{DEPT_ID}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": None}


def test_create_department_sanitizes_and_forwards(client, gateway, hr_headers):
    body = {"name": "  <b>Research</b> ", "code": "RND", "head_employee_id": HEAD_ID}
    resp = client.post("/api/v1/departments", json=body, headers=hr_headers)
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert gateway.calls_to("sp_create_department") == [[None, "bResearch/b", "RND", None, HEAD_ID]]


def test_department_head_must_be_uuid(client, gateway, admin_headers):
    resp = client.post(
        "/api/v1/departments",
        json={"name": "Research", "head_employee_id": "not-a-uuid"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert [e["field"] for e in body["errors"]] == ["head_employee_id"]
    assert gateway.calls_to("sp_create_department") == []


def test_update_employee_param_order(client, gateway, admin_headers):
    body = {
        "first_name": "Grace",
        "last_name": "Hopper",
        "email": "grace@example.com",
        "phone": "+1 555-0100",
        "hire_date": "2024-01-15",
        "employment_status": "active",
        "salary": 1200.5,
    }
    resp = client.put("/api/v1/employees/e-1", json=body, headers=admin_headers)
    assert resp.status_code == 200
    (params,) = gateway.calls_to("sp_update_employee")
    assert params[0] == "e-1"
    assert params[3:6] == ["Grace", "Hopper", "grace@example.com"]
    assert params[9] == "2024-01-15"
    assert params[11] == 1200.5


def test_employee_rejects_bad_email_and_status(client, admin_headers):
    resp = client.post(
        "/api/v1/employees",
        json={"first_name": "A", "last_name": "B", "email": "nope", "employment_status": "fired"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert {e["field"] for e in resp.json()["errors"]} == {"email", "employment_status"}


def test_min_employees(client, gateway):
    gateway.handlers["sp_get_employees_min_details"] = ProcedureResult.of([{"id": "e-1", "name": "Grace Hopper"}])
    assert client.get("/api/v1/min-employees").json()["data"] == [{"id": "e-1", "name": "Grace Hopper"}]


def test_recruitment_defaults_position_type(client, gateway, hr_headers):
    client.post("/api/v1/recruitment", json={"job_title": "Analyst"}, headers=hr_headers)
    (params,) = gateway.calls_to("sp_create_recruitment")
    assert params[1] == "Analyst"
    assert params[5] == "full_time"
    assert len(params) == 12


def test_public_application_uses_posting_from_path(client, gateway):
    resp = client.post(
        f"/api/v1/recruitment/{DEPT_ID}/applications",
        json={"applicant_name": "Lin", "applicant_email": "lin@example.com"},
    )
    assert resp.status_code == 200
    (params,) = gateway.calls_to("sp_add_application")
    assert params[1] == DEPT_ID
    assert params[2] == "Lin"


def test_application_status_is_enumerated(client, gateway):
    assert client.put("/api/v1/applications/a-1", json={"status": "maybe"}).status_code == 400
    assert client.put("/api/v1/applications/a-1", json={"status": "hired"}).status_code == 200
    assert gateway.calls_to("sp_update_application_status") == [["a-1", "hired"]]


def test_enrollment_uses_program_from_path(client, gateway, admin_headers):
    employee_id = str(uuid.uuid4())
    resp = client.post(
        "/api/v1/training/p-1/enrollments",
        json={"employee_id": employee_id, "certificate_issued": True, "rating": 5},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    (params,) = gateway.calls_to("sp_create_enrollment")
    assert params[1:3] == ["p-1", employee_id]
    assert params[6] == 1


def test_evaluation_defaults(client, gateway, hr_headers):
    employee_id = str(uuid.uuid4())
    resp = client.post(
        "/api/v1/evaluations",
        json={"employee_id": employee_id, "technical_skills": 8, "comments": ""},
        headers=hr_headers,
    )
    assert resp.status_code == 200
    (params,) = gateway.calls_to("sp_create_evaluation")
    assert params[1] == employee_id
    assert params[6] == 8
    assert params[-3:] == [None, 0, "draft"]


def test_evaluation_sub_score_range(client, hr_headers):
    resp = client.post(
        "/api/v1/evaluations",
        json={"employee_id": str(uuid.uuid4()), "teamwork": 11},
        headers=hr_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "teamwork"


def test_employee_evaluations_filters(client, gateway):
    client.get("/api/v1/employees/e-1/evaluations", params={"status": "approved", "limit": 5})
    assert gateway.calls_to("sp_get_evaluations_by_employee") == [["e-1", "approved", 5]]


def test_register_forces_employee_role(client, gateway):
    body = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "uid": "ada_1",
        "displayPicture": "https://example.com/ada.png",
    }
    resp = client.post("/api/v1/auth/register", json=body)
    assert resp.status_code == 200
    (params,) = gateway.calls_to("sp_register")
    assert params[0] == "Ada Lovelace"
    assert params[-1] == "employee"


def test_register_rejects_role_elevation(client, gateway):
    body = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "uid": "ada_1",
        "displayPicture": "https://example.com/ada.png",
        "role": "admin",
    }
    resp = client.post("/api/v1/auth/register", json=body)
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "role"
    assert gateway.calls_to("sp_register") == []


def test_unhandled_procedure_error_is_500(lenient_client, gateway):
    gateway.handlers["sp_get_training_programs"] = RuntimeError("connection lost")
    resp = lenient_client.get("/api/v1/training")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Internal server error"}


def test_employee_evaluations_blank_limit(client, gateway):
    resp = client.get("/api/v1/employees/e-1/evaluations?status=&limit=")
    assert resp.status_code == 200
    assert gateway.calls_to("sp_get_evaluations_by_employee") == [["e-1", None, None]]
