"""
`requests`-based bindings for the HRMS REST API.

Every call goes through `HrmsClient._request`, which attaches the bearer
token from the injected `SessionStore`, unwraps the `{success, data, ...}`
envelope and turns non-2xx answers into `ApiClientError`.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from hrms.client.session import SessionStore, SessionUser

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000/api/v1"
DEFAULT_ERROR_MESSAGE = "Request failed"


class ApiClientError(Exception):
    def __init__(self, status: int, message: str, data: Any = None) -> None:
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message
        self.data = data


def _error_message(body: Any) -> str:
    if isinstance(body, dict):
        for key in ("message", "error"):
            if body.get(key):
                return str(body[key])
    return DEFAULT_ERROR_MESSAGE


class HrmsClient:
    def __init__(
        self,
        session_store: SessionStore,
        base_url: str = DEFAULT_BASE_URL,
        http: requests.Session | None = None,
        timeout: float = 10,
    ) -> None:
        self.store = session_store
        self.base_url = base_url.rstrip("/")
        self._http = http or requests.Session()
        self._timeout = timeout

    def _request(self, method: str, path: str, *, json: Any = None, params: dict[str, Any] | None = None) -> Any:
        params = {k: v for k, v in (params or {}).items() if v is not None}
        resp = self._http.request(
            method,
            f"{self.base_url}{path}",
            json=json,
            params=params or None,
            headers=self.store.authorization_header(),
            timeout=self._timeout,
        )
        try:
            body = resp.json()
        except ValueError:
            body = None

        if not resp.ok:
            logger.debug("API error method=%s path=%s status=%s", method, path, resp.status_code)
            raise ApiClientError(resp.status_code, _error_message(body), body)
        return body

    def _data(self, method: str, path: str, **kwargs: Any) -> Any:
        body = self._request(method, path, **kwargs)
        return body.get("data") if isinstance(body, dict) else body

    # auth

    def register(self, name: str, email: str, uid: str, display_picture: str) -> dict[str, Any]:
        payload = {"name": name, "email": email, "uid": uid, "displayPicture": display_picture}
        return self._request("POST", "/auth/register", json=payload)

    def sign_in(self, token: str) -> SessionUser:
        """Store the ID token, then load the user and role from the server."""
        self.store.sign_in(token)
        try:
            return self.refresh_user()
        except Exception:
            # A token the server will not resolve is not a session.
            self.store.sign_out()
            raise

    def refresh_user(self) -> SessionUser:
        user = SessionUser.from_dict(self._data("GET", "/auth/me"))
        self.store.set_user(user)
        return user

    def sign_out(self) -> None:
        self.store.sign_out()

    # collections

    def list(self, collection: str) -> list[dict[str, Any]]:
        return self._data("GET", f"/{collection}")

    def get(self, collection: str, id: str) -> dict[str, Any] | None:
        return self._data("GET", f"/{collection}/{id}")

    def create(self, collection: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", f"/{collection}", json=payload)

    def update(self, collection: str, id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/{collection}/{id}", json=payload)

    def delete(self, collection: str, id: str) -> dict[str, Any]:
        return self._request("DELETE", f"/{collection}/{id}")

    def min_employees(self) -> list[dict[str, Any]]:
        return self._data("GET", "/min-employees")

    def employee_evaluations(self, employee_id: str, status: str | None = None, limit: int | None = None) -> list[dict[str, Any]]:
        return self._data("GET", f"/employees/{employee_id}/evaluations", params={"status": status, "limit": limit})

    def applications(self, recruitment_id: str) -> list[dict[str, Any]]:
        return self._data("GET", f"/recruitment/{recruitment_id}/applications")

    def apply(self, recruitment_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", f"/recruitment/{recruitment_id}/applications", json=payload)

    def set_application_status(self, id: str, status: str) -> dict[str, Any]:
        return self._request("PUT", f"/applications/{id}", json={"status": status})

    def enrollments(self, program_id: str) -> list[dict[str, Any]]:
        return self._data("GET", f"/training/{program_id}/enrollments")

    def enroll(self, program_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", f"/training/{program_id}/enrollments", json=payload)

    # calendar

    def calendar_events(
        self,
        start: str | None = None,
        end: str | None = None,
        employee_id: str | None = None,
        event_types: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        params = {
            "from": start,
            "to": end,
            "employee_id": employee_id,
            "event_types": ",".join(event_types) if event_types else None,
        }
        return self._data("GET", "/calendar/events", params=params)

    # dashboard and admin

    def dashboard(self, days: int | None = None, employee_id: str | None = None) -> dict[str, Any]:
        return self._data("GET", "/dashboard", params={"days": days, "employee_id": employee_id})

    def dashboard_stats(self, employee_id: str | None = None) -> list[dict[str, Any]]:
        return self._data("GET", "/dashboard/stats", params={"employee_id": employee_id})

    def sync_calendar(self) -> dict[str, Any]:
        return self._request("POST", "/dashboard/sync")

    def appoint_hr(self, uid: str) -> dict[str, Any]:
        return self._request("POST", "/admin/appoint-hr", json={"uid": uid})

    def list_users(self) -> list[dict[str, Any]]:
        return self._data("GET", "/admin/users")

    # reports

    def report(self, name: str, fmt: str = "json", **options: Any) -> Any:
        """JSON reports return rows; other formats return the raw bytes."""
        if fmt == "json":
            return self._data("GET", f"/reports/{name}", params=options)
        resp = self._http.get(
            f"{self.base_url}/reports/{name}",
            params={"format": fmt, **{k: v for k, v in options.items() if v is not None}},
            headers=self.store.authorization_header(),
            timeout=self._timeout,
        )
        if not resp.ok:
            try:
                body = resp.json()
            except ValueError:
                body = None
            raise ApiClientError(resp.status_code, _error_message(body), body)
        return resp.content

    def save_report(self, name: str, fmt: str = "json", **options: Any) -> str:
        body = self._request("GET", f"/reports/{name}", params={"format": fmt, "save": "1", **options})
        return body["url"]
