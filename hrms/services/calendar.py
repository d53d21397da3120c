"""
Calendar aggregator: one stored-procedure call per operation.

The only logic here is parameter shaping: blank optional strings become
NULL, and list/object fields are JSON-encoded because the procedures take
them as JSON text columns.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import date
from typing import Any

from hrms.db.gateway import ProcedureGateway, Row
from hrms.schemas.common import blank_to_none

JSON_FIELDS = ("attendees", "recurrence_pattern")

EVENT_COLUMNS = (
    "title",
    "description",
    "event_type",
    "start_date",
    "end_date",
    "location",
    "related_table",
    "related_id",
    "organizer_id",
    "attendees",
    "color",
    "is_recurring",
    "recurrence_pattern",
    "created_by",
)


def normalize_event_types(event_types: str | Iterable[str] | None) -> str | None:
    if event_types is None:
        return None
    if isinstance(event_types, str):
        parts = event_types.split(",")
    else:
        parts = list(event_types)
    cleaned = [p.strip() for p in parts if p and p.strip()]
    return ",".join(cleaned) if cleaned else None


def event_params(payload: dict[str, Any]) -> list[Any]:
    params: list[Any] = []
    for column in EVENT_COLUMNS:
        value = blank_to_none(payload.get(column))
        if column in JSON_FIELDS and value is not None and not isinstance(value, str):
            value = json.dumps(value)
        if column == "is_recurring":
            value = 1 if value else 0
        params.append(value)
    return params


class CalendarAggregator:
    def __init__(self, gateway: ProcedureGateway) -> None:
        self._gateway = gateway

    def list(
        self,
        start: date | None = None,
        end: date | None = None,
        employee_id: str | None = None,
        event_types: str | Iterable[str] | None = None,
    ) -> list[Row]:
        """Events whose start falls in [start, end] (both inclusive), filters optional."""
        result = self._gateway.call(
            "sp_get_calendar_events",
            [
                start.isoformat() if start else None,
                end.isoformat() if end else None,
                blank_to_none(employee_id),
                normalize_event_types(event_types),
            ],
        )
        return result.rows()

    def create(self, payload: dict[str, Any]) -> None:
        self._gateway.call("sp_create_calendar_event", event_params(payload))

    def update(self, event_id: str, payload: dict[str, Any]) -> None:
        self._gateway.call("sp_update_calendar_event", [event_id, *event_params(payload)])

    def delete(self, event_id: str) -> None:
        self._gateway.call("sp_delete_calendar_event", [event_id])
