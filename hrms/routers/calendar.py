from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from hrms.db.gateway import ProcedureGateway
from hrms.db.session import get_gateway
from hrms.errors import envelope
from hrms.schemas.calendar import CalendarEventIn
from hrms.schemas.common import OptionalDate
from hrms.services.calendar import CalendarAggregator

router = APIRouter(prefix="/calendar", tags=["calendar"])


def get_calendar(gateway: ProcedureGateway = Depends(get_gateway)) -> CalendarAggregator:
    return CalendarAggregator(gateway)


@router.get("/events")
def list_events(
    from_: OptionalDate = Query(default=None, alias="from"),
    to: OptionalDate = None,
    employee_id: str | None = None,
    event_types: str | None = Query(default=None, description="Comma-separated event types"),
    calendar: CalendarAggregator = Depends(get_calendar),
) -> dict[str, Any]:
    return envelope(True, data=calendar.list(from_, to, employee_id, event_types))


@router.post("/events")
def create_event(body: CalendarEventIn, calendar: CalendarAggregator = Depends(get_calendar)) -> dict[str, Any]:
    calendar.create(body.to_params())
    return envelope(True, message="Event created")


@router.put("/events/{id}")
def update_event(id: str, body: CalendarEventIn, calendar: CalendarAggregator = Depends(get_calendar)) -> dict[str, Any]:
    calendar.update(id, body.to_params())
    return envelope(True, message="Event updated")


@router.delete("/events/{id}")
def delete_event(id: str, calendar: CalendarAggregator = Depends(get_calendar)) -> dict[str, Any]:
    calendar.delete(id)
    return envelope(True, message="Event deleted")
