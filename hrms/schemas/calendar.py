from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from hrms.schemas.common import RequestModel, Text255, Text2000


class CalendarEventIn(RequestModel):
    title: Text255 = Field(min_length=1)
    description: Text2000 | None = None
    event_type: Text255 | None = None
    start_date: datetime
    end_date: datetime
    location: Text255 | None = None
    related_table: Text255 | None = None
    related_id: str | None = None
    organizer_id: str | None = None
    attendees: list[str] | None = None
    color: str | None = Field(default=None, max_length=32)
    is_recurring: bool = False
    # Stored as-is; no occurrence expansion happens anywhere.
    recurrence_pattern: dict[str, Any] | list[Any] | str | None = None
    created_by: str | None = None
