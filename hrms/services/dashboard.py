from __future__ import annotations

import asyncio
import logging
from typing import Any

from starlette.concurrency import run_in_threadpool

from hrms.db.gateway import ProcedureGateway, Row
from hrms.db.session import GatewayFactory

logger = logging.getLogger(__name__)

DEFAULT_UPCOMING_DAYS = 7


def normalize_days(days: Any) -> int:
    """Absent, zero or non-numeric values fall back to a week."""
    try:
        value = int(days)
    except (TypeError, ValueError):
        return DEFAULT_UPCOMING_DAYS
    return value or DEFAULT_UPCOMING_DAYS


def _employee(employee_id: str | None) -> str | None:
    return employee_id or None


class DashboardAggregator:
    def __init__(self, gateway: ProcedureGateway) -> None:
        self._gateway = gateway

    def get_stats(self, employee_id: str | None = None) -> list[Row]:
        # One small result set per statistic; callers always see a flat list.
        return self._gateway.call("sp_get_dashboard_stats", [_employee(employee_id)]).flat()

    def get_upcoming_events(self, days: Any = DEFAULT_UPCOMING_DAYS, employee_id: str | None = None) -> list[Row]:
        return self._gateway.call("sp_get_upcoming_events", [normalize_days(days), _employee(employee_id)]).rows()

    def get_notifications(self, employee_id: str | None = None) -> list[Row]:
        return self._gateway.call("sp_get_dashboard_notifications", [_employee(employee_id)]).rows()

    def get_tasks(self, employee_id: str | None = None) -> list[Row]:
        return self._gateway.call("sp_get_employee_tasks", [_employee(employee_id)]).rows()

    def sync_calendar(self) -> None:
        self._gateway.call("sp_sync_all_calendar_events")

    def appoint_hr(self, uid: str) -> None:
        """No existence check: an unknown uid is a no-op update."""
        self._gateway.call("sp_set_user_role", [uid, "hr"])


def _read(factory: GatewayFactory, method: str, *args: Any) -> list[Row]:
    with factory() as gateway:
        return getattr(DashboardAggregator(gateway), method)(*args)


async def overview(
    factory: GatewayFactory,
    days: Any = DEFAULT_UPCOMING_DAYS,
    employee_id: str | None = None,
) -> dict[str, list[Row]]:
    """
    Run the four dashboard reads concurrently, one pooled connection each.

    Any failing branch fails the whole call; there is no partial result.
    """

    stats, upcoming, notifications, tasks = await asyncio.gather(
        run_in_threadpool(_read, factory, "get_stats", employee_id),
        run_in_threadpool(_read, factory, "get_upcoming_events", days, employee_id),
        run_in_threadpool(_read, factory, "get_notifications", employee_id),
        run_in_threadpool(_read, factory, "get_tasks", employee_id),
    )
    logger.debug(
        "Dashboard overview stats=%d upcoming=%d notifications=%d tasks=%d",
        len(stats),
        len(upcoming),
        len(notifications),
        len(tasks),
    )
    return {"stats": stats, "upcoming": upcoming, "notifications": notifications, "tasks": tasks}
