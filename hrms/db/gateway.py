"""
Stored-procedure gateway: the single data-access boundary of the API.

Every business operation is a `CALL sp_*(...)` against MySQL. A CALL can
return zero, one or several result sets; this module reads all of them once
and hands callers a `ProcedureResult` with the few normalizations the
routers need, so no handler has to unwrap nested result sets itself.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)

Row = dict[str, Any]

_PROCEDURE_NAME_RE = re.compile(r"^sp_[a-z0-9_]+$")


@dataclass(frozen=True)
class ProcedureResult:
    """All result sets produced by one procedure call, as lists of dict rows."""

    result_sets: tuple[tuple[Row, ...], ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, *result_sets: Sequence[Row]) -> ProcedureResult:
        return cls(tuple(tuple(dict(r) for r in rs) for rs in result_sets))

    def rows(self) -> list[Row]:
        """Rows of the first result set (the usual shape for list procedures)."""
        if not self.result_sets:
            return []
        return list(self.result_sets[0])

    def first(self) -> Row | None:
        """First row of the first result set, or None when the lookup is empty."""
        rows = self.rows()
        return rows[0] if rows else None

    def flat(self) -> list[Row]:
        """
        Every row of every result set, in order, as one flat list.

        Multi-select procedures (e.g. dashboard stats) return one small
        result set per statistic; a single-select procedure yields its rows
        unchanged. Either way the output is a flat list of row objects.
        """
        return [row for rs in self.result_sets for row in rs]


class ProcedureGateway(Protocol):
    def call(self, name: str, params: Sequence[Any] = ()) -> ProcedureResult: ...


class ProcedureCallError(RuntimeError):
    """Raised when a stored procedure call fails at the driver level."""


def validate_procedure_name(name: str) -> str:
    if not _PROCEDURE_NAME_RE.match(name):
        raise ValueError(f"Invalid stored procedure name: {name!r}")
    return name


def build_call_statement(name: str, param_count: int) -> str:
    placeholders = ",".join(["%s"] * param_count)
    return f"CALL {validate_procedure_name(name)}({placeholders})"


def read_result_sets(cursor) -> tuple[tuple[Row, ...], ...]:
    """
    Drain every result set from a DBAPI cursor after a CALL.

    MySQL drivers append a final status packet with no columns after the
    procedure's selects; those have `description is None` and are skipped.
    """

    result_sets: list[tuple[Row, ...]] = []
    while True:
        if cursor.description:
            columns = [col[0] for col in cursor.description]
            rows = cursor.fetchall() or ()
            result_sets.append(tuple(_as_row(columns, r) for r in rows))
        if not cursor.nextset():
            break
    return tuple(result_sets)


def _as_row(columns: list[str], raw: Any) -> Row:
    if isinstance(raw, dict):
        return dict(raw)
    return dict(zip(columns, raw))


class SqlProcedureGateway:
    """
    Gateway over one pooled DBAPI connection (checked out by the caller).

    Each call commits on success and rolls back on failure; no transaction
    spans more than one call.
    """

    def __init__(self, dbapi_connection) -> None:
        self._conn = dbapi_connection

    def call(self, name: str, params: Sequence[Any] = ()) -> ProcedureResult:
        statement = build_call_statement(name, len(params))
        cursor = self._conn.cursor()
        try:
            logger.debug("Calling procedure name=%s params=%d", name, len(params))
            cursor.execute(statement, tuple(params))
            result_sets = read_result_sets(cursor)
            self._conn.commit()
        except Exception as exc:
            self._conn.rollback()
            logger.warning("Procedure call failed name=%s error=%s", name, type(exc).__name__)
            raise ProcedureCallError(f"{name} failed: {exc}") from exc
        finally:
            cursor.close()
        return ProcedureResult(result_sets)
