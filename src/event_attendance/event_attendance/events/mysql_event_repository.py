from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..core.enums import EventStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    load_json_column,
    normalize_mysql_time,
    store_read,
    store_write,
)
from .model import Event, EventSession
from .repository import EventRepository

_COLUMNS = """
    event_id, tenant_id, name, starts_at, status, late_tolerance, sessions,
    actual_start_time, location, description, event_type
"""


def _decode_sessions(value: Any) -> tuple[EventSession, ...]:
    items = load_json_column(value, column="sessions", expected=list)
    out = []
    for item in items:
        if not isinstance(item, dict) or not item.get("id"):
            raise ValidationError("sessions: each entry needs an id")
        try:
            out.append(
                EventSession(
                    session_id=str(item["id"]),
                    name=str(item.get("name") or item["id"]),
                    start_time=normalize_mysql_time(item.get("start_time")),
                    end_time=normalize_mysql_time(item.get("end_time")),
                )
            )
        except (TypeError, ValueError) as e:
            raise ValidationError(f"sessions[{item['id']}]: {e}") from e
    return tuple(out)


def _to_event(r: dict) -> Event:
    tolerance = r.get("late_tolerance")
    return Event(
        event_id=str(r["event_id"]),
        tenant_id=str(r["tenant_id"]),
        name=r["name"],
        starts_at=r["starts_at"],
        status=EventStatus(r["status"]),
        late_tolerance_minutes=int(tolerance) if tolerance is not None else None,
        sessions=_decode_sessions(r.get("sessions")),
        actual_start_time=r.get("actual_start_time"),
        location=r.get("location"),
        description=r.get("description"),
        event_type=r.get("event_type"),
    )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, *, tenant_id: str, event_id: str) -> Optional[Event]:
        with store_read("load events"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM events WHERE tenant_id=%s AND event_id=%s",
                (tenant_id, event_id),
            )
            r = fetchone(cur)
            return _to_event(r) if r else None

    def select_events(self, *, tenant_id: str, year: Optional[int] = None, month: Optional[int] = None) -> Sequence[Event]:
        clauses = ["tenant_id=%s"]
        params: list[object] = [tenant_id]
        if year is not None:
            clauses.append("YEAR(starts_at)=%s")
            params.append(int(year))
        if month is not None:
            clauses.append("MONTH(starts_at)=%s")
            params.append(int(month))

        where = " AND ".join(clauses)
        with store_read("load events"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM events WHERE {where} ORDER BY starts_at DESC",
                tuple(params),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def set_actual_start_time(self, *, tenant_id: str, event_id: str, started_at: datetime) -> bool:
        with store_write("open event"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE events
                SET actual_start_time=%s
                WHERE tenant_id=%s AND event_id=%s AND actual_start_time IS NULL
                """,
                (started_at, tenant_id, event_id),
            )
            return cur.rowcount > 0
