from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    decode_session_logs,
    encode_session_logs,
    fetchall,
    fetchone,
    in_clause,
    store_read,
    store_write,
)
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        event_id=str(r["event_id"]),
        member_id=str(r["member_id"]),
        status=AttendanceStatus(r["status"]),
        check_in_time=r.get("check_in_time"),
        leave_reason=r.get("leave_reason"),
        logs=decode_session_logs(r.get("logs")),
    )


def _row_params(rec: AttendanceRecord) -> tuple:
    return (
        rec.event_id,
        rec.member_id,
        rec.status.value,
        rec.check_in_time,
        rec.leave_reason,
        encode_session_logs(rec.logs),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def select_attendance(
        self,
        *,
        tenant_id: str,
        event_id: Optional[str] = None,
        member_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["e.tenant_id=%s"]
        params: list[object] = [tenant_id]
        if event_id is not None:
            clauses.append("ea.event_id=%s")
            params.append(event_id)
        if member_id is not None:
            clauses.append("ea.member_id=%s")
            params.append(member_id)

        where = " AND ".join(clauses)
        with store_read("load attendance"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ea.event_id, ea.member_id, ea.status, ea.check_in_time, ea.leave_reason, ea.logs
                FROM event_attendance ea
                JOIN events e ON e.event_id = ea.event_id
                WHERE {where}
                ORDER BY e.starts_at DESC, ea.member_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_for_event_and_member(self, *, event_id: str, member_id: str) -> Optional[AttendanceRecord]:
        with store_read("load attendance"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT event_id, member_id, status, check_in_time, leave_reason, logs
                FROM event_attendance
                WHERE event_id=%s AND member_id=%s
                """,
                (event_id, member_id),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def upsert_attendance(self, record: AttendanceRecord) -> None:
        with store_write("upsert attendance"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO event_attendance(event_id, member_id, status, check_in_time, leave_reason, logs)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    check_in_time=VALUES(check_in_time),
                    leave_reason=VALUES(leave_reason),
                    logs=VALUES(logs)
                """,
                _row_params(record),
            )

    def insert_attendance(self, records: Sequence[AttendanceRecord]) -> int:
        if not records:
            return 0
        # One transaction: either every invitation row lands or none does.
        with store_write("insert attendance"), db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO event_attendance(event_id, member_id, status, check_in_time, leave_reason, logs)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                [_row_params(r) for r in records],
            )
            return len(records)

    def delete_attendance(self, *, event_id: str, member_ids: Sequence[str]) -> int:
        ids = list(member_ids)
        if not ids:
            return 0
        with store_write("delete attendance"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"DELETE FROM event_attendance WHERE event_id=%s AND member_id IN ({in_clause(ids)})",
                (event_id, *ids),
            )
            return cur.rowcount
