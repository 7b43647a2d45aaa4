from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, store_read
from .model import Member
from .repository import MemberRepository

_SELECT = """
    SELECT
        m.member_id, m.tenant_id, m.full_name, m.email, m.phone,
        m.division_id, d.name AS division_name, m.organization_id, m.role_id
    FROM members m
    LEFT JOIN divisions d ON d.division_id = m.division_id
"""


def _to_member(r: dict) -> Member:
    return Member(
        member_id=str(r["member_id"]),
        tenant_id=str(r["tenant_id"]),
        full_name=r["full_name"],
        email=r.get("email"),
        phone=r.get("phone"),
        division_id=str(r["division_id"]) if r.get("division_id") else None,
        division_name=r.get("division_name"),
        organization_id=str(r["organization_id"]) if r.get("organization_id") else None,
        role_id=str(r["role_id"]) if r.get("role_id") else None,
    )


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, *, tenant_id: str, member_id: str) -> Optional[Member]:
        with store_read("load members"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE m.tenant_id=%s AND m.member_id=%s", (tenant_id, member_id))
            r = fetchone(cur)
            return _to_member(r) if r else None

    def select_members(self, *, tenant_id: str, active_only: bool = False) -> Sequence[Member]:
        where = "WHERE m.tenant_id=%s"
        if active_only:
            where += " AND m.division_id IS NOT NULL"
        with store_read("load members"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} {where} ORDER BY m.full_name ASC", (tenant_id,))
            return [_to_member(r) for r in fetchall(cur)]
