from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest

from src.event_attendance.event_attendance.attendance.model import AttendanceRecord
from src.event_attendance.event_attendance.core.enums import AttendanceStatus
from src.event_attendance.event_attendance.core.exceptions import StoreReadFailure, StoreWriteFailure
from src.event_attendance.event_attendance.events.model import Event, EventSession
from src.event_attendance.event_attendance.members.model import Member

TENANT = "t1"


class InMemoryEvents:
    def __init__(self, events=()):
        self._events: dict[str, Event] = {e.event_id: e for e in events}
        self.fail_read = False

    def add(self, event: Event) -> Event:
        self._events[event.event_id] = event
        return event

    def get_by_id(self, *, tenant_id: str, event_id: str) -> Optional[Event]:
        if self.fail_read:
            raise StoreReadFailure("load events failed: connection lost")
        e = self._events.get(event_id)
        return e if e and e.tenant_id == tenant_id else None

    def select_events(self, *, tenant_id: str, year=None, month=None):
        out = [e for e in self._events.values() if e.tenant_id == tenant_id]
        if year is not None:
            out = [e for e in out if e.starts_at.year == year]
        if month is not None:
            out = [e for e in out if e.starts_at.month == month]
        return sorted(out, key=lambda e: e.starts_at, reverse=True)

    def set_actual_start_time(self, *, tenant_id: str, event_id: str, started_at: datetime) -> bool:
        e = self.get_by_id(tenant_id=tenant_id, event_id=event_id)
        if not e or e.actual_start_time is not None:
            return False
        self._events[event_id] = replace(e, actual_start_time=started_at)
        return True


class InMemoryMembers:
    def __init__(self, members=()):
        self._members: dict[str, Member] = {m.member_id: m for m in members}

    def get_by_id(self, *, tenant_id: str, member_id: str) -> Optional[Member]:
        m = self._members.get(member_id)
        return m if m and m.tenant_id == tenant_id else None

    def select_members(self, *, tenant_id: str, active_only: bool = False):
        out = [m for m in self._members.values() if m.tenant_id == tenant_id]
        if active_only:
            out = [m for m in out if m.is_active]
        return sorted(out, key=lambda m: m.full_name)


class InMemoryAttendance:
    """Keyed by (event_id, member_id) like the real table's primary key."""

    def __init__(self, events: InMemoryEvents):
        self._events = events
        self.rows: dict[tuple[str, str], AttendanceRecord] = {}
        self.writes = 0
        self.fail_upsert = False
        self.fail_insert = False
        self.fail_delete = False
        self.fail_read = False

    def _tenant_of(self, event_id: str) -> Optional[str]:
        e = self._events._events.get(event_id)
        return e.tenant_id if e else None

    def select_attendance(self, *, tenant_id: str, event_id=None, member_id=None):
        if self.fail_read:
            raise StoreReadFailure("load attendance failed: connection lost")
        out = [r for r in self.rows.values() if self._tenant_of(r.event_id) == tenant_id]
        if event_id is not None:
            out = [r for r in out if r.event_id == event_id]
        if member_id is not None:
            out = [r for r in out if r.member_id == member_id]
        return out

    def get_for_event_and_member(self, *, event_id: str, member_id: str) -> Optional[AttendanceRecord]:
        if self.fail_read:
            raise StoreReadFailure("load attendance failed: connection lost")
        return self.rows.get((event_id, member_id))

    def upsert_attendance(self, record: AttendanceRecord) -> None:
        if self.fail_upsert:
            raise StoreWriteFailure("upsert attendance failed: connection lost")
        self.rows[record.key] = record
        self.writes += 1

    def insert_attendance(self, records) -> int:
        if self.fail_insert:
            raise StoreWriteFailure("insert attendance failed: connection lost")
        if any(r.key in self.rows for r in records):
            raise StoreWriteFailure("insert attendance failed: Duplicate entry")
        for r in records:
            self.rows[r.key] = r
        self.writes += 1
        return len(records)

    def delete_attendance(self, *, event_id: str, member_ids) -> int:
        if self.fail_delete:
            raise StoreWriteFailure("delete attendance failed: connection lost")
        removed = 0
        for mid in member_ids:
            if self.rows.pop((event_id, mid), None) is not None:
                removed += 1
        self.writes += 1
        return removed

    def seed(self, event_id: str, member_id: str, status=AttendanceStatus.ABSENT, **fields) -> AttendanceRecord:
        rec = AttendanceRecord(event_id=event_id, member_id=member_id, status=status, **fields)
        self.rows[rec.key] = rec
        return rec


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 14, 9, 0, 0)


@pytest.fixture
def members() -> list[Member]:
    return [
        Member("m1", TENANT, "Alice Hartono", division_id="d1", division_name="Choir"),
        Member("m2", TENANT, "Budi Santoso", division_id="d2", division_name="Media"),
        Member("m3", TENANT, "Citra Dewi", division_id="d1", division_name="Choir"),
        Member("m4", TENANT, "Dimas Pratama"),
        Member("x1", "t2", "Other Tenant Person", division_id="d9", division_name="Elsewhere"),
    ]


@pytest.fixture
def open_event(fixed_now) -> Event:
    """Starts 09:00, default 15 minute tolerance, check-in already opened."""
    return Event(
        event_id="e1",
        tenant_id=TENANT,
        name="Sunday Service",
        starts_at=fixed_now,
        actual_start_time=fixed_now.replace(hour=8, minute=45),
    )


@pytest.fixture
def two_session_event(fixed_now) -> Event:
    return Event(
        event_id="e2",
        tenant_id=TENANT,
        name="Retreat Day",
        starts_at=fixed_now.replace(hour=7),
        late_tolerance_minutes=10,
        sessions=(
            EventSession("morning", "Morning", start_time=fixed_now.replace(hour=8).time()),
            EventSession("evening", "Evening", start_time=fixed_now.replace(hour=18).time()),
        ),
        actual_start_time=fixed_now.replace(hour=7),
    )


@pytest.fixture
def events_repo(open_event, two_session_event) -> InMemoryEvents:
    return InMemoryEvents([open_event, two_session_event])


@pytest.fixture
def members_repo(members) -> InMemoryMembers:
    return InMemoryMembers(members)


@pytest.fixture
def attendance_repo(events_repo) -> InMemoryAttendance:
    return InMemoryAttendance(events_repo)
