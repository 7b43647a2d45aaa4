from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import AttendanceStatus, Disposition
from ..core.exceptions import NotFoundError, SessionNotOpenError, UnknownMemberError, ValidationError
from ..events.model import Event
from ..events.repository import EventRepository
from ..members.repository import MemberRepository
from .classifier import classify_for_event
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

MANUAL_STATUSES = ("Present", "Excused", "Absent")


class AttendanceService:
    """Operator corrections on top of the scan flow: manual marking and reset."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        events: EventRepository,
        members: MemberRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._events = events
        self._members = members
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def _open_event(self, *, tenant_id: str, event_id: str) -> Event:
        event = self._events.get_by_id(tenant_id=tenant_id, event_id=event_id)
        if not event:
            raise NotFoundError(f"Event not found: {event_id}")
        if not event.is_open:
            raise SessionNotOpenError("session not open")
        return event

    def mark_status(
        self,
        *,
        tenant_id: str,
        event_id: str,
        member_id: str,
        status: str,
        leave_reason: Optional[str] = None,
    ) -> AttendanceRecord:
        if status not in MANUAL_STATUSES:
            raise ValidationError(f"status must be one of {', '.join(MANUAL_STATUSES)}")

        event = self._open_event(tenant_id=tenant_id, event_id=event_id)
        if not self._members.get_by_id(tenant_id=tenant_id, member_id=member_id):
            raise UnknownMemberError(f"Unknown member: {member_id}")

        existing = self._attendance.get_for_event_and_member(event_id=event_id, member_id=member_id)
        base = existing or AttendanceRecord.placeholder(event_id, member_id)

        if status == "Absent":
            # Scan logs stay; the member simply no longer counts as checked in.
            record = base.evolve(status=AttendanceStatus.ABSENT, check_in_time=None, leave_reason=None)
        else:
            disposition = Disposition(status)
            new_status = AttendanceStatus(status)
            if base.check_in_time is not None:
                punctuality = classify_for_event(event, base.check_in_time, base.check_in_session_id)
                new_status = self._factory.for_checkin(punctuality=punctuality).decide(disposition).status
            record = base.evolve(
                status=new_status,
                leave_reason=(leave_reason or None) if disposition == Disposition.EXCUSED else None,
            )

        self._attendance.upsert_attendance(record)
        logger.info("manual mark: %s at event %s -> %s", member_id, event_id, record.status.value)
        return record

    def reset(self, *, tenant_id: str, event_id: str, member_id: str) -> None:
        """Delete the member's record; they drop off the event's roster."""
        if not self._events.get_by_id(tenant_id=tenant_id, event_id=event_id):
            raise NotFoundError(f"Event not found: {event_id}")
        removed = self._attendance.delete_attendance(event_id=event_id, member_ids=[member_id])
        if not removed:
            raise NotFoundError(f"No attendance for member {member_id} at event {event_id}")
        logger.info("attendance reset: %s at event %s", member_id, event_id)
