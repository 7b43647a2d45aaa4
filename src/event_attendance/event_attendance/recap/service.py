from __future__ import annotations

from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..attendance.status_resolver import resolve_display_status
from ..core.constants import DEFAULT_TREND_EVENTS
from ..core.exceptions import NotFoundError
from ..events.repository import EventRepository
from ..members.repository import MemberRepository
from .aggregator import aggregate, attendance_trend, rank_results, search_results, summarize_event, tier_counts
from .model import EventSummary, MemberHistoryRow, RecapFilter, RecapReport, TrendPoint


class RecapService:
    """Read-side views over the full attendance history of a tenant."""

    def __init__(self, events: EventRepository, members: MemberRepository, attendance: AttendanceRepository):
        self._events = events
        self._members = members
        self._attendance = attendance

    def build_recap(
        self,
        *,
        tenant_id: str,
        recap_filter: Optional[RecapFilter] = None,
        search: Optional[str] = None,
    ) -> RecapReport:
        results = aggregate(
            self._members.select_members(tenant_id=tenant_id, active_only=True),
            self._attendance.select_attendance(tenant_id=tenant_id),
            self._events.select_events(tenant_id=tenant_id),
            recap_filter,
        )
        ranked = rank_results(search_results(results.values(), search))
        # Summary counts follow the visible (searched) rows.
        return RecapReport(results=ranked, counts=tier_counts(ranked))

    def event_summary(self, *, tenant_id: str, event_id: str) -> EventSummary:
        if not self._events.get_by_id(tenant_id=tenant_id, event_id=event_id):
            raise NotFoundError(f"Event not found: {event_id}")
        return summarize_event(event_id, self._attendance.select_attendance(tenant_id=tenant_id, event_id=event_id))

    def member_history(self, *, tenant_id: str, member_id: str) -> list[MemberHistoryRow]:
        if not self._members.get_by_id(tenant_id=tenant_id, member_id=member_id):
            raise NotFoundError(f"Member not found: {member_id}")

        events = {e.event_id: e for e in self._events.select_events(tenant_id=tenant_id)}
        rows = []
        for r in self._attendance.select_attendance(tenant_id=tenant_id, member_id=member_id):
            event = events.get(r.event_id)
            if event is None:
                continue
            rows.append(
                MemberHistoryRow(
                    event=event,
                    status=r.status,
                    label=resolve_display_status(r, event),
                    check_in_time=r.check_in_time,
                    leave_reason=r.leave_reason,
                )
            )
        rows.sort(key=lambda row: row.event.starts_at, reverse=True)
        return rows

    def trend(self, *, tenant_id: str, limit: int = DEFAULT_TREND_EVENTS) -> list[TrendPoint]:
        return attendance_trend(
            self._events.select_events(tenant_id=tenant_id),
            self._attendance.select_attendance(tenant_id=tenant_id),
            limit=limit,
        )
