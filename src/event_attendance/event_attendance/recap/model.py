from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..attendance.status_resolver import StatusLabel
from ..core.enums import AttendanceStatus, Tier
from ..events.model import Event


@dataclass(frozen=True)
class RecapFilter:
    """Restricts the event population by year and/or month (1-12)."""

    year: Optional[int] = None
    month: Optional[int] = None

    def matches(self, event: Event) -> bool:
        if self.year is not None and event.starts_at.year != self.year:
            return False
        if self.month is not None and event.starts_at.month != self.month:
            return False
        return True


@dataclass(frozen=True)
class AssessmentResult:
    member_id: str
    full_name: str
    division_name: Optional[str]
    invited_count: int
    present_count: int
    excused_count: int
    absent_count: int
    percentage: float
    tier: Tier

    @property
    def never_attended(self) -> bool:
        """Invited at least once, present never. Overrides the tier badge."""
        return self.invited_count > 0 and self.present_count == 0

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "full_name": self.full_name,
            "division": self.division_name,
            "invited": self.invited_count,
            "present": self.present_count,
            "excused": self.excused_count,
            "absent": self.absent_count,
            "percentage": round(self.percentage, 1),
            "tier": self.tier.value,
            "never_attended": self.never_attended,
        }


@dataclass(frozen=True)
class EventSummary:
    event_id: str
    present: int = 0
    excused: int = 0
    absent: int = 0
    total: int = 0

    def to_dict(self) -> dict:
        return {
            "event_id": self.event_id,
            "present": self.present,
            "excused": self.excused,
            "absent": self.absent,
            "total": self.total,
        }


@dataclass(frozen=True)
class TrendPoint:
    event_id: str
    name: str
    starts_at: datetime
    present: int
    invited: int
    percentage: int


@dataclass(frozen=True)
class MemberHistoryRow:
    event: Event
    status: AttendanceStatus
    label: Optional[StatusLabel]
    check_in_time: Optional[datetime] = None
    leave_reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "event_id": self.event.event_id,
            "event_name": self.event.name,
            "date": self.event.starts_at.strftime("%Y-%m-%d %H:%M"),
            "status": self.status.value,
            "label": self.label.to_dict() if self.label else None,
            "check_in": self.check_in_time.strftime("%H:%M:%S") if self.check_in_time else "-",
            "leave_reason": self.leave_reason,
        }


@dataclass(frozen=True)
class RecapReport:
    results: list[AssessmentResult]
    counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"results": [r.to_dict() for r in self.results], "summary": self.counts}
