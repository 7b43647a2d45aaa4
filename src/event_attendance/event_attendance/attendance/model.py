from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one member's attendance at one event.

    ``(event_id, member_id)`` is unique. ``logs`` maps a session id to the
    instant that session's check-in happened.
    """

    event_id: str
    member_id: str
    status: AttendanceStatus = AttendanceStatus.ABSENT
    check_in_time: Optional[datetime] = None
    leave_reason: Optional[str] = None
    logs: dict[str, datetime] = field(default_factory=dict)

    @property
    def key(self) -> tuple[str, str]:
        return (self.event_id, self.member_id)

    @classmethod
    def placeholder(cls, event_id: str, member_id: str) -> "AttendanceRecord":
        """Invitation row inserted by roster reconciliation."""
        return cls(event_id=event_id, member_id=member_id, status=AttendanceStatus.ABSENT)

    @property
    def check_in_session_id(self) -> Optional[str]:
        """Session of the latest scan: the log entry matching ``check_in_time``.

        The store keeps whole seconds for ``check_in_time``, so a sub-second
        difference still counts as the same scan.
        """
        if self.check_in_time is None:
            return None
        best = None
        for session_id, at in self.logs.items():
            gap = abs(at - self.check_in_time)
            if gap < timedelta(seconds=1) and (best is None or gap < best[0]):
                best = (gap, session_id)
        return best[1] if best else None

    def with_session_log(self, session_id: str, at: datetime) -> dict[str, datetime]:
        """Merged logs: other sessions kept, this session overwritten."""
        merged = dict(self.logs)
        merged[session_id] = at
        return merged

    def evolve(self, **changes) -> "AttendanceRecord":
        return replace(self, **changes)
