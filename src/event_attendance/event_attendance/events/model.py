from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from ..core.constants import DEFAULT_LATE_TOLERANCE_MINUTES, DEFAULT_SESSION_ID, DEFAULT_SESSION_NAME
from ..core.enums import EventStatus


@dataclass(frozen=True)
class EventSession:
    """A named check-in window inside one event (e.g. morning / evening)."""

    session_id: str
    name: str
    start_time: Optional[time] = None
    end_time: Optional[time] = None


DEFAULT_SESSION = EventSession(session_id=DEFAULT_SESSION_ID, name=DEFAULT_SESSION_NAME)


@dataclass(frozen=True)
class Event:
    """Domain entity: a scheduled event members are invited to."""

    event_id: str
    tenant_id: str
    name: str
    starts_at: datetime
    status: EventStatus = EventStatus.UPCOMING
    late_tolerance_minutes: Optional[int] = None
    sessions: tuple[EventSession, ...] = ()
    actual_start_time: Optional[datetime] = None
    location: Optional[str] = None
    description: Optional[str] = None
    event_type: Optional[str] = None

    @property
    def tolerance_minutes(self) -> int:
        if self.late_tolerance_minutes is None:
            return DEFAULT_LATE_TOLERANCE_MINUTES
        return max(int(self.late_tolerance_minutes), 0)

    @property
    def is_open(self) -> bool:
        return self.actual_start_time is not None

    @property
    def available_sessions(self) -> tuple[EventSession, ...]:
        return self.sessions or (DEFAULT_SESSION,)

    def get_session(self, session_id: Optional[str]) -> Optional[EventSession]:
        """Return the session by id; ``None`` id means the first session."""
        sessions = self.available_sessions
        if not session_id:
            return sessions[0]
        for s in sessions:
            if s.session_id == session_id:
                return s
        return None
