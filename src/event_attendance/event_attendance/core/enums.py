from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the event_attendance table."""

    PRESENT = "Present"
    PRESENT_LATE = "PresentLate"
    EXCUSED = "Excused"
    EXCUSED_LATE = "ExcusedLate"
    ABSENT = "Absent"

    @property
    def is_present(self) -> bool:
        return self in (AttendanceStatus.PRESENT, AttendanceStatus.PRESENT_LATE)

    @property
    def is_excused(self) -> bool:
        return self in (AttendanceStatus.EXCUSED, AttendanceStatus.EXCUSED_LATE)


class Disposition(str, Enum):
    """What the operator confirms for a staged check-in."""

    PRESENT = "Present"
    EXCUSED = "Excused"


class EventStatus(str, Enum):
    UPCOMING = "Upcoming"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class Tier(str, Enum):
    """Qualitative activity bucket used by the recap."""

    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"
    NONE = "NONE"


class OutcomeLevel(str, Enum):
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    INFO = "INFO"
    ERROR = "ERROR"


class LabelColor(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


class CheckInState(str, Enum):
    IDLE = "Idle"
    RESOLVED = "Resolved"
    STAGED = "Staged"
    COMMITTED = "Committed"
    ABANDONED = "Abandoned"
    ERROR = "Error"
