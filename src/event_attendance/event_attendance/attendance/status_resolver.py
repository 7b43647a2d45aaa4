"""Display labels for attendance records.

The live check-in screen and the historical recap both phrase lateness
through ``resolve_display_status``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AttendanceStatus, LabelColor
from ..events.model import Event
from .classifier import classify_for_event
from .model import AttendanceRecord


@dataclass(frozen=True)
class StatusLabel:
    text: str
    color: LabelColor
    late_minutes: Optional[int] = None

    def to_dict(self) -> dict:
        return {"label": self.text, "color": self.color.value, "late_minutes": self.late_minutes}


def resolve_display_status(
    record: Optional[AttendanceRecord],
    event: Event,
    session_id: Optional[str] = None,
) -> Optional[StatusLabel]:
    if record is None:
        return None

    status = record.status
    if status == AttendanceStatus.EXCUSED:
        return StatusLabel("Excused", LabelColor.WARNING)
    if status == AttendanceStatus.EXCUSED_LATE:
        return StatusLabel("Excused (Late)", LabelColor.WARNING)
    if status == AttendanceStatus.ABSENT:
        return StatusLabel("Absent", LabelColor.DANGER)

    # Without an explicit session, measure against the session of the latest scan.
    session_id = session_id or record.check_in_session_id
    observed = record.logs.get(session_id) if session_id else None
    observed = observed or record.check_in_time
    if observed is None:
        return StatusLabel("Present (manual)", LabelColor.SUCCESS)

    verdict = classify_for_event(event, observed, session_id)
    if verdict.is_late:
        return StatusLabel(f"Late ({verdict.late_minutes}m)", LabelColor.DANGER, verdict.late_minutes)
    if verdict.within_tolerance:
        return StatusLabel(
            f"Late (within tolerance, {verdict.late_minutes}m)", LabelColor.WARNING, verdict.late_minutes
        )
    return StatusLabel("On time", LabelColor.SUCCESS, max(verdict.late_minutes, 0))
