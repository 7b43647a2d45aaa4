from __future__ import annotations

from ...core.enums import AttendanceStatus, Disposition
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in (beyond the tolerance)."""

    def decide(self, disposition: Disposition) -> StatusDecision:
        if disposition == Disposition.EXCUSED:
            return StatusDecision(status=AttendanceStatus.EXCUSED_LATE)
        return StatusDecision(status=AttendanceStatus.PRESENT_LATE)
