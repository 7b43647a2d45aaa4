from __future__ import annotations

from ...core.enums import AttendanceStatus, Disposition
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in (early, exact, or inside the tolerance)."""

    def decide(self, disposition: Disposition) -> StatusDecision:
        if disposition == Disposition.EXCUSED:
            return StatusDecision(status=AttendanceStatus.EXCUSED)
        return StatusDecision(status=AttendanceStatus.PRESENT)
