from __future__ import annotations

from dataclasses import dataclass

from .classifier import Punctuality
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, punctuality: Punctuality) -> AttendanceStrategy:
        if punctuality.is_late:
            return LateStrategy()
        return NormalStrategy()
