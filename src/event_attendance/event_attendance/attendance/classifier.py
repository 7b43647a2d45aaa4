"""Punctuality classification.

Pure functions: a reference start, an observed instant and a tolerance in
minutes go in, a ``Punctuality`` verdict comes out. Both the check-in flow and
the status resolver go through here so lateness is computed one way only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import on_same_day
from ..core.constants import DEFAULT_LATE_TOLERANCE_MINUTES
from ..events.model import Event

_MINUTE = timedelta(minutes=1)


@dataclass(frozen=True)
class Punctuality:
    late_minutes: int
    is_late: bool

    @property
    def within_tolerance(self) -> bool:
        """Arrived after the start but inside the grace period."""
        return self.late_minutes > 0 and not self.is_late


def normalize_tolerance(tolerance_minutes: Optional[int]) -> int:
    if tolerance_minutes is None:
        return DEFAULT_LATE_TOLERANCE_MINUTES
    return max(int(tolerance_minutes), 0)


def classify(reference_start: datetime, observed: datetime, tolerance_minutes: Optional[int] = None) -> Punctuality:
    tolerance = normalize_tolerance(tolerance_minutes)
    elapsed = observed - reference_start
    # Floor division of timedelta floors toward -inf, so 30s early is -1.
    late_minutes = int(elapsed // _MINUTE)
    is_late = late_minutes > 0 and elapsed > timedelta(minutes=tolerance)
    return Punctuality(late_minutes=late_minutes, is_late=is_late)


def reference_start(event: Event, session_id: Optional[str] = None) -> datetime:
    """Session start on the event's calendar date, else the event start."""
    session = event.get_session(session_id) if session_id else None
    if session is None or session.start_time is None:
        return event.starts_at
    return on_same_day(event.starts_at, session.start_time)


def classify_for_event(event: Event, observed: datetime, session_id: Optional[str] = None) -> Punctuality:
    return classify(reference_start(event, session_id), observed, event.tolerance_minutes)
