from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from ..attendance.classifier import Punctuality
from ..attendance.model import AttendanceRecord
from ..attendance.status_resolver import StatusLabel
from ..core.enums import AttendanceStatus, CheckInState, OutcomeLevel
from ..core.exceptions import DomainError
from ..events.model import Event, EventSession
from ..members.model import Member


@dataclass(frozen=True)
class Outcome:
    """What the operator sees after a check-in attempt."""

    level: OutcomeLevel
    message: str
    error_code: Optional[str] = None
    member_id: Optional[str] = None
    status: Optional[AttendanceStatus] = None
    label: Optional[StatusLabel] = None

    @property
    def ok(self) -> bool:
        return self.level != OutcomeLevel.ERROR

    @classmethod
    def from_error(cls, error: DomainError, *, member_id: Optional[str] = None) -> "Outcome":
        return cls(level=OutcomeLevel.ERROR, message=str(error), error_code=error.code, member_id=member_id)

    def to_dict(self) -> dict:
        return {
            "success": self.ok,
            "level": self.level.value,
            "message": self.message,
            "error_code": self.error_code,
            "member_id": self.member_id,
            "status": self.status.value if self.status else None,
            "label": self.label.to_dict() if self.label else None,
        }


@dataclass(frozen=True)
class CheckInStep:
    """One state of a single scan attempt.

    ``options`` is filled when staged (disposition -> resulting status);
    ``effect`` holds the record to upsert once a commit is planned.
    """

    state: CheckInState
    event: Optional[Event] = None
    session: Optional[EventSession] = None
    member: Optional[Member] = None
    punctuality: Optional[Punctuality] = None
    options: tuple[tuple[str, AttendanceStatus], ...] = ()
    effect: Optional[AttendanceRecord] = None
    outcome: Optional[Outcome] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (CheckInState.COMMITTED, CheckInState.ABANDONED, CheckInState.ERROR)

    def evolve(self, **changes) -> "CheckInStep":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        data: dict = {"state": self.state.value}
        if self.event:
            data["event_id"] = self.event.event_id
        if self.session:
            data["session"] = {"id": self.session.session_id, "name": self.session.name}
        if self.member:
            data["member"] = {
                "id": self.member.member_id,
                "name": self.member.full_name,
                "division": self.member.division_name,
            }
        if self.punctuality:
            data["late_minutes"] = self.punctuality.late_minutes
            data["is_late"] = self.punctuality.is_late
        if self.options:
            data["options"] = {disposition: status.value for disposition, status in self.options}
        if self.outcome:
            data["outcome"] = self.outcome.to_dict()
        return data
