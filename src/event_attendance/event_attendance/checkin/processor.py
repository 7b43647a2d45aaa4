"""Check-in state machine.

Idle -> Resolved -> Staged -> Committed | Abandoned | Error

Every transition is a pure function returning the next ``CheckInStep``; the
only side effect, the attendance upsert, is described by ``step.effect`` and
performed by the caller. Driving a transition from the wrong state raises
``InvalidTransitionError``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..attendance.classifier import classify_for_event
from ..attendance.factory import AttendanceStrategyFactory
from ..attendance.model import AttendanceRecord
from ..attendance.status_resolver import resolve_display_status
from ..core.enums import AttendanceStatus, CheckInState, Disposition, EventStatus, OutcomeLevel
from ..core.exceptions import DomainError, InvalidTransitionError, SessionNotOpenError, UnknownSessionError
from ..events.model import Event
from ..members.model import Member
from .model import CheckInStep, Outcome

_LEVELS = {
    AttendanceStatus.PRESENT: OutcomeLevel.SUCCESS,
    AttendanceStatus.PRESENT_LATE: OutcomeLevel.WARNING,
    AttendanceStatus.EXCUSED: OutcomeLevel.INFO,
    AttendanceStatus.EXCUSED_LATE: OutcomeLevel.INFO,
}


def require_state(step: CheckInStep, *states: CheckInState) -> None:
    if step.state not in states:
        allowed = "/".join(s.value for s in states)
        raise InvalidTransitionError(f"Check-in is {step.state.value}, expected {allowed}")


def begin(event: Event) -> CheckInStep:
    return CheckInStep(state=CheckInState.IDLE, event=event)


def resolve(step: CheckInStep, member: Member, session_id: Optional[str] = None) -> CheckInStep:
    require_state(step, CheckInState.IDLE)
    session = step.event.get_session(session_id)
    if session is None:
        return mark_failed(step.evolve(member=member), UnknownSessionError(f"Unknown session: {session_id}"))
    return step.evolve(state=CheckInState.RESOLVED, member=member, session=session)


def stage(step: CheckInStep, *, now: datetime, factory: AttendanceStrategyFactory) -> CheckInStep:
    require_state(step, CheckInState.RESOLVED)
    event = step.event
    if event.status == EventStatus.CANCELLED:
        return mark_failed(step, SessionNotOpenError("session not open: event cancelled"))
    if not event.is_open:
        return mark_failed(step, SessionNotOpenError("session not open"))

    punctuality = classify_for_event(event, now, step.session.session_id)
    strategy = factory.for_checkin(punctuality=punctuality)
    options = tuple((d.value, strategy.decide(d).status) for d in Disposition)
    return step.evolve(state=CheckInState.STAGED, punctuality=punctuality, options=options)


def plan_commit(
    step: CheckInStep,
    *,
    disposition: Disposition,
    now: datetime,
    existing: Optional[AttendanceRecord],
    factory: AttendanceStrategyFactory,
    leave_reason: Optional[str] = None,
) -> CheckInStep:
    """Describe the upsert for the confirmed disposition.

    Lateness is re-classified at ``now`` so the stored status always matches
    what ``check_in_time`` re-derives to.
    """
    require_state(step, CheckInState.STAGED)
    event, member, session = step.event, step.member, step.session

    punctuality = classify_for_event(event, now, session.session_id)
    status = factory.for_checkin(punctuality=punctuality).decide(disposition).status

    base = existing or AttendanceRecord.placeholder(event.event_id, member.member_id)
    record = base.evolve(
        status=status,
        check_in_time=now,
        logs=base.with_session_log(session.session_id, now),
        leave_reason=(leave_reason or None) if disposition == Disposition.EXCUSED else None,
    )
    return step.evolve(punctuality=punctuality, effect=record)


def mark_committed(step: CheckInStep) -> CheckInStep:
    require_state(step, CheckInState.STAGED)
    if step.effect is None:
        raise InvalidTransitionError("Nothing planned to commit")

    record = step.effect
    label = resolve_display_status(record, step.event, step.session.session_id)
    outcome = Outcome(
        level=_LEVELS[record.status],
        message=f"{step.member.full_name} ({step.session.name}): {label.text}",
        member_id=step.member.member_id,
        status=record.status,
        label=label,
    )
    return step.evolve(state=CheckInState.COMMITTED, outcome=outcome)


def mark_failed(step: CheckInStep, error: DomainError) -> CheckInStep:
    if step.is_terminal:
        raise InvalidTransitionError(f"Check-in already {step.state.value}")
    member_id = step.member.member_id if step.member else None
    return step.evolve(state=CheckInState.ERROR, effect=None, outcome=Outcome.from_error(error, member_id=member_id))


def abandon(step: CheckInStep) -> CheckInStep:
    require_state(step, CheckInState.RESOLVED, CheckInState.STAGED)
    return step.evolve(
        state=CheckInState.ABANDONED,
        effect=None,
        outcome=Outcome(level=OutcomeLevel.INFO, message="Check-in cancelled, nothing recorded"),
    )
