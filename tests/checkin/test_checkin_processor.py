from datetime import datetime

import pytest

from src.event_attendance.event_attendance.attendance.factory import AttendanceStrategyFactory
from src.event_attendance.event_attendance.checkin import processor
from src.event_attendance.event_attendance.core.enums import AttendanceStatus, CheckInState, Disposition, OutcomeLevel
from src.event_attendance.event_attendance.core.exceptions import InvalidTransitionError

FACTORY = AttendanceStrategyFactory()


def _staged(event, member, now, session_id=None):
    step = processor.resolve(processor.begin(event), member, session_id)
    return processor.stage(step, now=now, factory=FACTORY)


def test_stage_offers_late_variants_when_late(open_event, members):
    step = _staged(open_event, members[0], datetime(2026, 3, 14, 9, 20))

    assert step.state == CheckInState.STAGED
    assert step.punctuality.is_late is True
    assert step.punctuality.late_minutes == 20
    assert dict(step.options) == {"Present": AttendanceStatus.PRESENT_LATE, "Excused": AttendanceStatus.EXCUSED_LATE}
    assert step.effect is None


def test_plan_commit_describes_a_single_upsert(open_event, members):
    now = datetime(2026, 3, 14, 9, 10)
    step = processor.plan_commit(
        _staged(open_event, members[0], now), disposition=Disposition.PRESENT, now=now, existing=None, factory=FACTORY
    )

    assert step.effect.key == ("e1", "m1")
    assert step.effect.status == AttendanceStatus.PRESENT
    assert step.effect.check_in_time == now
    assert step.effect.logs == {"default": now}


def test_commit_merges_logs_of_other_sessions(two_session_event, members):
    morning = datetime(2026, 3, 14, 8, 2)
    first = processor.plan_commit(
        _staged(two_session_event, members[0], morning, "morning"),
        disposition=Disposition.PRESENT,
        now=morning,
        existing=None,
        factory=FACTORY,
    ).effect

    evening = datetime(2026, 3, 14, 18, 30)
    second = processor.plan_commit(
        _staged(two_session_event, members[0], evening, "evening"),
        disposition=Disposition.PRESENT,
        now=evening,
        existing=first,
        factory=FACTORY,
    ).effect

    assert second.logs == {"morning": morning, "evening": evening}
    assert second.status == AttendanceStatus.PRESENT_LATE


def test_excused_outcome_is_info_with_reason(open_event, members):
    now = datetime(2026, 3, 14, 9, 30)
    planned = processor.plan_commit(
        _staged(open_event, members[1], now),
        disposition=Disposition.EXCUSED,
        now=now,
        existing=None,
        factory=FACTORY,
        leave_reason="flat tyre",
    )
    done = processor.mark_committed(planned)

    assert done.state == CheckInState.COMMITTED
    assert done.effect.status == AttendanceStatus.EXCUSED_LATE
    assert done.effect.leave_reason == "flat tyre"
    assert done.outcome.level == OutcomeLevel.INFO
    assert done.outcome.message == "Budi Santoso (Attendance): Excused (Late)"


def test_unknown_session_is_an_error_step(two_session_event, members):
    step = processor.resolve(processor.begin(two_session_event), members[0], "lunch")

    assert step.state == CheckInState.ERROR
    assert step.outcome.error_code == "UNKNOWN_SESSION"


def test_abandon_leaves_nothing_to_write(open_event, members):
    step = processor.abandon(_staged(open_event, members[0], datetime(2026, 3, 14, 9, 1)))

    assert step.state == CheckInState.ABANDONED
    assert step.effect is None
    assert step.outcome.level == OutcomeLevel.INFO


def test_transitions_from_wrong_state_are_refused(open_event, members):
    idle = processor.begin(open_event)

    with pytest.raises(InvalidTransitionError):
        processor.stage(idle, now=datetime(2026, 3, 14, 9, 0), factory=FACTORY)
    with pytest.raises(InvalidTransitionError):
        processor.abandon(idle)

    staged = _staged(open_event, members[0], datetime(2026, 3, 14, 9, 0))
    with pytest.raises(InvalidTransitionError):
        processor.mark_committed(staged)

    abandoned = processor.abandon(staged)
    with pytest.raises(InvalidTransitionError):
        processor.mark_failed(abandoned, InvalidTransitionError("late"))
