from datetime import datetime

import pytest

from src.event_attendance.event_attendance.checkin.service import CheckInService
from src.event_attendance.event_attendance.core.enums import AttendanceStatus, EventStatus, OutcomeLevel, Tier
from src.event_attendance.event_attendance.core.exceptions import NotFoundError
from src.event_attendance.event_attendance.events.model import Event
from src.event_attendance.event_attendance.members.directory import MemberDirectory
from src.event_attendance.event_attendance.recap.model import RecapFilter
from src.event_attendance.event_attendance.recap.service import RecapService

TENANT = "t1"


@pytest.fixture
def service(events_repo, members_repo, attendance_repo):
    return RecapService(events_repo, members_repo, attendance_repo)


@pytest.fixture
def history(events_repo, attendance_repo):
    events_repo.add(
        Event("e0", TENANT, "Kickoff", datetime(2026, 2, 1, 10), status=EventStatus.COMPLETED)
    )
    attendance_repo.seed("e0", "m1", status=AttendanceStatus.PRESENT, check_in_time=datetime(2026, 2, 1, 10, 25))
    attendance_repo.seed("e1", "m1", status=AttendanceStatus.PRESENT, check_in_time=datetime(2026, 3, 14, 8, 58))
    attendance_repo.seed("e0", "m2", status=AttendanceStatus.EXCUSED, leave_reason="travel")
    attendance_repo.seed("e1", "m2")
    attendance_repo.seed("e1", "m4", status=AttendanceStatus.PRESENT)


def test_build_recap_ranks_active_members(service, history):
    report = service.build_recap(tenant_id=TENANT)

    assert [r.member_id for r in report.results] == ["m1", "m2"]
    assert report.results[0].tier == Tier.EXCELLENT
    assert report.results[1].never_attended is True
    assert report.counts["NEVER_ATTENDED"] == 1


def test_build_recap_with_filter_and_search(service, history):
    report = service.build_recap(tenant_id=TENANT, recap_filter=RecapFilter(year=2026, month=2), search="media")

    assert [r.member_id for r in report.results] == ["m2"]
    assert report.results[0].invited_count == 1
    assert report.to_dict()["results"][0]["excused"] == 1


def test_member_history_newest_first_with_labels(service, history):
    rows = service.member_history(tenant_id=TENANT, member_id="m1")

    assert [r.event.event_id for r in rows] == ["e1", "e0"]
    assert rows[0].label.text == "On time"
    assert rows[1].label.text == "Late (25m)"
    assert rows[1].to_dict()["check_in"] == "10:25:00"


def test_member_history_labels_match_the_live_check_in_for_later_sessions(
    service, events_repo, members_repo, attendance_repo
):
    checkin = CheckInService(events_repo, MemberDirectory(members_repo), attendance_repo)
    live = checkin.process_check_in(
        tenant_id=TENANT, event_id="e2", code="m1", session_id="evening", now=datetime(2026, 3, 14, 18, 5)
    )

    rows = service.member_history(tenant_id=TENANT, member_id="m1")

    assert live.level == OutcomeLevel.SUCCESS
    assert [r.event.event_id for r in rows] == ["e2"]
    assert rows[0].status == AttendanceStatus.PRESENT
    assert rows[0].label.text == "Late (within tolerance, 5m)"


def test_member_history_of_unknown_member(service):
    with pytest.raises(NotFoundError):
        service.member_history(tenant_id=TENANT, member_id="x1")


def test_event_summary(service, history):
    summary = service.event_summary(tenant_id=TENANT, event_id="e1")

    assert (summary.present, summary.excused, summary.absent, summary.total) == (2, 0, 1, 3)
    with pytest.raises(NotFoundError):
        service.event_summary(tenant_id="t2", event_id="e1")


def test_trend_uses_completed_events_only(service, history):
    points = service.trend(tenant_id=TENANT)

    assert [p.event_id for p in points] == ["e0"]
    assert points[0].percentage == 50
