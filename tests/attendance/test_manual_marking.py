from dataclasses import replace
from datetime import datetime

import pytest

from src.event_attendance.event_attendance.attendance.service import AttendanceService
from src.event_attendance.event_attendance.core.enums import AttendanceStatus
from src.event_attendance.event_attendance.core.exceptions import (
    NotFoundError,
    SessionNotOpenError,
    UnknownMemberError,
    ValidationError,
)

TENANT = "t1"


@pytest.fixture
def service(attendance_repo, events_repo, members_repo):
    return AttendanceService(attendance_repo, events_repo, members_repo)


def test_manual_present_without_scan_has_no_check_in_time(service, attendance_repo):
    attendance_repo.seed("e1", "m1")

    rec = service.mark_status(tenant_id=TENANT, event_id="e1", member_id="m1", status="Present")

    assert rec.status == AttendanceStatus.PRESENT
    assert rec.check_in_time is None
    assert attendance_repo.rows[("e1", "m1")] == rec


def test_manual_present_rederives_late_variant_from_scan(service, attendance_repo):
    attendance_repo.seed("e1", "m1", check_in_time=datetime(2026, 3, 14, 9, 40))

    rec = service.mark_status(tenant_id=TENANT, event_id="e1", member_id="m1", status="Present")

    assert rec.status == AttendanceStatus.PRESENT_LATE


def test_manual_excused_keeps_reason(service, attendance_repo):
    rec = service.mark_status(
        tenant_id=TENANT, event_id="e1", member_id="m2", status="Excused", leave_reason="sick"
    )

    assert rec.status == AttendanceStatus.EXCUSED
    assert rec.leave_reason == "sick"


def test_manual_absent_clears_check_in_but_keeps_logs(service, attendance_repo):
    scanned = datetime(2026, 3, 14, 9, 5)
    attendance_repo.seed(
        "e1", "m1", status=AttendanceStatus.PRESENT, check_in_time=scanned, logs={"default": scanned}
    )

    rec = service.mark_status(tenant_id=TENANT, event_id="e1", member_id="m1", status="Absent")

    assert rec.status == AttendanceStatus.ABSENT
    assert rec.check_in_time is None
    assert rec.logs == {"default": scanned}


def test_manual_mark_requires_open_event(service, events_repo, open_event):
    events_repo.add(replace(open_event, actual_start_time=None))

    with pytest.raises(SessionNotOpenError):
        service.mark_status(tenant_id=TENANT, event_id="e1", member_id="m1", status="Present")


def test_manual_mark_rejects_bad_input(service):
    with pytest.raises(ValidationError):
        service.mark_status(tenant_id=TENANT, event_id="e1", member_id="m1", status="PresentLate")
    with pytest.raises(UnknownMemberError):
        service.mark_status(tenant_id=TENANT, event_id="e1", member_id="x1", status="Present")
    with pytest.raises(NotFoundError):
        service.mark_status(tenant_id="t2", event_id="e1", member_id="x1", status="Present")


def test_reset_deletes_record(service, attendance_repo):
    attendance_repo.seed("e1", "m1", status=AttendanceStatus.PRESENT)

    service.reset(tenant_id=TENANT, event_id="e1", member_id="m1")

    assert ("e1", "m1") not in attendance_repo.rows
    with pytest.raises(NotFoundError):
        service.reset(tenant_id=TENANT, event_id="e1", member_id="m1")
