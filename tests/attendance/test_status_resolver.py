from datetime import datetime

from src.event_attendance.event_attendance.attendance.model import AttendanceRecord
from src.event_attendance.event_attendance.attendance.status_resolver import resolve_display_status
from src.event_attendance.event_attendance.core.enums import AttendanceStatus, LabelColor


def _rec(status, **kw):
    return AttendanceRecord(event_id="e1", member_id="m1", status=status, **kw)


def test_no_record_means_no_label(open_event):
    assert resolve_display_status(None, open_event) is None


def test_excused_and_absent_labels(open_event):
    excused = resolve_display_status(_rec(AttendanceStatus.EXCUSED), open_event)
    excused_late = resolve_display_status(_rec(AttendanceStatus.EXCUSED_LATE), open_event)
    absent = resolve_display_status(_rec(AttendanceStatus.ABSENT), open_event)

    assert (excused.text, excused.color) == ("Excused", LabelColor.WARNING)
    assert excused_late.text == "Excused (Late)"
    assert (absent.text, absent.color) == ("Absent", LabelColor.DANGER)


def test_present_without_scan_is_manual(open_event):
    label = resolve_display_status(_rec(AttendanceStatus.PRESENT_LATE), open_event)

    assert label.text == "Present (manual)"
    assert label.color == LabelColor.SUCCESS


def test_lateness_phrasing(open_event):
    on_time = resolve_display_status(
        _rec(AttendanceStatus.PRESENT, check_in_time=datetime(2026, 3, 14, 8, 55)), open_event
    )
    within = resolve_display_status(
        _rec(AttendanceStatus.PRESENT, check_in_time=datetime(2026, 3, 14, 9, 10)), open_event
    )
    late = resolve_display_status(
        _rec(AttendanceStatus.PRESENT_LATE, check_in_time=datetime(2026, 3, 14, 9, 20)), open_event
    )

    assert on_time.text == "On time"
    assert within.text == "Late (within tolerance, 10m)"
    assert within.color == LabelColor.WARNING
    assert late.text == "Late (20m)"
    assert late.color == LabelColor.DANGER
    assert late.to_dict() == {"label": "Late (20m)", "color": "danger", "late_minutes": 20}


def test_session_log_time_is_used_for_that_session(two_session_event):
    rec = _rec(
        AttendanceStatus.PRESENT,
        check_in_time=datetime(2026, 3, 14, 18, 5),
        logs={"morning": datetime(2026, 3, 14, 8, 30), "evening": datetime(2026, 3, 14, 18, 5)},
    )

    assert resolve_display_status(rec, two_session_event, "morning").text == "Late (30m)"
    assert resolve_display_status(rec, two_session_event, "evening").text == "Late (within tolerance, 5m)"


def test_without_session_the_latest_scan_session_is_used(two_session_event):
    rec = _rec(
        AttendanceStatus.PRESENT,
        check_in_time=datetime(2026, 3, 14, 18, 5),
        logs={"morning": datetime(2026, 3, 14, 8, 30), "evening": datetime(2026, 3, 14, 18, 5)},
    )

    assert rec.check_in_session_id == "evening"
    assert resolve_display_status(rec, two_session_event).text == "Late (within tolerance, 5m)"


def test_stored_check_in_time_without_microseconds_still_matches_its_session(two_session_event):
    rec = _rec(
        AttendanceStatus.PRESENT_LATE,
        check_in_time=datetime(2026, 3, 14, 8, 30),
        logs={"morning": datetime(2026, 3, 14, 8, 30, 0, 400000)},
    )

    assert rec.check_in_session_id == "morning"
    assert resolve_display_status(rec, two_session_event).text == "Late (30m)"
