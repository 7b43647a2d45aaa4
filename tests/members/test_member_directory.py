import pytest

from src.event_attendance.event_attendance.core.exceptions import AmbiguousMemberError, UnknownMemberError
from src.event_attendance.event_attendance.members.cards import member_qr_png
from src.event_attendance.event_attendance.members.directory import MemberDirectory

TENANT = "t1"


@pytest.fixture
def directory(members_repo):
    return MemberDirectory(members_repo)


def test_scanned_code_needs_exact_id(directory):
    assert directory.resolve("  m2\n", tenant_id=TENANT).full_name == "Budi Santoso"

    with pytest.raises(UnknownMemberError):
        directory.resolve("Budi", tenant_id=TENANT)


def test_manual_entry_falls_back_to_name(directory):
    assert directory.resolve("HARTONO", tenant_id=TENANT, manual=True).member_id == "m1"


def test_manual_entry_ambiguous_or_missing(directory):
    with pytest.raises(AmbiguousMemberError):
        directory.resolve("a", tenant_id=TENANT, manual=True)
    with pytest.raises(UnknownMemberError):
        directory.resolve("zzz", tenant_id=TENANT, manual=True)
    with pytest.raises(UnknownMemberError):
        directory.resolve("   ", tenant_id=TENANT, manual=True)


def test_directory_is_tenant_scoped(directory):
    with pytest.raises(UnknownMemberError):
        directory.resolve("Other Tenant", tenant_id=TENANT, manual=True)
    assert directory.resolve("x1", tenant_id="t2").member_id == "x1"


def test_member_qr_card_is_png(members):
    buf = member_qr_png(members[0])

    assert buf.read(8) == b"\x89PNG\r\n\x1a\n"
