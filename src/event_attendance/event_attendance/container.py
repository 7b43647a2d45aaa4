from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .checkin.service import CheckInService
from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventRepository
from .events.repository import EventRepository
from .events.service import EventService
from .members.directory import MemberDirectory
from .members.mysql_member_repository import MySQLMemberRepository
from .members.repository import MemberRepository
from .recap.service import RecapService
from .roster.service import RosterService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    events_repo: EventRepository
    members_repo: MemberRepository
    attendance_repo: AttendanceRepository

    member_directory: MemberDirectory
    event_service: EventService
    roster_service: RosterService
    checkin_service: CheckInService
    attendance_service: AttendanceService
    recap_service: RecapService


def wire_services(
    *,
    events_repo: EventRepository,
    members_repo: MemberRepository,
    attendance_repo: AttendanceRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    factory = AttendanceStrategyFactory()
    directory = MemberDirectory(members_repo)

    return Container(
        conn=conn,
        events_repo=events_repo,
        members_repo=members_repo,
        attendance_repo=attendance_repo,
        member_directory=directory,
        event_service=EventService(events_repo),
        roster_service=RosterService(events_repo, members_repo, attendance_repo),
        checkin_service=CheckInService(events_repo, directory, attendance_repo, strategy_factory=factory),
        attendance_service=AttendanceService(attendance_repo, events_repo, members_repo, strategy_factory=factory),
        recap_service=RecapService(events_repo, members_repo, attendance_repo),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire_services(
        events_repo=MySQLEventRepository(conn),
        members_repo=MySQLMemberRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        conn=conn,
    )
