from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.aggregator import AttendanceAggregator
from .attendance.factory import PercentagePolicyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.mysql_roster_repository import MySQLRosterRepository
from .attendance.repository import AttendanceRecordRepository, RosterRepository
from .attendance.service import AttendanceReportService
from .database.connection import DBConfig, DatabaseConnection


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    attendance_repo: AttendanceRecordRepository
    roster_repo: RosterRepository

    aggregator: AttendanceAggregator
    report_service: AttendanceReportService


def build_container(*, db_config: dict, policy_name: Optional[str] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    attendance_repo = MySQLAttendanceRepository(conn)
    roster_repo = MySQLRosterRepository(conn)

    aggregator = AttendanceAggregator(PercentagePolicyFactory().for_name(policy_name))
    report_service = AttendanceReportService(attendance_repo, roster_repo, aggregator=aggregator)

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        roster_repo=roster_repo,
        aggregator=aggregator,
        report_service=report_service,
    )
