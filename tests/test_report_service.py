from __future__ import annotations

import csv
import io
import logging
from datetime import date

import pytest

from src.campus_attendance.campus_attendance.attendance.aggregator import AttendanceAggregator
from src.campus_attendance.campus_attendance.attendance.policies.present_or_late import PresentOrLatePolicy
from src.campus_attendance.campus_attendance.attendance.service import AttendanceReportService
from src.campus_attendance.campus_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError

from tests.fakes import InMemoryAttendanceRecords, mark


def test_subject_report_summaries_and_overall(attendance_repo, roster_repo):
    svc = AttendanceReportService(attendance_repo, roster_repo)

    report = svc.build_subject_report("sub-1")

    assert attendance_repo.last_args["subject_id"] == "sub-1"
    assert [s.student_id for s in report.summaries] == ["stu-s", "stu-t"]
    assert report.summaries[0].attendance_percentage == 50
    assert report.overall.total_distinct_sessions == 4
    assert report.overall.total_students == 2
    assert report.overall.total_attendance_entries == 4
    assert report.overall.overall_attendance_percentage == 50
    assert report.session_dates[0] == date(2024, 3, 4)


def test_subject_report_for_one_session(attendance_repo, roster_repo):
    svc = AttendanceReportService(attendance_repo, roster_repo)

    report = svc.build_subject_report("sub-1", on=date(2024, 3, 7))

    sam = report.summaries[0]
    assert (sam.present_count, sam.late_count) == (0, 1)
    assert report.overall.total_distinct_sessions == 1
    # The date dropdown still lists every session.
    assert len(report.session_dates) == 4


def test_unknown_subject_raises_not_found(attendance_repo, roster_repo):
    svc = AttendanceReportService(attendance_repo, roster_repo)

    with pytest.raises(NotFoundError):
        svc.build_subject_report("missing")


def test_subject_report_as_dict_shape(attendance_repo, roster_repo):
    data = AttendanceReportService(attendance_repo, roster_repo).build_subject_report("sub-1").as_dict()

    assert data["subjectInfo"]["code"] == "MATH101"
    assert data["studentAttendanceSummaries"][0]["band"] == "WARNING"
    assert data["studentAttendanceSummaries"][1]["band"] == "LOW"
    assert data["overallReportStats"]["totalDistinctSessions"] == 4
    assert data["availableDates"][0] == "2024-03-04"


def test_export_subject_csv(attendance_repo, roster_repo):
    export = AttendanceReportService(attendance_repo, roster_repo).export_subject_csv("sub-1")

    assert export.filename == "MATH101_attendance_report.csv"
    rows = list(csv.reader(io.StringIO(export.content)))
    assert len(rows) == 3
    assert rows[1][0] == "Sam Rivera"
    assert rows[2][-1] == "0%"


def test_course_report_includes_subject_rollups(attendance_repo, roster_repo):
    report = AttendanceReportService(attendance_repo, roster_repo).build_course_report("crs-1")

    assert attendance_repo.last_args["course_id"] == "crs-1"
    assert [r.scope_id for r in report.subjects] == ["sub-1", "sub-2"]
    assert report.overall.total_distinct_sessions == 5
    tara = report.summaries[1]
    assert (tara.present_count, tara.attendance_percentage) == (1, 100)


def test_student_report_forwards_date_range(attendance_repo, roster_repo):
    svc = AttendanceReportService(attendance_repo, roster_repo)

    report = svc.build_student_report("stu-s", start=date(2024, 3, 4), end=date(2024, 3, 5))

    assert attendance_repo.last_args["start"] == date(2024, 3, 4)
    assert attendance_repo.last_args["end"] == date(2024, 3, 5)
    assert [r.record_id for r in report.records] == ["r1", "r2", "r5"]
    assert report.overall.total_attendance_entries == 3
    assert report.overall.overall_attendance_percentage == 67


def test_student_report_status_filter(attendance_repo, roster_repo):
    report = AttendanceReportService(attendance_repo, roster_repo).build_student_report("stu-s", status="ABSENT")

    assert [r.record_id for r in report.records] == ["r3", "r5"]
    assert report.as_dict()["summary"] == {"total": 2, "present": 0, "absent": 2, "late": 0, "percentage": 0}


def test_student_report_rejects_inverted_range(attendance_repo, roster_repo):
    svc = AttendanceReportService(attendance_repo, roster_repo)

    with pytest.raises(ValidationError):
        svc.build_student_report("stu-s", start=date(2024, 3, 9), end=date(2024, 3, 1))
    assert attendance_repo.last_args is None


def test_service_uses_injected_policy(attendance_repo, roster_repo):
    svc = AttendanceReportService(
        attendance_repo,
        roster_repo,
        aggregator=AttendanceAggregator(PresentOrLatePolicy()),
    )

    report = svc.build_subject_report("sub-1")

    assert report.summaries[0].attendance_percentage == 75


def test_subject_report_with_no_date_covers_every_session(attendance_repo, roster_repo):
    svc = AttendanceReportService(attendance_repo, roster_repo)

    report = svc.build_subject_report("sub-1", on=None)
    export = svc.export_subject_csv("sub-1", on=None)

    assert report.overall.total_distinct_sessions == 4
    assert report.overall == svc.build_subject_report("sub-1", on="all").overall
    assert export.content.count("\n") == 3
    assert svc.build_course_report("crs-1", on=None).overall.total_attendance_entries == 6


def test_unknown_student_raises_not_found(attendance_repo, roster_repo):
    svc = AttendanceReportService(attendance_repo, roster_repo)

    with pytest.raises(NotFoundError, match="Student no-such-student not found"):
        svc.build_student_report("no-such-student")
    assert attendance_repo.last_args is None


def test_faculty_scope_on_subject_reports(attendance_repo, roster_repo):
    svc = AttendanceReportService(attendance_repo, roster_repo)

    # Subject teacher and course owner both pass; anyone else is refused.
    assert svc.build_subject_report("sub-2", faculty_id="fac-2").subject.code == "PHY110"
    assert svc.build_subject_report("sub-2", faculty_id="fac-1").subject.code == "PHY110"
    with pytest.raises(AuthorizationError):
        svc.build_subject_report("sub-1", faculty_id="fac-2")
    with pytest.raises(AuthorizationError):
        svc.export_subject_csv("sub-1", faculty_id="fac-9")
    assert attendance_repo.last_args["subject_id"] == "sub-2"


def test_faculty_scope_on_course_report(attendance_repo, roster_repo):
    svc = AttendanceReportService(attendance_repo, roster_repo)

    assert svc.build_course_report("crs-1", faculty_id="fac-1").course_id == "crs-1"
    with pytest.raises(AuthorizationError):
        svc.build_course_report("crs-1", faculty_id="fac-2")
    with pytest.raises(NotFoundError):
        svc.build_course_report("crs-404")


def test_unrecognized_status_is_logged_once_per_report(roster_repo, caplog):
    repo = InMemoryAttendanceRecords(
        [
            mark("r1", "stu-s", date(2024, 3, 4), "PRESENT"),
            mark("r2", "stu-t", date(2024, 3, 4), "EXCUSED"),
        ]
    )
    svc = AttendanceReportService(repo, roster_repo)

    with caplog.at_level(logging.WARNING):
        svc.build_subject_report("sub-1")
    warnings = [r for r in caplog.records if "unrecognized status" in r.getMessage()]
    assert len(warnings) == 1

    caplog.clear()
    with caplog.at_level(logging.WARNING):
        svc.build_course_report("crs-1")
    warnings = [r for r in caplog.records if "unrecognized status" in r.getMessage()]
    assert len(warnings) == 1


def test_rollups_carry_subject_name_and_code(attendance_repo, roster_repo):
    svc = AttendanceReportService(attendance_repo, roster_repo)

    student = svc.build_student_report("stu-s").as_dict()
    course = svc.build_course_report("crs-1")

    assert [(s["name"], s["code"]) for s in student["subjects"]] == [
        ("Linear Algebra", "MATH101"),
        ("Mechanics", "PHY110"),
    ]
    assert [r.name for r in course.subjects] == ["Linear Algebra", "Mechanics"]
