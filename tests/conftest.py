from __future__ import annotations

from datetime import date

import pytest

from src.campus_attendance.campus_attendance.attendance.model import CourseInfo, RosterEntry, SubjectInfo

from tests.fakes import InMemoryAttendanceRecords, InMemoryRoster, mark


@pytest.fixture
def roster():
    return [
        RosterEntry(student_id="stu-s", display_name="Sam Rivera", enrollment_id="E100"),
        RosterEntry(student_id="stu-t", display_name="Tara Singh", enrollment_id="E101"),
    ]


@pytest.fixture
def subject_records():
    # Sam has P, P, A, L over four sessions; Tara has nothing.
    return [
        mark("r1", "stu-s", date(2024, 3, 4), "PRESENT"),
        mark("r2", "stu-s", date(2024, 3, 5), "PRESENT"),
        mark("r3", "stu-s", date(2024, 3, 6), "ABSENT"),
        mark("r4", "stu-s", date(2024, 3, 7), "LATE", remarks="bus delay"),
    ]


@pytest.fixture
def math_subject():
    # fac-1 owns the course and teaches sub-1; fac-2 only teaches sub-2.
    return SubjectInfo(
        subject_id="sub-1",
        name="Linear Algebra",
        code="MATH101",
        course_id="crs-1",
        course_name="BSc Mathematics",
        faculty_id="fac-1",
        course_faculty_id="fac-1",
    )


@pytest.fixture
def attendance_repo(subject_records):
    extra = [
        mark("r5", "stu-s", date(2024, 3, 4), "ABSENT", subject_id="sub-2"),
        mark("r6", "stu-t", date(2024, 3, 4), "PRESENT", subject_id="sub-2"),
    ]
    return InMemoryAttendanceRecords(subject_records + extra)


@pytest.fixture
def roster_repo(math_subject, roster):
    physics = SubjectInfo(
        subject_id="sub-2",
        name="Mechanics",
        code="PHY110",
        course_id="crs-1",
        course_name="BSc Mathematics",
        faculty_id="fac-2",
        course_faculty_id="fac-1",
    )
    course = CourseInfo(course_id="crs-1", name="BSc Mathematics", code="BSCM", faculty_id="fac-1")
    return InMemoryRoster(
        {"sub-1": math_subject, "sub-2": physics},
        {"crs-1": roster},
        {"crs-1": course},
    )
