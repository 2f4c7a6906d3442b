from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one mark for one student in one session.

    ``status`` is kept as the raw stored string so that values outside
    PRESENT/ABSENT/LATE can reach the aggregator and be reported, rather than
    blowing up while rows are being loaded.
    """

    record_id: str
    student_id: str
    date: date
    status: str
    subject_id: Optional[str] = None
    course_id: Optional[str] = None
    remarks: Optional[str] = None


@dataclass(frozen=True)
class RosterEntry:
    student_id: str
    display_name: str
    enrollment_id: str


@dataclass(frozen=True)
class SubjectInfo:
    subject_id: str
    name: str
    code: str
    course_id: Optional[str] = None
    course_name: Optional[str] = None
    faculty_id: Optional[str] = None
    course_faculty_id: Optional[str] = None

    def taught_by(self, faculty_id: Optional[str]) -> bool:
        """The subject's own teacher or the faculty member who owns its course."""
        if not faculty_id:
            return False
        return faculty_id in {self.faculty_id, self.course_faculty_id}


@dataclass(frozen=True)
class CourseInfo:
    course_id: str
    name: str
    code: str
    faculty_id: Optional[str] = None


@dataclass(frozen=True)
class StatusCounts:
    present: int = 0
    absent: int = 0
    late: int = 0

    @property
    def total(self) -> int:
        return self.present + self.absent + self.late


@dataclass(frozen=True)
class StudentAttendanceSummary:
    """Read-model: per-student statistics for one scope."""

    student_id: str
    student_name: str
    enrollment_id: str
    present_count: int
    absent_count: int
    late_count: int
    attendance_percentage: int

    @property
    def total_marked(self) -> int:
        return self.present_count + self.absent_count + self.late_count

    @property
    def sessions_attended(self) -> int:
        return self.total_marked

    def as_dict(self) -> dict:
        return {
            "studentId": self.student_id,
            "studentName": self.student_name,
            "enrollmentId": self.enrollment_id,
            "presentCount": self.present_count,
            "absentCount": self.absent_count,
            "lateCount": self.late_count,
            "totalSessionsAttendedByStudent": self.sessions_attended,
            "attendancePercentage": self.attendance_percentage,
        }


@dataclass(frozen=True)
class OverallStatistics:
    total_distinct_sessions: int
    total_students: int
    total_attendance_entries: int
    total_present_overall: int
    total_absent_overall: int
    total_late_overall: int
    overall_attendance_percentage: int

    def as_dict(self) -> dict:
        return {
            "totalDistinctSessions": self.total_distinct_sessions,
            "totalStudents": self.total_students,
            "totalAttendanceEntries": self.total_attendance_entries,
            "totalPresentOverall": self.total_present_overall,
            "totalAbsentOverall": self.total_absent_overall,
            "totalLateOverall": self.total_late_overall,
            "overallAttendancePercentage": self.overall_attendance_percentage,
        }


@dataclass(frozen=True)
class ScopeRollup:
    """Per-subject (or per-course) rollup for one student's records."""

    scope_id: Optional[str]
    present_count: int
    absent_count: int
    late_count: int
    percentage: int
    last_recorded: Optional[date]
    name: Optional[str] = None
    code: Optional[str] = None

    @property
    def total_classes(self) -> int:
        return self.present_count + self.absent_count + self.late_count

    def as_dict(self) -> dict:
        return {
            "id": self.scope_id,
            "name": self.name,
            "code": self.code,
            "stats": {
                "presentCount": self.present_count,
                "absentCount": self.absent_count,
                "lateCount": self.late_count,
                "totalClasses": self.total_classes,
                "percentage": self.percentage,
            },
            "lastUpdated": self.last_recorded.isoformat() if self.last_recorded else None,
        }
