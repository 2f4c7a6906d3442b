from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

from ..common.validators import require_non_empty
from ..core.constants import ALL, REPORT_FILENAME_SUFFIX
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .aggregator import AttendanceAggregator, attendance_band
from .model import (
    AttendanceRecord,
    CourseInfo,
    OverallStatistics,
    ScopeRollup,
    StudentAttendanceSummary,
    SubjectInfo,
)
from .repository import AttendanceRecordRepository, RosterRepository

logger = logging.getLogger(__name__)


def _summary_row(s: StudentAttendanceSummary) -> dict:
    row = s.as_dict()
    row["band"] = attendance_band(s.attendance_percentage).value
    return row


def _record_row(r: AttendanceRecord) -> dict:
    return {
        "id": r.record_id,
        "studentId": r.student_id,
        "subjectId": r.subject_id,
        "courseId": r.course_id,
        "date": r.date.isoformat(),
        "status": r.status,
        "remarks": r.remarks,
    }


@dataclass(frozen=True)
class SubjectReport:
    subject: SubjectInfo
    summaries: list[StudentAttendanceSummary]
    overall: OverallStatistics
    session_dates: list[date] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "subjectInfo": {
                "id": self.subject.subject_id,
                "name": self.subject.name,
                "code": self.subject.code,
                "courseName": self.subject.course_name,
                "courseId": self.subject.course_id,
            },
            "studentAttendanceSummaries": [_summary_row(s) for s in self.summaries],
            "overallReportStats": self.overall.as_dict(),
            "availableDates": [d.isoformat() for d in self.session_dates],
        }


@dataclass(frozen=True)
class CourseReport:
    course_id: str
    summaries: list[StudentAttendanceSummary]
    overall: OverallStatistics
    subjects: list[ScopeRollup]

    def as_dict(self) -> dict:
        return {
            "courseId": self.course_id,
            "studentAttendanceSummaries": [_summary_row(s) for s in self.summaries],
            "overallReportStats": self.overall.as_dict(),
            "subjects": [r.as_dict() for r in self.subjects],
        }


@dataclass(frozen=True)
class StudentReport:
    student_id: str
    subjects: list[ScopeRollup]
    overall: OverallStatistics
    records: list[AttendanceRecord]

    def as_dict(self) -> dict:
        return {
            "studentId": self.student_id,
            "subjects": [r.as_dict() for r in self.subjects],
            "summary": {
                "total": self.overall.total_attendance_entries,
                "present": self.overall.total_present_overall,
                "absent": self.overall.total_absent_overall,
                "late": self.overall.total_late_overall,
                "percentage": self.overall.overall_attendance_percentage,
            },
            "attendanceRecords": [_record_row(r) for r in self.records],
        }


@dataclass(frozen=True)
class CsvExport:
    filename: str
    content: str


class AttendanceReportService:
    """Loads scoped records and rosters, then hands them to the aggregator.

    ``faculty_id`` on the faculty-facing reports restricts access to the
    subject's (or course's) own teachers; ``None`` means an unrestricted caller.
    """

    def __init__(
        self,
        records: AttendanceRecordRepository,
        roster: RosterRepository,
        *,
        aggregator: Optional[AttendanceAggregator] = None,
    ):
        self._records = records
        self._roster = roster
        self._aggregator = aggregator or AttendanceAggregator()

    def _require_subject(self, subject_id: str, faculty_id: Optional[str] = None) -> SubjectInfo:
        subject = self._roster.get_subject(require_non_empty(subject_id, "subject_id"))
        if not subject:
            raise NotFoundError(f"Subject {subject_id} not found")
        if faculty_id is not None and not subject.taught_by(faculty_id):
            raise AuthorizationError(f"Faculty {faculty_id} is not assigned to subject {subject_id}")
        return subject

    def _require_course(self, course_id: str, faculty_id: Optional[str] = None) -> CourseInfo:
        course = self._roster.get_course(require_non_empty(course_id, "course_id"))
        if not course:
            raise NotFoundError(f"Course {course_id} not found")
        if faculty_id is not None and course.faculty_id != faculty_id:
            raise AuthorizationError(f"Faculty {faculty_id} is not assigned to course {course_id}")
        return course

    def _name_rollups(self, rollups: list[ScopeRollup]) -> list[ScopeRollup]:
        named = []
        for rollup in rollups:
            subject = self._roster.get_subject(rollup.scope_id) if rollup.scope_id else None
            if subject:
                rollup = replace(rollup, name=subject.name, code=subject.code)
            named.append(rollup)
        return named

    def build_subject_report(
        self,
        subject_id: str,
        *,
        on: date | str | None = None,
        faculty_id: Optional[str] = None,
    ) -> SubjectReport:
        subject = self._require_subject(subject_id, faculty_id)
        records = list(self._records.find_records(subject_id=subject_id))
        roster = list(self._roster.list_active_students(subject_id=subject_id))

        scoped = self._aggregator.filter_by_date(records, on)
        summaries = self._aggregator.summarize_by_student(scoped, roster)
        overall = self._aggregator.summarize_overall(scoped, total_students=len(roster))

        logger.debug(
            "Subject report %s: %d record(s), %d student(s), %d session(s)",
            subject.code,
            overall.total_attendance_entries,
            overall.total_students,
            overall.total_distinct_sessions,
        )
        return SubjectReport(
            subject=subject,
            summaries=summaries,
            overall=overall,
            session_dates=self._aggregator.session_dates(records),
        )

    def export_subject_csv(
        self,
        subject_id: str,
        *,
        on: date | str | None = None,
        faculty_id: Optional[str] = None,
    ) -> CsvExport:
        report = self.build_subject_report(subject_id, on=on, faculty_id=faculty_id)
        return CsvExport(
            filename=f"{report.subject.code}{REPORT_FILENAME_SUFFIX}",
            content=self._aggregator.to_csv(report.summaries, report.overall),
        )

    def build_course_report(
        self,
        course_id: str,
        *,
        on: date | str | None = None,
        faculty_id: Optional[str] = None,
    ) -> CourseReport:
        course = self._require_course(course_id, faculty_id)
        records = list(self._records.find_records(course_id=course.course_id))
        roster = list(self._roster.list_active_students(course_id=course.course_id))

        scoped = self._aggregator.filter_by_date(records, on)
        return CourseReport(
            course_id=course.course_id,
            summaries=self._aggregator.summarize_by_student(scoped, roster),
            overall=self._aggregator.summarize_overall(scoped, total_students=len(roster)),
            subjects=self._name_rollups(self._aggregator.summarize_by_scope(scoped, key="subject")),
        )

    def build_student_report(
        self,
        student_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: str = ALL,
    ) -> StudentReport:
        if start and end and start > end:
            raise ValidationError("start must not be after end")
        student_id = require_non_empty(student_id, "student_id")
        if not self._roster.get_student(student_id):
            raise NotFoundError(f"Student {student_id} not found")

        records = list(self._records.find_records(student_id=student_id, start=start, end=end))
        records = self._aggregator.filter_by_date_range(records, start=start, end=end)
        records = list(self._aggregator.filter_by_status(records, status))

        return StudentReport(
            student_id=student_id,
            subjects=self._name_rollups(self._aggregator.summarize_by_scope(records, key="subject")),
            overall=self._aggregator.summarize_overall(records, total_students=1 if records else 0),
            records=records,
        )
