from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, CourseInfo, RosterEntry, SubjectInfo


class AttendanceRecordRepository(Protocol):
    def find_records(
        self,
        *,
        student_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        course_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records for exactly one of student/subject/course, inside [start, end]."""

        raise NotImplementedError


class RosterRepository(Protocol):
    def get_subject(self, subject_id: str) -> Optional[SubjectInfo]:
        raise NotImplementedError

    def get_course(self, course_id: str) -> Optional[CourseInfo]:
        raise NotImplementedError

    def get_student(self, student_id: str) -> Optional[RosterEntry]:
        raise NotImplementedError

    def list_active_students(
        self,
        *,
        subject_id: Optional[str] = None,
        course_id: Optional[str] = None,
    ) -> Sequence[RosterEntry]:
        raise NotImplementedError
