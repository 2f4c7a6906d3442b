from __future__ import annotations

from typing import Optional, Sequence

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CourseInfo, RosterEntry, SubjectInfo
from .repository import RosterRepository


def _opt_str(value) -> Optional[str]:
    return str(value) if value is not None else None


def _to_roster_entry(r: dict) -> RosterEntry:
    return RosterEntry(
        student_id=str(r["id"]),
        display_name=f"{r.get('first_name') or ''} {r.get('last_name') or ''}".strip(),
        enrollment_id=str(r["enrollment_id"]),
    )


class MySQLRosterRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_subject(self, subject_id: str) -> Optional[SubjectInfo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.name, s.code, s.course_id, s.faculty_id,
                       c.name AS course_name, c.faculty_id AS course_faculty_id
                FROM subjects s
                LEFT JOIN courses c ON c.id = s.course_id
                WHERE s.id=%s
                """,
                (str(subject_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return SubjectInfo(
                subject_id=str(r["id"]),
                name=r["name"],
                code=r["code"],
                course_id=_opt_str(r.get("course_id")),
                course_name=r.get("course_name"),
                faculty_id=_opt_str(r.get("faculty_id")),
                course_faculty_id=_opt_str(r.get("course_faculty_id")),
            )

    def get_course(self, course_id: str) -> Optional[CourseInfo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, code, faculty_id FROM courses WHERE id=%s",
                (str(course_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return CourseInfo(
                course_id=str(r["id"]),
                name=r["name"],
                code=r["code"],
                faculty_id=_opt_str(r.get("faculty_id")),
            )

    def get_student(self, student_id: str) -> Optional[RosterEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, enrollment_id, first_name, last_name FROM students WHERE id=%s",
                (str(student_id),),
            )
            r = fetchone(cur)
            return _to_roster_entry(r) if r else None

    def list_active_students(
        self,
        *,
        subject_id: Optional[str] = None,
        course_id: Optional[str] = None,
    ) -> Sequence[RosterEntry]:
        if (subject_id is None) == (course_id is None):
            raise ValidationError("Exactly one of subject_id, course_id is required")

        # Subject rosters are the active enrollments of the subject's course.
        if subject_id is not None:
            course_filter = "ce.course_id = (SELECT course_id FROM subjects WHERE id=%s)"
            param = str(subject_id)
        else:
            course_filter = "ce.course_id=%s"
            param = str(course_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT st.id, st.enrollment_id, st.first_name, st.last_name
                FROM course_enrollments ce
                JOIN students st ON st.id = ce.student_id
                WHERE {course_filter} AND ce.status='ACTIVE'
                ORDER BY st.first_name ASC, st.last_name ASC, st.id ASC
                """,
                (param,),
            )
            rows = fetchall(cur)

            return [_to_roster_entry(r) for r in rows]
