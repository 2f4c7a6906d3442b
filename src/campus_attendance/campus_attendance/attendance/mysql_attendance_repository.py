from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceRecord
from .repository import AttendanceRecordRepository


class MySQLAttendanceRepository(AttendanceRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_records(
        self,
        *,
        student_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        course_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        scopes = [v for v in (student_id, subject_id, course_id) if v is not None]
        if len(scopes) != 1:
            raise ValidationError("Exactly one of student_id, subject_id, course_id is required")

        clauses: list[str] = []
        params: list[object] = []

        if student_id is not None:
            clauses.append("sa.student_id=%s")
            params.append(str(student_id))
        if subject_id is not None:
            clauses.append("sa.subject_id=%s")
            params.append(str(subject_id))
        if course_id is not None:
            clauses.append("s.course_id=%s")
            params.append(str(course_id))
        if start is not None:
            clauses.append("sa.date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("sa.date <= %s")
            params.append(end)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT sa.id, sa.student_id, sa.subject_id, s.course_id, sa.date, sa.status, sa.remarks
                FROM subject_attendance sa
                JOIN subjects s ON s.id = sa.subject_id
                WHERE {where}
                ORDER BY sa.date DESC, sa.id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                AttendanceRecord(
                    record_id=str(r["id"]),
                    student_id=str(r["student_id"]),
                    subject_id=str(r["subject_id"]),
                    course_id=str(r["course_id"]) if r.get("course_id") is not None else None,
                    date=r["date"],
                    status=str(r["status"]).upper(),
                    remarks=r.get("remarks"),
                )
                for r in rows
            ]
