from __future__ import annotations

import logging
from collections import Counter
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import to_day
from ..common.validators import require_sequence
from ..core.constants import ALL, CSV_HEADER, GOOD_ATTENDANCE_THRESHOLD, WARNING_ATTENDANCE_THRESHOLD
from ..core.enums import AttendanceBand, AttendanceStatus
from ..core.exceptions import ValidationError
from .model import (
    AttendanceRecord,
    OverallStatistics,
    RosterEntry,
    ScopeRollup,
    StatusCounts,
    StudentAttendanceSummary,
)
from .policies.base import PercentagePolicy
from .policies.present_only import PresentOnlyPolicy

logger = logging.getLogger(__name__)

_KNOWN_STATUSES = {s.value for s in AttendanceStatus}


def percentage_of(part: int, whole: int) -> int:
    """Whole-number percentage, rounded half up; 0 when there is nothing to divide by."""
    if whole <= 0:
        return 0
    value = Decimal(part) * 100 / Decimal(whole)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def attendance_band(percentage: int) -> AttendanceBand:
    if percentage >= GOOD_ATTENDANCE_THRESHOLD:
        return AttendanceBand.GOOD
    if percentage >= WARNING_ATTENDANCE_THRESHOLD:
        return AttendanceBand.WARNING
    return AttendanceBand.LOW


def _count(records: Sequence[AttendanceRecord]) -> StatusCounts:
    tally = Counter(r.status for r in records)
    return StatusCounts(
        present=tally[AttendanceStatus.PRESENT.value],
        absent=tally[AttendanceStatus.ABSENT.value],
        late=tally[AttendanceStatus.LATE.value],
    )


def _warn_unrecognized(records: Sequence[AttendanceRecord]) -> None:
    unknown = [r for r in records if r.status not in _KNOWN_STATUSES]
    if unknown:
        logger.warning(
            "Ignoring %d attendance record(s) with unrecognized status: %s",
            len(unknown),
            ", ".join(f"{r.record_id}={r.status!r}" for r in unknown[:10]),
        )


def _csv_field(value, *, always_quote: bool = False) -> str:
    # One row per line: embedded line breaks become spaces.
    text = " ".join(str(value).splitlines())
    if always_quote or any(ch in text for ch in (",", '"')):
        return '"' + text.replace('"', '""') + '"'
    return text


class AttendanceAggregator:
    """Turns raw attendance marks into report statistics.

    Stateless apart from the injected percentage policy: every method is a pure
    function of its arguments and never mutates them.
    """

    def __init__(self, policy: Optional[PercentagePolicy] = None):
        self._policy = policy or PresentOnlyPolicy()

    @property
    def policy(self) -> PercentagePolicy:
        return self._policy

    def summarize_by_student(
        self,
        records: Sequence[AttendanceRecord],
        roster: Sequence[RosterEntry],
    ) -> list[StudentAttendanceSummary]:
        require_sequence(records, "records")
        require_sequence(roster, "roster")

        by_student: dict[str, list[AttendanceRecord]] = {}
        for r in records:
            by_student.setdefault(r.student_id, []).append(r)

        summaries = []
        for entry in roster:
            counts = _count(by_student.get(entry.student_id, ()))
            summaries.append(
                StudentAttendanceSummary(
                    student_id=entry.student_id,
                    student_name=entry.display_name,
                    enrollment_id=entry.enrollment_id,
                    present_count=counts.present,
                    absent_count=counts.absent,
                    late_count=counts.late,
                    attendance_percentage=percentage_of(self._policy.credited(counts), counts.total),
                )
            )
        return summaries

    def summarize_overall(
        self,
        records: Sequence[AttendanceRecord],
        *,
        total_students: Optional[int] = None,
    ) -> OverallStatistics:
        """Totals for a whole report.

        Every report calls this exactly once, so it is where records with an
        unrecognized status get logged.
        """
        require_sequence(records, "records")
        _warn_unrecognized(records)

        sessions = {(r.subject_id, to_day(r.date)) for r in records}
        counts = _count(records)
        if total_students is None:
            total_students = len({r.student_id for r in records})

        return OverallStatistics(
            total_distinct_sessions=len(sessions),
            total_students=int(total_students),
            total_attendance_entries=len(records),
            total_present_overall=counts.present,
            total_absent_overall=counts.absent,
            total_late_overall=counts.late,
            overall_attendance_percentage=percentage_of(self._policy.credited(counts), len(records)),
        )

    def summarize_by_scope(
        self,
        records: Sequence[AttendanceRecord],
        *,
        key: str = "subject",
    ) -> list[ScopeRollup]:
        """One rollup per subject (or course), in the order scopes first appear."""
        require_sequence(records, "records")
        if key not in {"subject", "course"}:
            raise ValidationError(f"Unknown rollup key: {key!r}")

        groups: dict[Optional[str], list[AttendanceRecord]] = {}
        for r in records:
            scope_id = r.subject_id if key == "subject" else r.course_id
            groups.setdefault(scope_id, []).append(r)

        rollups = []
        for scope_id, scoped in groups.items():
            counts = _count(scoped)
            rollups.append(
                ScopeRollup(
                    scope_id=scope_id,
                    present_count=counts.present,
                    absent_count=counts.absent,
                    late_count=counts.late,
                    percentage=percentage_of(self._policy.credited(counts), counts.total),
                    last_recorded=max(to_day(r.date) for r in scoped),
                )
            )
        return rollups

    def filter_by_date(
        self,
        records: Sequence[AttendanceRecord],
        on: date | datetime | str | None,
    ) -> Sequence[AttendanceRecord]:
        require_sequence(records, "records")
        if on is None:
            return records
        if isinstance(on, str) and on.strip().lower() == ALL:
            return records

        day = to_day(on)
        return [r for r in records if to_day(r.date) == day]

    def filter_by_date_range(
        self,
        records: Sequence[AttendanceRecord],
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[AttendanceRecord]:
        require_sequence(records, "records")
        if start and end and start > end:
            raise ValidationError("start must not be after end")

        out = []
        for r in records:
            day = to_day(r.date)
            if start and day < start:
                continue
            if end and day > end:
                continue
            out.append(r)
        return out

    def filter_by_status(
        self,
        records: Sequence[AttendanceRecord],
        status: str,
    ) -> Sequence[AttendanceRecord]:
        require_sequence(records, "records")
        if str(status).strip().lower() == ALL:
            return records

        wanted = str(status).strip().upper()
        if wanted not in _KNOWN_STATUSES:
            raise ValidationError(f"Unknown attendance status: {status!r}")
        return [r for r in records if r.status == wanted]

    def filter_by_scope(
        self,
        records: Sequence[AttendanceRecord],
        *,
        subject_id: Optional[str] = None,
        course_id: Optional[str] = None,
    ) -> list[AttendanceRecord]:
        require_sequence(records, "records")
        return [
            r
            for r in records
            if (subject_id is None or r.subject_id == subject_id)
            and (course_id is None or r.course_id == course_id)
        ]

    def session_dates(self, records: Sequence[AttendanceRecord]) -> list[date]:
        """Distinct session days, in the order they first appear."""
        require_sequence(records, "records")
        return list(dict.fromkeys(to_day(r.date) for r in records))

    def to_csv(
        self,
        summaries: Sequence[StudentAttendanceSummary],
        overall: OverallStatistics,
    ) -> str:
        require_sequence(summaries, "summaries")

        lines = [",".join(_csv_field(h) for h in CSV_HEADER)]
        for s in summaries:
            lines.append(
                ",".join(
                    [
                        _csv_field(s.student_name, always_quote=True),
                        _csv_field(s.enrollment_id),
                        _csv_field(s.present_count),
                        _csv_field(s.absent_count),
                        _csv_field(s.late_count),
                        _csv_field(s.sessions_attended),
                        _csv_field(overall.total_distinct_sessions),
                        _csv_field(f"{s.attendance_percentage}%"),
                    ]
                )
            )
        return "\n".join(lines) + "\n"
