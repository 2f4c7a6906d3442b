from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles carried in the request session."""

    ADMIN = "ADMIN"
    FACULTY = "FACULTY"
    STUDENT = "STUDENT"


class AttendanceStatus(str, Enum):
    """Closed set of marks a faculty member can record for a session."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"


class AttendanceBand(str, Enum):
    """Colour band used by report views."""

    GOOD = "GOOD"
    WARNING = "WARNING"
    LOW = "LOW"


class PolicyName(str, Enum):
    PRESENT_ONLY = "present_only"
    PRESENT_OR_LATE = "present_or_late"
