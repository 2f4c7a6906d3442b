"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ALL = "all"

GOOD_ATTENDANCE_THRESHOLD = 75
WARNING_ATTENDANCE_THRESHOLD = 50

CSV_HEADER = (
    "Student Name",
    "Enrollment ID",
    "Present",
    "Absent",
    "Late",
    "Sessions Attended",
    "Total Sessions",
    "Attendance Percentage",
)
CSV_MIMETYPE = "text/csv"
REPORT_FILENAME_SUFFIX = "_attendance_report.csv"
