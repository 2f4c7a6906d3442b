from datetime import date, datetime

import pytest

from src.campus_attendance.campus_attendance.common.datetime_utils import parse_iso_date, to_day
from src.campus_attendance.campus_attendance.common.validators import require_non_empty, require_sequence
from src.campus_attendance.campus_attendance.core.exceptions import ValidationError


def test_to_day_normalizes_timestamps():
    assert to_day(datetime(2024, 3, 4, 23, 59)) == date(2024, 3, 4)
    assert to_day(date(2024, 3, 4)) == date(2024, 3, 4)
    assert to_day("2024-03-04T09:30:00.000Z") == date(2024, 3, 4)


def test_to_day_rejects_other_types():
    with pytest.raises(ValidationError):
        to_day(20240304)


def test_parse_iso_date_rejects_garbage():
    with pytest.raises(ValidationError):
        parse_iso_date("2024-13-01")


def test_require_sequence():
    assert require_sequence((1, 2), "records") == (1, 2)
    with pytest.raises(ValidationError):
        require_sequence(b"abc", "records")


def test_require_non_empty():
    assert require_non_empty("  MATH101 ", "code") == "MATH101"
    with pytest.raises(ValidationError):
        require_non_empty("   ", "code")
