from __future__ import annotations

from typing import Optional, Union

from ..core.constants import GRADE_MAX, GRADE_MIN
from ..core.exceptions import ValidationError


def parse_grade(raw: Union[str, float, int, None]) -> Optional[float]:
    """Parse a grade as typed into the report card.

    Blank input clears the grade (returns None). A comma is accepted as the
    decimal separator. The result is rounded to one decimal place.
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValidationError("Grade must be a number between 0 and 10")
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip().replace(",", ".")
        if text == "":
            return None
        try:
            value = float(text)
        except ValueError:
            raise ValidationError("Grade must be a number between 0 and 10")

    if value != value or value < GRADE_MIN or value > GRADE_MAX:
        raise ValidationError("Grade must be a number between 0 and 10")
    return round(value, 1)


def require_count(value, field_name: str) -> int:
    """Non-negative integer count (classes given / presences)."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a whole number")
    try:
        number = int(str(value).strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field_name} must be a whole number")
    if number < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return number


def require_attendance_pair(classes_given, attendance_present) -> tuple[int, int]:
    given = require_count(classes_given, "Classes given")
    present = require_count(attendance_present, "Attendance")
    if present > given:
        raise ValidationError("Attendance cannot be greater than classes given")
    return given, present
