from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AttendanceSummary:
    """Tổng hợp chuyên cần của một học viên trong một cuốn sách."""

    classes_given: int
    attendance_present: int
    absences: int
    attendance_percent: float
    manual_override: bool = False

    @classmethod
    def from_counts(cls, classes_given: int, attendance_present: int, *, manual_override: bool = False) -> "AttendanceSummary":
        # Presence can never exceed the classes actually given.
        present = min(attendance_present, classes_given)
        percent = present / classes_given * 100 if classes_given > 0 else 0.0
        return cls(
            classes_given=classes_given,
            attendance_present=present,
            absences=classes_given - present,
            attendance_percent=percent,
            manual_override=manual_override,
        )

    @classmethod
    def empty(cls) -> "AttendanceSummary":
        return cls(classes_given=0, attendance_present=0, absences=0, attendance_percent=0.0)
