from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..attendance.model import AttendanceSummary


@dataclass(frozen=True)
class BookGrade:
    written: Optional[float]
    oral: Optional[float]
    participation: Optional[float]
    frequency_score: float
    final_average: Optional[float]


@dataclass(frozen=True)
class ReportCardRow:
    book_id: int
    book_name: str
    label: str
    owner_room_id: int
    attendance: AttendanceSummary
    grade: BookGrade
    has_progress: bool


@dataclass(frozen=True)
class ReportCard:
    student_id: int
    student_name: str
    room_id: int
    room_name: str
    editable: bool
    rows: list[ReportCardRow]
