from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.constants import DEFAULT_BONUS_VALUE, DEFAULT_HOURLY_RATE, DEFAULT_MIN_FREQUENT_STUDENTS
from ..core.enums import EnrollmentStatus, GradeField, RoomKind, RoomStatus


@dataclass
class Progress:
    """Điểm và chuyên cần của một học viên trong một cuốn sách.

    Only the manual pair is ever stored as an authoritative total; everything
    else about attendance is computed from the historic pair and the session
    log.
    """

    book_id: int
    written: Optional[float] = None
    oral: Optional[float] = None
    participation: Optional[float] = None
    manual_classes_given: Optional[int] = None
    manual_attendance_present: Optional[int] = None
    historic_classes_given: Optional[int] = None
    historic_attendance_present: Optional[int] = None

    @property
    def has_manual_override(self) -> bool:
        return self.manual_classes_given is not None and self.manual_attendance_present is not None

    def get_grade(self, grade: GradeField) -> Optional[float]:
        if grade is GradeField.WRITTEN:
            return self.written
        if grade is GradeField.ORAL:
            return self.oral
        return self.participation

    def set_grade(self, grade: GradeField, value: Optional[float]) -> None:
        if grade is GradeField.WRITTEN:
            self.written = value
        elif grade is GradeField.ORAL:
            self.oral = value
        else:
            self.participation = value


@dataclass
class Book:
    book_id: int
    name: str
    start_month: Optional[str] = None
    planned_end_month: Optional[str] = None


@dataclass
class Student:
    student_id: int
    full_name: str
    registration_code: str = ""
    status: str = EnrollmentStatus.ACTIVE.value
    transfer_origin: Optional[str] = None
    starting_book_id: Optional[int] = None
    progress: list[Progress] = field(default_factory=list)


@dataclass(frozen=True)
class Finalization:
    """Thông tin lưu trữ (đóng) lớp."""

    finalized_on: date
    reason: str = ""
    details: str = ""


@dataclass
class Room:
    room_id: int
    name: str
    start_date: date
    kind: RoomKind = RoomKind.REGULAR
    status: RoomStatus = RoomStatus.ACTIVE
    planned_end_date: Optional[date] = None
    finalization: Optional[Finalization] = None
    books: list[Book] = field(default_factory=list)
    students: list[Student] = field(default_factory=list)
    session_hours: Optional[float] = None

    def book_ids(self) -> set[int]:
        return {b.book_id for b in self.books}

    def find_book(self, book_id: int) -> Optional[Book]:
        return next((b for b in self.books if b.book_id == book_id), None)

    def find_student(self, student_id: int) -> Optional[Student]:
        return next((s for s in self.students if s.student_id == student_id), None)


@dataclass
class Session:
    """Một buổi học có điểm danh.

    ``room_name`` and ``book_name`` are join keys, not ids.
    """

    session_id: int
    session_date: date
    room_name: str
    book_name: str = ""
    roll_call_completed: bool = False
    present_ids: frozenset[int] = frozenset()
    no_class_event: bool = False
    freelance_hourly: bool = False
    hours: Optional[float] = None

    @property
    def counts_as_class(self) -> bool:
        return self.roll_call_completed and not self.no_class_event


@dataclass
class Settings:
    bonus_value: float = DEFAULT_BONUS_VALUE
    min_frequent_students: int = DEFAULT_MIN_FREQUENT_STUDENTS
    hourly_rate: float = DEFAULT_HOURLY_RATE


@dataclass(frozen=True)
class CatalogEntry:
    """Global book catalog row: where a book id lives and its merge identity."""

    book: Book
    room: Room
    normalized_name: str
