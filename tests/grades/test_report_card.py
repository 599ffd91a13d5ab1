from __future__ import annotations

from datetime import date

import pytest

from src.classroom_ledger.classroom_ledger.attendance.service import AttendanceService
from src.classroom_ledger.classroom_ledger.core.enums import EnrollmentStatus
from src.classroom_ledger.classroom_ledger.grades.service import ReportCardService
from src.classroom_ledger.classroom_ledger.records.memory_store import InMemoryRecordStore
from src.classroom_ledger.classroom_ledger.records.model import Book, Progress, Room, Session, Student


def _service(student: Student, *, current_books: list[Book], sessions: list[Session] | None = None) -> ReportCardService:
    old_room = Room(room_id=1, name="Turma A", start_date=date(2023, 2, 1), books=[Book(11, "Book 1")])
    new_room = Room(room_id=2, name="Turma B", start_date=date(2024, 2, 1), books=current_books, students=[student])
    store = InMemoryRecordStore(rooms=[old_room, new_room], sessions=sessions or [])
    return ReportCardService(store, AttendanceService(store))


def test_rows_are_distinct_by_name_and_sorted_by_book_number():
    student = Student(student_id=5, full_name="Carla Dias", progress=[Progress(book_id=11, written=8.0), Progress(book_id=21, oral=6.0)])
    service = _service(student, current_books=[Book(22, "Book 2: Travel"), Book(21, "book 1")])

    card = service.build(room_id=2, student_id=5)

    assert [r.book_id for r in card.rows] == [21, 22]
    assert [r.label for r in card.rows] == ["book 1", "Book 2"]
    first, second = card.rows
    assert (first.grade.written, first.grade.oral) == (8.0, 6.0)
    assert first.grade.final_average == pytest.approx((8.0 + 6.0 + 0.0) / 3)
    assert not second.has_progress
    assert second.grade.final_average == 0.0
    assert card.editable


def test_books_from_a_previous_room_use_that_room_sessions():
    sessions = [
        Session(
            session_id=i,
            session_date=date(2023, 3, i),
            room_name="Turma A",
            book_name="Book 1",
            roll_call_completed=True,
            present_ids=frozenset({5}) if i <= 2 else frozenset(),
        )
        for i in range(1, 5)
    ]
    student = Student(student_id=5, full_name="Carla Dias", progress=[Progress(book_id=11, written=8.0)])
    service = _service(student, current_books=[Book(22, "Book 2")], sessions=sessions)

    card = service.build(room_id=2, student_id=5)

    book_one = card.rows[0]
    assert (book_one.book_id, book_one.owner_room_id) == (11, 1)
    assert (book_one.attendance.classes_given, book_one.attendance.attendance_present) == (4, 2)
    assert book_one.grade.final_average == pytest.approx(6.5)


def test_dropped_student_card_is_read_only():
    student = Student(student_id=5, full_name="Carla Dias", status=EnrollmentStatus.DROPPED.value)
    card = _service(student, current_books=[Book(22, "Book 2")]).build(room_id=2, student_id=5)
    assert not card.editable


def test_unknown_student_has_no_card_or_grade():
    service = _service(Student(student_id=5, full_name="Carla Dias"), current_books=[Book(22, "Book 2")])

    assert service.build(room_id=2, student_id=404) is None
    assert service.grade_for(room_id=2, student_id=5, book_id=404) is None
