from __future__ import annotations

from datetime import date

import pytest

from src.classroom_ledger.classroom_ledger.attendance.service import AttendanceService
from src.classroom_ledger.classroom_ledger.records.memory_store import InMemoryRecordStore
from src.classroom_ledger.classroom_ledger.records.model import Book, Progress, Room, Session, Student


def _march_sessions(present_in: int, *, total: int = 10, student_id: int = 1) -> list[Session]:
    return [
        Session(
            session_id=day,
            session_date=date(2024, 3, day),
            room_name="English B2",
            book_name="Book 3",
            roll_call_completed=True,
            present_ids=frozenset({student_id}) if day <= present_in else frozenset(),
        )
        for day in range(1, total + 1)
    ]


def _service(progress: list[Progress], sessions: list[Session]) -> tuple[AttendanceService, Room, Student, Book]:
    book = Book(3, "Book 3")
    student = Student(student_id=1, full_name="Bruno Lima", progress=progress)
    room = Room(room_id=1, name="English B2", start_date=date(2024, 1, 8), books=[book], students=[student])
    store = InMemoryRecordStore(rooms=[room], sessions=sessions)
    return AttendanceService(store), room, student, book


def test_session_log_counts_presences():
    service, room, student, book = _service([Progress(book_id=3)], _march_sessions(6))

    att = service.aggregate(student, book, room)

    assert (att.classes_given, att.attendance_present, att.absences) == (10, 6, 4)
    assert att.attendance_percent == pytest.approx(60.0)
    assert not att.manual_override


def test_manual_override_wins_over_sessions():
    service, room, student, book = _service(
        [Progress(book_id=3, manual_classes_given=20, manual_attendance_present=15)],
        _march_sessions(2),
    )

    att = service.aggregate(student, book, room)

    assert (att.classes_given, att.attendance_present) == (20, 15)
    assert att.manual_override


def test_manual_four_one_is_twenty_five_percent():
    service, room, student, book = _service(
        [Progress(book_id=3, manual_classes_given=4, manual_attendance_present=1)], []
    )

    att = service.aggregate(student, book, room)

    assert (att.classes_given, att.attendance_present, att.attendance_percent) == (4, 1, 25.0)


def test_history_is_combined_and_clamped():
    service, room, student, book = _service(
        [Progress(book_id=3, historic_classes_given=10, historic_attendance_present=8)],
        _march_sessions(4, total=5),
    )

    att = service.aggregate(student, book, room)

    # max(10, 5) classes; 8 + 4 presences clamped to 10
    assert (att.classes_given, att.attendance_present, att.absences) == (10, 10, 0)


def test_missing_context_is_empty_not_an_error():
    service, room, student, book = _service([], _march_sessions(3))

    assert service.aggregate(None, book, room).classes_given == 0
    assert service.aggregate_by_ids(room_id=1, student_id=404, book_id=3).attendance_percent == 0.0
    assert service.aggregate_by_ids(room_id=1, student_id=1, book_id=404).classes_given == 0


def test_zero_classes_gives_zero_percent():
    service, room, student, book = _service([Progress(book_id=3)], [])
    att = service.aggregate(student, book, room)
    assert (att.classes_given, att.attendance_percent) == (0, 0.0)


def test_completed_class_count_skips_no_class_events():
    sessions = _march_sessions(0, total=4)
    sessions.append(Session(session_id=99, session_date=date(2024, 3, 20), room_name="English B2", book_name="Book 3", roll_call_completed=True, no_class_event=True))
    service, *_ = _service([], sessions)

    assert service.completed_class_count(room_id=1, book_id=3) == 4
