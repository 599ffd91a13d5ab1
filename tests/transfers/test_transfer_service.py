from __future__ import annotations

from datetime import date

import pytest

from src.classroom_ledger.classroom_ledger.attendance.service import AttendanceService
from src.classroom_ledger.classroom_ledger.core.enums import EnrollmentStatus
from src.classroom_ledger.classroom_ledger.core.exceptions import ValidationError
from src.classroom_ledger.classroom_ledger.records.memory_store import InMemoryRecordStore
from src.classroom_ledger.classroom_ledger.records.model import Book, Progress, Room, Session, Student
from src.classroom_ledger.classroom_ledger.transfers.model import TransferRequest
from src.classroom_ledger.classroom_ledger.transfers.service import TransferService


def _setup(progress: list[Progress]):
    student = Student(student_id=3, full_name="Diego Alves", progress=progress)
    source = Room(room_id=1, name="Turma A", start_date=date(2024, 1, 8), books=[Book(11, "Book 1"), Book(12, "Book 2")], students=[student])
    target = Room(room_id=2, name="Turma B", start_date=date(2024, 2, 5), books=[Book(21, "book 1"), Book(22, "Book 2")])
    sessions = [
        Session(session_id=i, session_date=date(2024, 3, i), room_name="Turma B", book_name="Book 1", roll_call_completed=True)
        for i in range(1, 13)
    ]
    store = InMemoryRecordStore(rooms=[source, target], sessions=sessions)
    return TransferService(store, AttendanceService(store)), store, student


def _request(**overrides) -> TransferRequest:
    fields = dict(
        student_id=3,
        source_room_id=1,
        source_book_id=11,
        target_room_id=2,
        target_book_id=21,
        historic_classes_given=12,
        historic_attendance_present=10,
        preserve_grades=True,
    )
    fields.update(overrides)
    return TransferRequest(**fields)


def test_same_level_transfer_keeps_grades_and_history():
    service, store, student = _setup(
        [Progress(book_id=11, written=8.0, historic_classes_given=12, historic_attendance_present=10)]
    )

    result = service.transfer(_request())

    assert result.same_level
    assert student not in store.get_room(1).students
    assert student in store.get_room(2).students
    assert student.status == EnrollmentStatus.INTERNAL_TRANSFER.value
    assert student.transfer_origin == "Turma A"
    assert len(student.progress) == 1
    p = student.progress[0]
    assert (p.book_id, p.written) == (21, 8.0)
    assert (p.historic_classes_given, p.historic_attendance_present) == (12, 10)


def test_without_preserve_a_fresh_record_replaces_the_collision():
    service, _, student = _setup([Progress(book_id=11, written=8.0)])

    service.transfer(_request(preserve_grades=False, historic_classes_given=5, historic_attendance_present=5))

    assert len(student.progress) == 1
    p = student.progress[0]
    assert (p.book_id, p.written) == (21, None)
    assert (p.historic_classes_given, p.historic_attendance_present) == (5, 5)


def test_level_change_adds_a_new_record():
    service, _, student = _setup([Progress(book_id=11, written=8.0)])

    result = service.transfer(_request(target_book_id=22, historic_classes_given=0, historic_attendance_present=0))

    assert not result.same_level
    assert sorted(p.book_id for p in student.progress) == [11, 22]


def test_invalid_history_changes_nothing():
    service, store, student = _setup([Progress(book_id=11, written=8.0)])

    with pytest.raises(ValidationError):
        service.transfer(_request(historic_classes_given=3, historic_attendance_present=4))
    with pytest.raises(ValidationError):
        service.transfer(_request(target_book_id=404))

    assert student in store.get_room(1).students
    assert student.status == EnrollmentStatus.ACTIVE.value
    assert [p.book_id for p in student.progress] == [11]


def test_full_attendance_history_counts_target_classes():
    service, _, _ = _setup([])
    assert service.full_attendance_history(room_id=2, book_id=21) == 12
