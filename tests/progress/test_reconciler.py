from __future__ import annotations

from datetime import date

from src.classroom_ledger.classroom_ledger.progress.reconciler import ProgressReconciler, merge_progress
from src.classroom_ledger.classroom_ledger.records.memory_store import InMemoryRecordStore
from src.classroom_ledger.classroom_ledger.records.model import Book, Progress, Room, Student


def _store(progress: list[Progress]) -> tuple[InMemoryRecordStore, Student]:
    student = Student(student_id=7, full_name="Ana Souza", progress=progress)
    old_room = Room(room_id=1, name="Turma A", start_date=date(2023, 2, 1), books=[Book(11, "Book 1")])
    new_room = Room(room_id=2, name="Turma B", start_date=date(2024, 2, 1), books=[Book(21, "book 1 ")], students=[student])
    return InMemoryRecordStore(rooms=[old_room, new_room]), student


def test_merge_fills_missing_grades_and_takes_max_history():
    merged = merge_progress(
        Progress(book_id=21, written=None, historic_classes_given=10),
        Progress(book_id=11, written=8.0, historic_classes_given=12),
    )

    assert merged.book_id == 21
    assert merged.written == 8.0
    assert merged.historic_classes_given == 12


def test_merge_never_overwrites_an_existing_grade():
    merged = merge_progress(Progress(book_id=1, oral=6.0), Progress(book_id=1, oral=9.0))
    assert merged.oral == 6.0


def test_zero_history_survives_a_merge():
    merged = merge_progress(Progress(book_id=1, historic_attendance_present=0), Progress(book_id=1))
    assert merged.historic_attendance_present == 0


def test_duplicates_collapse_onto_the_current_room_book():
    store, student = _store(
        [
            Progress(book_id=11, written=7.0, historic_classes_given=10, historic_attendance_present=9),
            Progress(book_id=21, oral=9.0, historic_classes_given=12, historic_attendance_present=8),
        ]
    )

    report = ProgressReconciler().reconcile_all(store)

    assert report.records_folded == 1
    assert report.students_changed == 1
    assert len(student.progress) == 1
    p = student.progress[0]
    assert p.book_id == 21
    assert (p.written, p.oral) == (7.0, 9.0)
    assert (p.historic_classes_given, p.historic_attendance_present) == (12, 9)


def test_reconcile_is_idempotent():
    store, student = _store([Progress(book_id=11, written=5.0), Progress(book_id=21, written=6.0)])
    reconciler = ProgressReconciler()

    reconciler.reconcile_all(store)
    once = list(student.progress)
    report = reconciler.reconcile_all(store)

    assert student.progress == once
    assert report.records_folded == 0


def test_orphaned_records_are_kept_as_singletons():
    store, student = _store([Progress(book_id=999, written=4.0), Progress(book_id=21)])

    report = ProgressReconciler().reconcile_all(store)

    assert report.orphaned_records == 1
    assert [p.book_id for p in student.progress] == [999, 21]


def test_without_current_room_book_the_last_entry_is_the_target():
    progress = [Progress(book_id=11, written=1.0), Progress(book_id=12, written=2.0)]
    store = InMemoryRecordStore(
        rooms=[Room(room_id=1, name="Turma A", start_date=date(2023, 1, 1), books=[Book(11, "Book 1"), Book(12, "BOOK 1")])]
    )

    out = ProgressReconciler().reconcile_progress(progress, catalog=store.book_catalog(), current_room=None)

    assert len(out) == 1
    assert out[0].book_id == 12
    assert out[0].written == 2.0
