from __future__ import annotations

from typing import Optional

from ..common.text import normalize_name
from ..core.logger import get_logger
from ..records.model import Book, CatalogEntry, Progress, Room, Student
from ..records.repository import RecordRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceSummary

logger = get_logger(__name__)


def find_progress_for_book(
    student: Student,
    book: Book,
    catalog: dict[int, CatalogEntry],
) -> Optional[Progress]:
    """Progress with the exact book id, else one whose book shares the normalized name."""
    exact = next((p for p in student.progress if p.book_id == book.book_id), None)
    if exact is not None:
        return exact

    wanted = normalize_name(book.name)
    for p in student.progress:
        entry = catalog.get(p.book_id)
        if entry is not None and entry.normalized_name == wanted:
            return p
    return None


class AttendanceService:
    """Attendance Aggregator: authoritative classes given / attended."""

    def __init__(self, records: RecordRepository, *, strategy_factory: AttendanceStrategyFactory | None = None):
        self._records = records
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def aggregate(
        self,
        student: Optional[Student],
        book: Optional[Book],
        room: Optional[Room],
        *,
        progress: Optional[Progress] = None,
        catalog: Optional[dict[int, CatalogEntry]] = None,
    ) -> AttendanceSummary:
        """Totals for (student, book, owning room).

        ``progress`` may be passed when the caller already resolved (or
        merged) the record; otherwise it is looked up on the student.
        Missing context yields an empty summary instead of an error.
        """
        if student is None or book is None or room is None:
            return AttendanceSummary.empty()

        if progress is None:
            progress = find_progress_for_book(student, book, catalog if catalog is not None else self._records.book_catalog())

        sessions = self._records.completed_sessions(room_name=room.name, book_name=book.name)
        strategy = self._factory.for_progress(progress)
        return strategy.resolve(student_id=student.student_id, progress=progress, sessions=sessions)

    def aggregate_by_ids(self, *, room_id: int, student_id: int, book_id: int) -> AttendanceSummary:
        """Look everything up by id; the book is resolved through the global catalog.

        The book's owner room is used for the session join, which may differ
        from the room the student is currently listed in.
        """
        room = self._records.get_room(room_id)
        student = room.find_student(student_id) if room else None
        catalog = self._records.book_catalog()
        entry = catalog.get(int(book_id))
        if student is None or entry is None:
            logger.debug("No attendance context for room=%s student=%s book=%s", room_id, student_id, book_id)
            return AttendanceSummary.empty()
        return self.aggregate(student, entry.book, entry.room, catalog=catalog)

    def completed_class_count(self, *, room_id: int, book_id: int) -> int:
        """Completed sessions of a book in a room (used to pre-fill a 100 % history)."""
        room = self._records.get_room(room_id)
        book = room.find_book(int(book_id)) if room else None
        if room is None or book is None:
            return 0
        return len(self._records.completed_sessions(room_name=room.name, book_name=book.name))
