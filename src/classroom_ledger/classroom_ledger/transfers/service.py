from __future__ import annotations

from typing import Optional

from ..attendance.service import AttendanceService
from ..common.text import normalize_name
from ..common.validators import require_attendance_pair
from ..core.enums import EnrollmentStatus
from ..core.exceptions import ValidationError
from ..core.logger import get_logger
from ..progress.reconciler import ProgressReconciler, max_optional
from ..records.model import Book, CatalogEntry, Progress, Student
from ..records.repository import RecordRepository
from .model import TransferRequest, TransferResult

logger = get_logger(__name__)


def _find_colliding(student: Student, book: Book, catalog: dict[int, CatalogEntry]) -> Optional[int]:
    """Index of the record for ``book``, by exact id or by normalized name."""
    wanted = normalize_name(book.name)
    for index, p in enumerate(student.progress):
        if p.book_id == book.book_id:
            return index
        entry = catalog.get(p.book_id)
        if entry is not None and entry.normalized_name == wanted:
            return index
    return None


class TransferService:
    """Moves a student between rooms without leaving duplicate progress behind."""

    def __init__(
        self,
        records: RecordRepository,
        attendance: AttendanceService,
        *,
        reconciler: Optional[ProgressReconciler] = None,
    ):
        self._records = records
        self._attendance = attendance
        self._reconciler = reconciler or ProgressReconciler()

    def transfer(self, request: TransferRequest) -> TransferResult:
        given, present = require_attendance_pair(request.historic_classes_given, request.historic_attendance_present)

        source = self._records.get_room(request.source_room_id)
        target = self._records.get_room(request.target_room_id)
        if source is None or target is None:
            raise ValidationError("Source or target room not found")
        student = source.find_student(int(request.student_id))
        if student is None:
            raise ValidationError("Student not found in the source room")
        source_book = source.find_book(int(request.source_book_id))
        target_book = target.find_book(int(request.target_book_id))
        if source_book is None or target_book is None:
            raise ValidationError("Source or target book not found")

        # Nothing has been mutated up to here.
        same_level = normalize_name(source_book.name) == normalize_name(target_book.name)
        catalog = self._records.book_catalog()
        index = _find_colliding(student, target_book, catalog)

        if index is not None and same_level and request.preserve_grades:
            progress = student.progress.pop(index)
            progress.book_id = target_book.book_id
            progress.historic_classes_given = max_optional(progress.historic_classes_given, given)
            progress.historic_attendance_present = max_optional(progress.historic_attendance_present, present)
        else:
            if index is not None:
                student.progress.pop(index)
            progress = Progress(
                book_id=target_book.book_id,
                historic_classes_given=given,
                historic_attendance_present=present,
            )
        student.progress.append(progress)

        source.students.remove(student)
        target.students.append(student)
        student.status = EnrollmentStatus.INTERNAL_TRANSFER.value
        student.transfer_origin = source.name

        report = self._reconciler.reconcile_all(self._records)
        logger.info(
            "Student %s transferred from '%s' to '%s' (book '%s', same level: %s)",
            student.student_id,
            source.name,
            target.name,
            target_book.name,
            same_level,
        )
        return TransferResult(
            student_id=student.student_id,
            source_room_name=source.name,
            target_room_name=target.name,
            same_level=same_level,
            progress=progress,
            reconcile=report,
        )

    def full_attendance_history(self, *, room_id: int, book_id: int) -> int:
        """Completed classes of the target book, used as a 100 % historic pair."""
        return self._attendance.completed_class_count(room_id=room_id, book_id=book_id)
