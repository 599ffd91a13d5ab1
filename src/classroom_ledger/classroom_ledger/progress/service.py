from __future__ import annotations

from typing import Optional, Union

from ..attendance.service import find_progress_for_book
from ..common.validators import parse_grade, require_attendance_pair
from ..core.enums import GradeField
from ..core.exceptions import ValidationError
from ..core.logger import get_logger
from ..records.model import Book, Progress, Room, Student
from ..records.repository import RecordRepository

logger = get_logger(__name__)


class ProgressService:
    """Validated edits of a student's per-book record.

    Every input is checked before the store is touched.
    """

    def __init__(self, records: RecordRepository):
        self._records = records

    def set_grade(self, student_id: int, book_id: int, field: Union[GradeField, str], raw) -> Progress:
        grade_field = self._grade_field(field)
        value = parse_grade(raw)
        progress = self._progress(student_id, book_id)
        progress.set_grade(grade_field, value)
        logger.info("Grade %s for student %s, book %s set to %s", grade_field.value, student_id, book_id, value)
        return progress

    def set_manual_attendance(self, student_id: int, book_id: int, classes_given, attendance_present) -> Progress:
        given, present = require_attendance_pair(classes_given, attendance_present)
        progress = self._progress(student_id, book_id)
        progress.manual_classes_given = given
        progress.manual_attendance_present = present
        logger.info("Manual attendance for student %s, book %s set to %d/%d", student_id, book_id, present, given)
        return progress

    def clear_manual_attendance(self, student_id: int, book_id: int) -> Progress:
        progress = self._progress(student_id, book_id)
        progress.manual_classes_given = None
        progress.manual_attendance_present = None
        logger.info("Manual attendance cleared for student %s, book %s", student_id, book_id)
        return progress

    def set_historic_attendance(self, student_id: int, book_id: int, classes_given, attendance_present) -> Progress:
        given, present = require_attendance_pair(classes_given, attendance_present)
        progress = self._progress(student_id, book_id)
        progress.historic_classes_given = given
        progress.historic_attendance_present = present
        logger.info("Historic attendance for student %s, book %s set to %d/%d", student_id, book_id, present, given)
        return progress

    # ---- internals -------------------------------------------------------

    @staticmethod
    def _grade_field(field: Union[GradeField, str]) -> GradeField:
        if isinstance(field, GradeField):
            return field
        try:
            return GradeField(str(field).lower())
        except ValueError:
            raise ValidationError(f"Unknown grade field: {field}")

    def _locate(self, student_id: int, book_id: int) -> tuple[Room, Student, Book]:
        entry = self._records.book_catalog().get(int(book_id))
        if entry is None:
            raise ValidationError(f"Book {book_id} not found")

        student = entry.room.find_student(int(student_id))
        if student is not None:
            return entry.room, student, entry.book

        # Transferred students keep records of books owned by their former room.
        for room, candidate in self._records.iter_enrollments():
            if candidate.student_id == int(student_id):
                return room, candidate, entry.book
        raise ValidationError(f"Student {student_id} not found")

    def _progress(self, student_id: int, book_id: int) -> Progress:
        _, student, book = self._locate(student_id, book_id)
        progress: Optional[Progress] = find_progress_for_book(student, book, self._records.book_catalog())
        if progress is None:
            progress = Progress(book_id=book.book_id)
            student.progress.append(progress)
        return progress
