from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ..attendance.service import AttendanceService
from ..common.text import abbreviate_book_name, book_number, normalize_name
from ..core.enums import EDITABLE_STATUSES, RoomStatus
from ..progress.reconciler import merge_progress
from ..records.model import Book, CatalogEntry, Progress, Room, Student
from ..records.repository import RecordRepository
from .assembler import GradeAssembler
from .model import BookGrade, ReportCard, ReportCardRow


class ReportCardService:
    """Builds a student's report card across every book they have touched."""

    def __init__(
        self,
        records: RecordRepository,
        attendance: AttendanceService,
        *,
        assembler: Optional[GradeAssembler] = None,
    ):
        self._records = records
        self._attendance = attendance
        self._assembler = assembler or GradeAssembler()

    def grade_for(self, *, room_id: int, student_id: int, book_id: int) -> Optional[BookGrade]:
        room = self._records.get_room(room_id)
        student = room.find_student(student_id) if room else None
        if student is None:
            return None
        catalog = self._records.book_catalog()
        entry = catalog.get(int(book_id))
        if entry is None:
            return None
        progress = self._merged_progress(student, entry.book, catalog)
        attendance = self._attendance.aggregate(student, entry.book, entry.room, progress=progress, catalog=catalog)
        return self._assembler.assemble(progress, attendance)

    def build(self, *, room_id: int, student_id: int) -> Optional[ReportCard]:
        room = self._records.get_room(room_id)
        student = room.find_student(student_id) if room else None
        if room is None or student is None:
            return None

        catalog = self._records.book_catalog()
        rows = []
        for book in self._distinct_books(room, student, catalog):
            progress = self._merged_progress(student, book, catalog)
            owner = catalog[book.book_id].room if book.book_id in catalog else room
            attendance = self._attendance.aggregate(student, book, owner, progress=progress, catalog=catalog)
            rows.append(
                ReportCardRow(
                    book_id=book.book_id,
                    book_name=book.name,
                    label=abbreviate_book_name(book.name),
                    owner_room_id=owner.room_id,
                    attendance=attendance,
                    grade=self._assembler.assemble(progress, attendance),
                    has_progress=progress is not None,
                )
            )

        return ReportCard(
            student_id=student.student_id,
            student_name=student.full_name,
            room_id=room.room_id,
            room_name=room.name,
            editable=student.status in EDITABLE_STATUSES and room.status == RoomStatus.ACTIVE,
            rows=rows,
        )

    @staticmethod
    def _distinct_books(room: Room, student: Student, catalog: dict[int, CatalogEntry]) -> list[Book]:
        relevant: dict[int, Book] = {b.book_id: b for b in room.books}
        for p in student.progress:
            entry = catalog.get(p.book_id)
            if entry is not None and entry.book.book_id not in relevant:
                relevant[entry.book.book_id] = entry.book

        in_room = room.book_ids()
        unique: dict[str, Book] = {}
        for book in sorted(relevant.values(), key=lambda b: book_number(b.name)):
            key = normalize_name(book.name)
            existing = unique.get(key)
            # Prefer the copy that belongs to the student's current room.
            if existing is None or (existing.book_id not in in_room and book.book_id in in_room):
                unique[key] = book

        return sorted(unique.values(), key=lambda b: book_number(b.name))

    @staticmethod
    def _merged_progress(student: Student, book: Book, catalog: dict[int, CatalogEntry]) -> Optional[Progress]:
        """Display-time merge of every record matching the book; the store is not touched."""
        wanted = normalize_name(book.name)
        matching = [
            p
            for p in student.progress
            if p.book_id == book.book_id
            or (p.book_id in catalog and catalog[p.book_id].normalized_name == wanted)
        ]
        if not matching:
            return None

        target = next((p for p in matching if p.book_id == book.book_id), matching[0])
        merged = replace(target)
        for p in matching:
            if p is not target:
                merged = merge_progress(merged, p)
        return merged
