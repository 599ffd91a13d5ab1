from __future__ import annotations

from dataclasses import dataclass

from ..progress.reconciler import ReconcileReport
from ..records.model import Progress


@dataclass(frozen=True)
class TransferRequest:
    """Move one student from (source room, source book) to (target room, target book)."""

    student_id: int
    source_room_id: int
    source_book_id: int
    target_room_id: int
    target_book_id: int
    historic_classes_given: int = 0
    historic_attendance_present: int = 0
    preserve_grades: bool = False


@dataclass(frozen=True)
class TransferResult:
    student_id: int
    source_room_name: str
    target_room_name: str
    same_level: bool
    progress: Progress
    reconcile: ReconcileReport
