"""Progress reconciliation.

Restores the "one progress record per normalized book name" invariant after
bulk mutations (import, transfer, restore). Safe to run any number of times.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional

from ..core.constants import ORPHANED_BOOK_PREFIX
from ..core.enums import GradeField
from ..core.logger import get_logger
from ..records.model import CatalogEntry, Progress, Room
from ..records.repository import RecordRepository

logger = get_logger(__name__)

_MAX_MERGED_FIELDS = (
    "manual_classes_given",
    "manual_attendance_present",
    "historic_classes_given",
    "historic_attendance_present",
)


def max_optional(a: Optional[int], b: Optional[int]) -> Optional[int]:
    if a is None:
        return b
    if b is None:
        return a
    return max(a, b)


def merge_progress(target: Progress, other: Progress) -> Progress:
    """Fold ``other`` into a copy of ``target``.

    - grades: fill only where the target is null (no overwrite);
    - manual and historic counts: field-wise maximum, never a sum, since
      duplicates describe the same underlying history.
    """
    merged = replace(target)
    for grade in GradeField:
        if merged.get_grade(grade) is None and other.get_grade(grade) is not None:
            merged.set_grade(grade, other.get_grade(grade))
    for name in _MAX_MERGED_FIELDS:
        setattr(merged, name, max_optional(getattr(merged, name), getattr(other, name)))
    return merged


def merge_group(entries: list[Progress], current_book_ids: set[int]) -> Progress:
    """Merge duplicates of one book into a single record.

    Target is the entry pointing at a book of the student's current room,
    otherwise the last entry (treated as the most recent).
    """
    target = next((e for e in entries if e.book_id in current_book_ids), entries[-1])
    merged = replace(target)
    for entry in entries:
        if entry is target:
            continue
        merged = merge_progress(merged, entry)
    return merged


def group_key(progress: Progress, catalog: dict[int, CatalogEntry]) -> str:
    entry = catalog.get(progress.book_id)
    if entry is None:
        return f"{ORPHANED_BOOK_PREFIX}{progress.book_id}"
    return entry.normalized_name


@dataclass(frozen=True)
class ReconcileReport:
    students_checked: int
    students_changed: int
    records_folded: int
    orphaned_records: int


class ProgressReconciler:
    def reconcile_progress(
        self,
        progress: Iterable[Progress],
        *,
        catalog: dict[int, CatalogEntry],
        current_room: Optional[Room],
    ) -> list[Progress]:
        """Return a list with exactly one entry per normalized book name.

        Groups keep the order in which their first entry appears; singletons
        pass through untouched.
        """
        groups: dict[str, list[Progress]] = {}
        for p in progress:
            groups.setdefault(group_key(p, catalog), []).append(p)

        current_book_ids = current_room.book_ids() if current_room else set()
        out: list[Progress] = []
        for entries in groups.values():
            if len(entries) == 1:
                out.append(entries[0])
            else:
                out.append(merge_group(entries, current_book_ids))
        return out

    def reconcile_all(self, store: RecordRepository) -> ReconcileReport:
        """Reconcile every student of every room, in place."""
        catalog = store.book_catalog()
        checked = changed = folded = orphaned = 0

        for room, student in store.iter_enrollments():
            checked += 1
            before = len(student.progress)
            orphaned += sum(1 for p in student.progress if p.book_id not in catalog)
            sanitized = self.reconcile_progress(student.progress, catalog=catalog, current_room=room)
            if len(sanitized) != before:
                changed += 1
                folded += before - len(sanitized)
                logger.info(
                    "Merged %d duplicate progress record(s) for student %s in room '%s'",
                    before - len(sanitized),
                    student.student_id,
                    room.name,
                )
            student.progress = sanitized

        if orphaned:
            logger.warning("%d progress record(s) reference books missing from every room", orphaned)

        return ReconcileReport(
            students_checked=checked,
            students_changed=changed,
            records_folded=folded,
            orphaned_records=orphaned,
        )
