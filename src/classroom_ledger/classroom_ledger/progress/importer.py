"""Backup restore and export.

Restoring replaces rooms, sessions and settings with the backup contents but
keeps whatever progress the current data already holds for the same
students, then reconciles.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any, Optional

from ..core.logger import get_logger
from ..records.codec import decode_backup, encode_backup, unmapped_sections, unwrap_envelope
from ..records.model import Progress, Settings
from ..records.repository import RecordRepository
from .reconciler import ProgressReconciler, ReconcileReport, max_optional

logger = get_logger(__name__)


def combine_with_snapshot(snapshot: list[Progress], imported: list[Progress]) -> list[Progress]:
    """Merge imported progress into a student's previous progress, keyed by book id.

    Imported grades win when present; historic counts take the maximum.
    Previous entries with no imported counterpart are kept.
    """
    combined: dict[int, Progress] = {p.book_id: replace(p) for p in snapshot}
    for p in imported:
        existing = combined.get(p.book_id)
        if existing is None:
            combined[p.book_id] = p
            continue
        existing.written = p.written if p.written is not None else existing.written
        existing.oral = p.oral if p.oral is not None else existing.oral
        existing.participation = p.participation if p.participation is not None else existing.participation
        existing.historic_classes_given = max_optional(existing.historic_classes_given, p.historic_classes_given)
        existing.historic_attendance_present = max_optional(
            existing.historic_attendance_present, p.historic_attendance_present
        )
    return list(combined.values())


class BackupService:
    def __init__(
        self,
        records: RecordRepository,
        *,
        reconciler: Optional[ProgressReconciler] = None,
        default_settings: Optional[Settings] = None,
    ):
        self._records = records
        self._reconciler = reconciler or ProgressReconciler()
        self._default_settings = default_settings
        # Sections of the last restored backup that are written back untouched on export.
        self._extra_sections: dict = {}

    def restore(self, payload: Any) -> ReconcileReport:
        # Decoding raises before anything in the store changes.
        rooms, sessions, settings = decode_backup(payload, default_settings=self._default_settings)

        snapshot: dict[int, list[Progress]] = {}
        for _, student in self._records.iter_enrollments():
            snapshot[student.student_id] = [replace(p) for p in student.progress]

        self._records.replace_contents(rooms=rooms, sessions=sessions, settings=settings)
        self._extra_sections = unmapped_sections(unwrap_envelope(payload))

        kept = 0
        for _, student in self._records.iter_enrollments():
            previous = snapshot.get(student.student_id)
            if previous:
                student.progress = combine_with_snapshot(previous, student.progress)
                kept += 1

        report = self._reconciler.reconcile_all(self._records)
        logger.info(
            "Backup restored: %d room(s), %d session(s); previous progress kept for %d student(s)",
            len(rooms),
            len(sessions),
            kept,
        )
        return report

    def export(self, *, exported_at: Optional[datetime] = None) -> dict:
        return encode_backup(
            list(self._records.rooms),
            list(self._records.sessions),
            self._records.settings,
            exported_at=exported_at,
            extra_sections=self._extra_sections,
        )
