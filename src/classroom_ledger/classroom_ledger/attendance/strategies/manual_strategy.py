from __future__ import annotations

from typing import Optional, Sequence

from ...records.model import Progress, Session
from .base import AttendanceStrategy
from ..model import AttendanceSummary


class ManualOverrideStrategy(AttendanceStrategy):
    """Manual totals typed in by hand win over everything else."""

    def resolve(self, *, student_id: int, progress: Optional[Progress], sessions: Sequence[Session]) -> AttendanceSummary:
        return AttendanceSummary.from_counts(
            int(progress.manual_classes_given),
            int(progress.manual_attendance_present),
            manual_override=True,
        )
