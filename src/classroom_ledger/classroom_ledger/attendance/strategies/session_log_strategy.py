from __future__ import annotations

from typing import Optional, Sequence

from ...records.model import Progress, Session
from .base import AttendanceStrategy
from ..model import AttendanceSummary


class SessionLogStrategy(AttendanceStrategy):
    """Historic carry-over combined with live roll calls.

    Classes given: the larger of the historic count and the session log.
    Presences: historic plus logged, since the history pre-dates the log.
    """

    def resolve(self, *, student_id: int, progress: Optional[Progress], sessions: Sequence[Session]) -> AttendanceSummary:
        logged_given = len(sessions)
        logged_present = sum(1 for s in sessions if student_id in s.present_ids)

        historic_given = (progress.historic_classes_given if progress else None) or 0
        historic_present = (progress.historic_attendance_present if progress else None) or 0

        return AttendanceSummary.from_counts(
            max(historic_given, logged_given),
            historic_present + logged_present,
        )
