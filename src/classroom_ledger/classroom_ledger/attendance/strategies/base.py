from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...records.model import Progress, Session
from ..model import AttendanceSummary


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how the authoritative totals are resolved."""

    @abstractmethod
    def resolve(
        self,
        *,
        student_id: int,
        progress: Optional[Progress],
        sessions: Sequence[Session],
    ) -> AttendanceSummary:
        raise NotImplementedError
