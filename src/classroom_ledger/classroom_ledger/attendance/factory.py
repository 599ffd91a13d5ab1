from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..records.model import Progress
from .strategies.base import AttendanceStrategy
from .strategies.manual_strategy import ManualOverrideStrategy
from .strategies.session_log_strategy import SessionLogStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the resolution rule for a progress record."""

    def for_progress(self, progress: Optional[Progress]) -> AttendanceStrategy:
        if progress is not None and progress.has_manual_override:
            return ManualOverrideStrategy()
        return SessionLogStrategy()
