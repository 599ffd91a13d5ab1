from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class FixedBonus:
    bonus_total: float
    frequent_student_count: int
    total_eligible_students: int
    quota_met: bool


@dataclass(frozen=True)
class HourlyBonus:
    hourly_bonus_total: float
    total_hours: float


@dataclass(frozen=True)
class StudentMonthStats:
    """Best book of a student in a month (highest attendance rate)."""

    student_id: int
    student_name: str
    room_name: str
    present: int
    total: int
    percent: float
    frequent: bool

    @property
    def missing_to_threshold(self) -> int:
        # Presences still needed to reach half of the classes.
        return max(math.ceil(self.total * 0.5) - self.present, 0)


@dataclass(frozen=True)
class MonthlyCompensation:
    month: str
    fixed: Optional[FixedBonus]
    hourly: Optional[HourlyBonus]
    frequent_by_room: dict[str, list[StudentMonthStats]] = field(default_factory=dict)

    @property
    def total(self) -> float:
        fixed = self.fixed.bonus_total if self.fixed else 0.0
        hourly = self.hourly.hourly_bonus_total if self.hourly else 0.0
        return fixed + hourly


@dataclass(frozen=True)
class Projection:
    frequent_count: int
    projected_bonus: float
    quota_met: bool
    delta_vs_current: float


@dataclass(frozen=True)
class EvolutionPoint:
    month: str
    total: float
    frequent_student_count: int
    has_hourly: bool
