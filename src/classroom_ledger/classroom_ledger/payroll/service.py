from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from ..common.datetime_utils import month_key, require_month, shift_month, trailing_months
from ..common.text import join_key
from ..common.validators import require_count
from ..core.constants import (
    AT_RISK_FLOOR_PERCENT,
    DEFAULT_EVOLUTION_MONTHS,
    FREQUENT_THRESHOLD_PERCENT,
    MAX_EVOLUTION_MONTHS,
)
from ..core.enums import BONUS_ELIGIBLE_STATUSES, RoomKind, RoomStatus
from ..core.exceptions import ValidationError
from ..core.logger import get_logger
from ..records.model import Room, Session
from ..records.repository import RecordRepository
from .calculator.base import BonusCalculator
from .calculator.quota_calculator import QuotaBonusCalculator
from .model import (
    EvolutionPoint,
    FixedBonus,
    HourlyBonus,
    MonthlyCompensation,
    Projection,
    StudentMonthStats,
)

logger = get_logger(__name__)


def is_room_active_in(room: Room, month: str) -> bool:
    """Whether a room counts toward ``month``.

    A room archived later still counts for the months it was operating.
    """
    if month_key(room.start_date) > month:
        return False
    if room.status == RoomStatus.ACTIVE:
        return True
    if room.status == RoomStatus.FINALIZED and room.finalization is not None:
        return month_key(room.finalization.finalized_on) >= month
    return False


@dataclass(frozen=True)
class _RoomMonth:
    room: Room
    sessions: list[Session]


class CompensationService:
    def __init__(self, records: RecordRepository, *, calculator: Optional[BonusCalculator] = None):
        self._records = records
        self._calculator = calculator

    @property
    def calculator(self) -> BonusCalculator:
        # Settings may be swapped by an import, so the default follows the store.
        return self._calculator or QuotaBonusCalculator(self._records.settings)

    def monthly(self, month: str, *, kind: Optional[RoomKind] = None) -> MonthlyCompensation:
        month = require_month(month)
        month_sessions = self._records.completed_sessions(month=month)

        fixed = None
        frequent_by_room: dict[str, list[StudentMonthStats]] = {}
        if kind in (None, RoomKind.REGULAR):
            stats = self._student_stats(month, month_sessions)
            frequent = [s for s in stats if s.frequent]
            calc = self.calculator
            fixed = FixedBonus(
                bonus_total=calc.fixed_bonus(len(frequent)),
                frequent_student_count=len(frequent),
                total_eligible_students=len(stats),
                quota_met=calc.quota_met(len(frequent)),
            )
            for s in frequent:
                frequent_by_room.setdefault(s.room_name, []).append(s)
            for names in frequent_by_room.values():
                names.sort(key=lambda s: s.student_name.casefold())

        hourly = None
        if kind in (None, RoomKind.HOURLY):
            hourly = self._hourly(month_sessions)

        logger.debug(
            "Compensation %s: fixed=%s hourly=%s",
            month,
            fixed.bonus_total if fixed else "-",
            hourly.hourly_bonus_total if hourly else "-",
        )
        return MonthlyCompensation(month=month, fixed=fixed, hourly=hourly, frequent_by_room=dict(sorted(frequent_by_room.items())))

    def student_stats(self, month: str) -> list[StudentMonthStats]:
        month = require_month(month)
        return self._student_stats(month, self._records.completed_sessions(month=month))

    def at_risk(self, month: str, *, floor: float = AT_RISK_FLOOR_PERCENT) -> list[StudentMonthStats]:
        """Eligible students whose best book is below the threshold but at or above ``floor``."""
        out = [s for s in self.student_stats(month) if not s.frequent and s.percent >= floor]
        out.sort(key=lambda s: (-s.percent, s.student_name.casefold()))
        return out

    def project(self, month: str, frequent_count) -> Projection:
        """Bonus a hypothetical number of frequent students would earn this month."""
        count = require_count(frequent_count, "Frequent students")
        current = self.monthly(month, kind=RoomKind.REGULAR).fixed
        calc = self.calculator
        projected = calc.fixed_bonus(count)
        return Projection(
            frequent_count=count,
            projected_bonus=projected,
            quota_met=calc.quota_met(count),
            delta_vs_current=projected - (current.bonus_total if current else 0.0),
        )

    def trend(self, month: str) -> float:
        """Total of ``month`` minus total of the month before."""
        month = require_month(month)
        return self.monthly(month).total - self.monthly(shift_month(month, -1)).total

    def evolution(self, month: str, *, months=DEFAULT_EVOLUTION_MONTHS) -> list[EvolutionPoint]:
        month = require_month(month)
        count = require_count(months, "Months")
        if not 1 <= count <= MAX_EVOLUTION_MONTHS:
            raise ValidationError(f"Months must be between 1 and {MAX_EVOLUTION_MONTHS}")
        points = []
        for m in trailing_months(month, count):
            comp = self.monthly(m)
            points.append(
                EvolutionPoint(
                    month=m,
                    total=comp.total,
                    frequent_student_count=comp.fixed.frequent_student_count if comp.fixed else 0,
                    has_hourly=bool(comp.hourly and comp.hourly.hourly_bonus_total > 0),
                )
            )
        return points

    def _regular_rooms(self, month: str, month_sessions: list[Session]) -> list[_RoomMonth]:
        out = []
        for room in self._records.rooms:
            if room.kind != RoomKind.REGULAR or not is_room_active_in(room, month):
                continue
            key = join_key(room.name)
            sessions = [s for s in month_sessions if join_key(s.room_name) == key]
            # A room without classes this month contributes nothing.
            if sessions:
                out.append(_RoomMonth(room=room, sessions=sessions))
        return out

    def _student_stats(self, month: str, month_sessions: list[Session]) -> list[StudentMonthStats]:
        rooms = self._regular_rooms(month, month_sessions)

        eligible: dict[int, str] = {}
        for rm in rooms:
            for student in rm.room.students:
                if student.student_id in eligible:
                    continue
                attended = any(student.student_id in s.present_ids for s in rm.sessions)
                if student.status in BONUS_ELIGIBLE_STATUSES or attended:
                    eligible[student.student_id] = student.full_name

        stats = []
        for student_id, name in eligible.items():
            best: Optional[StudentMonthStats] = None
            frequent = False
            for rm in rooms:
                if rm.room.find_student(student_id) is None:
                    continue
                for present, total in self._per_book_counts(student_id, rm.sessions):
                    percent = present / total * 100
                    if percent >= FREQUENT_THRESHOLD_PERCENT:
                        frequent = True
                    if best is None or percent > best.percent:
                        best = StudentMonthStats(
                            student_id=student_id,
                            student_name=name,
                            room_name=rm.room.name,
                            present=present,
                            total=total,
                            percent=percent,
                            frequent=False,
                        )
            if best is not None:
                stats.append(replace(best, frequent=frequent))
        return stats

    @staticmethod
    def _per_book_counts(student_id: int, sessions: list[Session]) -> list[tuple[int, int]]:
        by_book: dict[str, list[Session]] = {}
        for s in sessions:
            by_book.setdefault(join_key(s.book_name), []).append(s)
        return [
            (sum(1 for s in items if student_id in s.present_ids), len(items))
            for items in by_book.values()
        ]

    def _hourly(self, month_sessions: list[Session]) -> HourlyBonus:
        total_hours = 0.0
        for s in month_sessions:
            hours = 0.0
            if s.freelance_hourly and s.hours:
                hours = float(s.hours)
            else:
                room = self._records.get_room_by_name(s.room_name)
                if room is not None and room.kind == RoomKind.HOURLY and room.session_hours:
                    hours = float(room.session_hours)
            total_hours += hours
        return HourlyBonus(
            hourly_bonus_total=self.calculator.hourly_pay(total_hours),
            total_hours=total_hours,
        )
