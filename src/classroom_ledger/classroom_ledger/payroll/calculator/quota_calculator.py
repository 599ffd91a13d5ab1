from __future__ import annotations

from ...records.model import Settings
from .base import BonusCalculator


class QuotaBonusCalculator(BonusCalculator):
    """Standard rule: all-or-nothing quota gate; hourly work always paid.

    bonus = count * bonus_value when count >= min_frequent_students, else 0.
    """

    def __init__(self, settings: Settings):
        self._settings = settings

    def quota_met(self, frequent_count: int) -> bool:
        return frequent_count >= self._settings.min_frequent_students

    def fixed_bonus(self, frequent_count: int) -> float:
        if not self.quota_met(frequent_count):
            return 0.0
        return frequent_count * float(self._settings.bonus_value)

    def hourly_pay(self, hours: float) -> float:
        return hours * float(self._settings.hourly_rate or 0)
