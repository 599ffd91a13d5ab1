from __future__ import annotations

from abc import ABC, abstractmethod


class BonusCalculator(ABC):
    """Calculator interface (Strategy Pattern for compensation)."""

    @abstractmethod
    def fixed_bonus(self, frequent_count: int) -> float:
        raise NotImplementedError

    @abstractmethod
    def quota_met(self, frequent_count: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def hourly_pay(self, hours: float) -> float:
        raise NotImplementedError
