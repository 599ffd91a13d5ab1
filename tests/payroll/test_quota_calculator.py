import pytest

from src.classroom_ledger.classroom_ledger.payroll.calculator.quota_calculator import QuotaBonusCalculator
from src.classroom_ledger.classroom_ledger.records.model import Settings


def test_quota_gate_is_a_step_function():
    calc = QuotaBonusCalculator(Settings(bonus_value=3.5, min_frequent_students=100))

    assert calc.fixed_bonus(99) == 0.0
    assert not calc.quota_met(99)
    assert calc.fixed_bonus(100) == pytest.approx(350.0)
    assert calc.fixed_bonus(101) == pytest.approx(353.5)


def test_hourly_pay_has_no_gate():
    calc = QuotaBonusCalculator(Settings(hourly_rate=25.0))
    assert calc.hourly_pay(3.5) == pytest.approx(87.5)
    assert calc.hourly_pay(0) == 0.0
