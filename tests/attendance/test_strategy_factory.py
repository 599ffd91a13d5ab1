from src.classroom_ledger.classroom_ledger.attendance.factory import AttendanceStrategyFactory
from src.classroom_ledger.classroom_ledger.attendance.strategies.manual_strategy import ManualOverrideStrategy
from src.classroom_ledger.classroom_ledger.attendance.strategies.session_log_strategy import SessionLogStrategy
from src.classroom_ledger.classroom_ledger.records.model import Progress


def test_factory_picks_manual_only_when_both_counts_are_set():
    f = AttendanceStrategyFactory()

    assert isinstance(f.for_progress(Progress(book_id=1, manual_classes_given=3, manual_attendance_present=2)), ManualOverrideStrategy)
    assert isinstance(f.for_progress(Progress(book_id=1, manual_classes_given=3)), SessionLogStrategy)
    assert isinstance(f.for_progress(None), SessionLogStrategy)
