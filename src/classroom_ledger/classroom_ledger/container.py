from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.service import AttendanceService
from .grades.assembler import GradeAssembler
from .grades.service import ReportCardService
from .payroll.service import CompensationService
from .progress.importer import BackupService
from .progress.reconciler import ProgressReconciler
from .progress.service import ProgressService
from .reports.service import ReportService
from .records.memory_store import InMemoryRecordStore
from .records.model import Settings
from .records.repository import RecordRepository
from .transfers.service import TransferService


@dataclass(frozen=True)
class Container:
    records: RecordRepository

    reconciler: ProgressReconciler
    attendance_service: AttendanceService
    report_card_service: ReportCardService
    compensation_service: CompensationService
    progress_service: ProgressService
    backup_service: BackupService
    transfer_service: TransferService
    report_service: ReportService


def build_container(
    *,
    records: Optional[RecordRepository] = None,
    default_settings: Optional[Settings] = None,
) -> Container:
    records = records if records is not None else InMemoryRecordStore(settings=default_settings)

    reconciler = ProgressReconciler()
    attendance_service = AttendanceService(records, strategy_factory=AttendanceStrategyFactory())
    report_card_service = ReportCardService(records, attendance_service, assembler=GradeAssembler())
    compensation_service = CompensationService(records)
    progress_service = ProgressService(records)
    backup_service = BackupService(records, reconciler=reconciler, default_settings=default_settings)
    transfer_service = TransferService(records, attendance_service, reconciler=reconciler)
    report_service = ReportService(records)

    return Container(
        records=records,
        reconciler=reconciler,
        attendance_service=attendance_service,
        report_card_service=report_card_service,
        compensation_service=compensation_service,
        progress_service=progress_service,
        backup_service=backup_service,
        transfer_service=transfer_service,
        report_service=report_service,
    )
