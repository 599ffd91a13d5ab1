from __future__ import annotations

from enum import Enum


class RoomKind(str, Enum):
    """Loại lớp: lương cố định (thưởng theo học viên) hoặc theo giờ."""

    REGULAR = "Regular"
    HOURLY = "Horista"


class RoomStatus(str, Enum):
    ACTIVE = "ativa"
    FINALIZED = "finalizada"


class EnrollmentStatus(str, Enum):
    """Trạng thái ghi danh, giá trị khớp với dữ liệu sao lưu."""

    ACTIVE = "Ativo"
    LEVELING = "Nivelamento"
    INTERNAL_TRANSFER = "Transferido (interno)"
    COMPLETED = "Concluído"
    DROPPED = "Desistente"
    EXCLUDED = "Excluído"


class GradeField(str, Enum):
    """The three editable grade components of a progress record."""

    WRITTEN = "written"
    ORAL = "oral"
    PARTICIPATION = "participation"


# Statuses that count a student toward the monthly bonus denominator.
BONUS_ELIGIBLE_STATUSES = frozenset(
    s.value
    for s in (
        EnrollmentStatus.ACTIVE,
        EnrollmentStatus.LEVELING,
        EnrollmentStatus.INTERNAL_TRANSFER,
        EnrollmentStatus.COMPLETED,
    )
)

# Statuses whose report card can still be edited.
EDITABLE_STATUSES = frozenset(
    s.value for s in (EnrollmentStatus.ACTIVE, EnrollmentStatus.LEVELING, EnrollmentStatus.INTERNAL_TRANSFER)
)
