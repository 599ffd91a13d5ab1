from __future__ import annotations

from typing import Optional

from ..attendance.model import AttendanceSummary
from ..records.model import Progress
from .model import BookGrade


class GradeAssembler:
    """Combine written/oral/participation with the frequency-derived score.

    Final average is the plain mean of whichever components exist. The
    frequency component always exists (0 when no class was given), so a book
    with only attendance still gets an average.
    """

    def frequency_score(self, attendance: AttendanceSummary) -> float:
        # 0-100 % maps onto the 0-10 grade scale.
        return attendance.attendance_percent / 10

    def assemble(self, progress: Optional[Progress], attendance: AttendanceSummary) -> BookGrade:
        written = progress.written if progress else None
        oral = progress.oral if progress else None
        participation = progress.participation if progress else None
        freq = self.frequency_score(attendance)

        collected = [v for v in (written, oral, participation, freq) if v is not None]
        final = sum(collected) / len(collected) if collected else None

        return BookGrade(
            written=written,
            oral=oral,
            participation=participation,
            frequency_score=freq,
            final_average=final,
        )
