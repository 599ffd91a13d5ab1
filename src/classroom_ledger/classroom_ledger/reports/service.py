"""Class and student analytics.

Everything here reads the stored progress records (grades plus the manual or
historic attendance pair) of reconciled students; the session log is not
consulted except to count this month's classes.
"""

from __future__ import annotations

import statistics
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import month_key, require_month
from ..common.text import abbreviate_book_name, book_number
from ..core.enums import EDITABLE_STATUSES, EnrollmentStatus, RoomStatus
from ..records.model import Progress, Student
from ..records.repository import RecordRepository
from .model import (
    ClassStats,
    GlobalStats,
    RadarEntry,
    RadarList,
    RankedStudent,
    SkillPoint,
    StudentStats,
)

_RADAR_STATUSES = frozenset({EnrollmentStatus.ACTIVE.value, EnrollmentStatus.LEVELING.value})

# Engagement score weights: grades out of 70, attendance out of 30.
_GRADE_WEIGHT = 70
_ATTENDANCE_WEIGHT = 30
_SINGLE_BOOK_FACTOR = 0.85
_ATTENDANCE_ONLY_FACTOR = 0.4
_TOP_STUDENTS = 5


def _mean(values: Iterable[float]) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0.0


def stored_pair(progress: Progress) -> tuple[int, int]:
    """(classes given, presences) as stored: manual pair, else historic pair.

    A zero falls through to the next source, as in the backup data.
    """
    given = progress.manual_classes_given or progress.historic_classes_given or 0
    present = progress.manual_attendance_present or progress.historic_attendance_present or 0
    return given, present


class ReportService:
    def __init__(self, records: RecordRepository):
        self._records = records

    def _active_students(self, statuses=EDITABLE_STATUSES):
        for room in self._records.rooms:
            if room.status != RoomStatus.ACTIVE:
                continue
            for student in room.students:
                if student.status in statuses:
                    yield room, student

    # ---- school-wide -----------------------------------------------------

    def global_stats(self, month: Optional[str] = None) -> GlobalStats:
        month = require_month(month) if month else month_key(date.today())
        distribution = [0] * 6
        total = evaluated = good = 0
        classes = presences = 0

        for _, student in self._active_students():
            total += 1
            grades = [p.written for p in student.progress if p.written is not None]
            grades += [p.oral for p in student.progress if p.oral is not None]

            # A single low first grade does not make a student "evaluated" yet.
            average = _mean(grades)
            if grades and (average >= 3.0 or len(grades) >= 3):
                evaluated += 1
                distribution[min(int(average // 2), 4)] += 1
                if average >= 7.0:
                    good += 1
            else:
                distribution[5] += 1

            for p in student.progress:
                given, present = stored_pair(p)
                if given > 0:
                    classes += given
                    presences += min(present, given)

        return GlobalStats(
            total_students=total,
            success_rate=round(good / evaluated * 100, 1) if evaluated else 0.0,
            global_attendance=round(presences / classes * 100, 1) if classes else 0.0,
            classes_this_month=len(self._records.completed_sessions(month=month)),
            grade_distribution=distribution,
        )

    def radar(self) -> RadarList:
        """Students worth a look: rising stars, support needed, attendance extremes."""
        radar = RadarList()
        for room, student in self._active_students(_RADAR_STATUSES):
            grades = [g for p in student.progress for g in (p.written, p.oral) if g]
            given = sum(stored_pair(p)[0] for p in student.progress)
            present = sum(stored_pair(p)[1] for p in student.progress)
            average = _mean(grades)
            rate = min(present, given) / given if given else 1.0

            if grades and average >= 9.0:
                radar.rising_stars.append(RadarEntry(student.full_name, room.name, round(average, 1)))
            if grades and 3.0 < average < 7.0:
                radar.needs_support.append(RadarEntry(student.full_name, room.name, round(average, 1)))
            if given > 5 and rate == 1.0:
                radar.perfect_attendance.append(RadarEntry(student.full_name, room.name, 100.0))
            if given > 5 and rate < 0.7:
                radar.low_attendance.append(RadarEntry(student.full_name, room.name, float(round(rate * 100))))
        return radar

    # ---- one room --------------------------------------------------------

    def class_stats(self, room_id: int) -> Optional[ClassStats]:
        room = self._records.get_room(room_id)
        if room is None:
            return None

        written: list[float] = []
        oral: list[float] = []
        ranked = [
            self._rank(student, written, oral)
            for student in room.students
            if student.status in EDITABLE_STATUSES
        ]
        ranked.sort(key=lambda r: r.score, reverse=True)

        return ClassStats(
            room_id=room.room_id,
            room_name=room.name,
            average_grade=_mean(r.average_grade for r in ranked if r.average_grade > 0),
            average_attendance=round(_mean(r.attendance for r in ranked), 1),
            average_written=_mean(written),
            average_oral=_mean(oral),
            top_students=ranked[:_TOP_STUDENTS],
            cohesion=self._cohesion([r.score for r in ranked]),
        )

    @staticmethod
    def _rank(student: Student, written: list[float], oral: list[float]) -> RankedStudent:
        book_averages: list[float] = []
        classes = presences = 0
        for p in student.progress:
            if p.written is not None:
                written.append(p.written)
            if p.oral is not None:
                oral.append(p.oral)
            # Participation alone does not make a book count toward the average.
            if p.written is not None or p.oral is not None:
                book_averages.append(_mean(g for g in (p.written, p.oral, p.participation) if g is not None))

            given, present = stored_pair(p)
            classes += given
            presences += min(present, given)

        average = _mean(book_averages)
        rate = presences / classes if classes else 0.0

        score = 0.0
        if book_averages:
            score = average * (_GRADE_WEIGHT / 10) + rate * _ATTENDANCE_WEIGHT
            if len(book_averages) == 1:
                score *= _SINGLE_BOOK_FACTOR
        elif classes > 0:
            score = rate * 100 * _ATTENDANCE_ONLY_FACTOR

        return RankedStudent(
            name=student.full_name,
            score=min(score, 100.0),
            average_grade=average,
            attendance=rate * 100,
        )

    @staticmethod
    def _cohesion(scores: list[float]) -> str:
        if len(scores) > 2:
            spread = statistics.pstdev(scores)
            if spread < 10:
                return "high"
            if spread < 20:
                return "medium"
            return "low"
        if scores:
            return "high (few students)"
        return "not calculated"

    # ---- one student -----------------------------------------------------

    def student_stats(self, *, room_id: int, student_id: int) -> Optional[StudentStats]:
        room = self._records.get_room(room_id)
        student = room.find_student(int(student_id)) if room else None
        if room is None or student is None:
            return None

        history = []
        for book in sorted(room.books, key=lambda b: book_number(b.name)):
            p = next((p for p in student.progress if p.book_id == book.book_id), None)
            if p is None or (p.written is None and p.oral is None):
                continue
            history.append(
                SkillPoint(abbreviate_book_name(book.name), _mean(g for g in (p.written or 0, p.oral or 0) if g > 0))
            )

        written = [p.written for p in student.progress if p.written]
        oral = [p.oral for p in student.progress if p.oral]
        participation = [p.participation for p in student.progress if p.participation]
        classes = sum(stored_pair(p)[0] for p in student.progress)
        presences = sum(stored_pair(p)[1] for p in student.progress)

        avg_written = _mean(written)
        avg_oral = _mean(oral)
        # Students with no written grade yet sit in the middle of the scale.
        neutral = 0.0 if written else 5.0
        avg_participation = _mean(participation) if participation else neutral
        frequency = min(presences, classes) / classes * 10 if classes > 0 else neutral

        return StudentStats(
            student_name=student.full_name,
            overall_average=round((avg_written + avg_oral) / 2, 1),
            skills=[
                SkillPoint("written", avg_written),
                SkillPoint("oral", avg_oral),
                SkillPoint("participation", avg_participation),
                SkillPoint("frequency", frequency),
            ],
            history=history,
            diagnosis=self._diagnosis(avg_written, avg_oral, frequency, classes),
        )

    @staticmethod
    def _diagnosis(written: float, oral: float, frequency: float, classes: int) -> str:
        if classes > 0 and frequency < 7:
            return "Attendance is holding back progress; reinforce regular attendance."
        if written < oral - 1.5:
            return "Strong oral communication; needs support with writing and grammar."
        if oral < written - 1.5:
            return "Solid written structure; needs conversation practice for fluency."
        if written > 8.5 and oral > 8.5:
            return "Excellent performance, consistently above the class."
        return "Balanced performance."
