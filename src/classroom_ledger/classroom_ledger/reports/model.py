from __future__ import annotations

from dataclasses import dataclass, field

GRADE_BUCKET_LABELS = ("0-2", "2-4", "4-6", "6-8", "8-10", "no grade")


@dataclass(frozen=True)
class GlobalStats:
    total_students: int
    success_rate: float
    global_attendance: float
    classes_this_month: int
    # Counts per GRADE_BUCKET_LABELS entry.
    grade_distribution: list[int]


@dataclass(frozen=True)
class RankedStudent:
    name: str
    score: float
    average_grade: float
    attendance: float


@dataclass(frozen=True)
class ClassStats:
    room_id: int
    room_name: str
    average_grade: float
    average_attendance: float
    average_written: float
    average_oral: float
    top_students: list[RankedStudent]
    cohesion: str


@dataclass(frozen=True)
class SkillPoint:
    label: str
    value: float


@dataclass(frozen=True)
class StudentStats:
    """Skill profile of one student: written, oral, participation and frequency (0-10)."""

    student_name: str
    overall_average: float
    skills: list[SkillPoint]
    history: list[SkillPoint]
    diagnosis: str


@dataclass(frozen=True)
class RadarEntry:
    student_name: str
    room_name: str
    value: float


@dataclass(frozen=True)
class RadarList:
    rising_stars: list[RadarEntry] = field(default_factory=list)
    needs_support: list[RadarEntry] = field(default_factory=list)
    perfect_attendance: list[RadarEntry] = field(default_factory=list)
    low_attendance: list[RadarEntry] = field(default_factory=list)
