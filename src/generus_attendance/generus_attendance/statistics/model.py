from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..attendance.model import AttendanceStats


@dataclass(frozen=True)
class DashboardStats:
    total_reports: int
    this_month_reports: int
    average_attendance: int
    active_teachers: int
    total_generus: int
    active_generus: int


@dataclass(frozen=True)
class MonthlyAttendance:
    month: int
    label: str
    generus_attendance: int
    teacher_attendance: int
    sessions: int
    check_ins: int


@dataclass(frozen=True)
class TeacherStats:
    teacher_id: int
    my_reports: int
    this_month_my_reports: int
    my_attendance_records: int
    active_generus_in_groups: int


@dataclass(frozen=True)
class MemberStats:
    attendance: AttendanceStats
    tests_taken: int
    average_score: Decimal
    check_ins: int


@dataclass(frozen=True)
class Activity:
    """One line of the dashboard activity feed."""

    kind: str
    ref_id: int
    occurred_at: datetime
    description: str
    sambung_group: Optional[str] = None
