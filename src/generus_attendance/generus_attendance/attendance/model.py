from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceMark:
    """Domain entity: one member's status on one KBM session.

    ``member_name`` is a snapshot taken when the session was recorded and is not
    kept in sync with later profile edits.
    """

    attendance_id: int
    session_id: int
    member_id: int
    member_name: str
    status: AttendanceStatus
    created_at: Optional[datetime] = None
    session_date: Optional[date] = None


@dataclass(frozen=True)
class AttendanceEntry:
    """Input row for a new session: who attended and how."""

    member_id: int
    status: AttendanceStatus
    member_name: Optional[str] = None


@dataclass(frozen=True)
class StatusCounts:
    present: int = 0
    sick: int = 0
    permitted: int = 0
    absent: int = 0

    @property
    def total(self) -> int:
        return self.present + self.sick + self.permitted + self.absent


@dataclass(frozen=True)
class AttendanceStats:
    member_id: int
    total_sessions: int
    present_count: int
    sick_count: int
    permitted_count: int
    absent_count: int
    attendance_percentage: int


@dataclass(frozen=True)
class SystemSummary:
    total_attendance_records: int
    present_records: int
    average_attendance_rate: int
