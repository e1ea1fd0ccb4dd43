from __future__ import annotations

from datetime import date
from typing import Sequence

from ..common.validators import require_enum
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..core.result import as_result
from ..statistics.rounding import percentage
from .model import AttendanceMark, AttendanceStats, SystemSummary
from .repository import AttendanceRepository


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    @as_result("Attendance status updated")
    def update_status(self, attendance_id: int, status) -> AttendanceMark:
        """Post-hoc correction of a single mark."""

        new_status = require_enum(AttendanceStatus, status, "Attendance status")
        if not self._attendance.get_by_id(int(attendance_id)):
            raise NotFoundError("Attendance record not found")
        self._attendance.update_status(int(attendance_id), new_status)
        return self._attendance.get_by_id(int(attendance_id))

    def stats_for_member(self, member_id: int) -> AttendanceStats:
        counts = self._attendance.count_by_status(member_id=int(member_id))
        return AttendanceStats(
            member_id=int(member_id),
            total_sessions=counts.total,
            present_count=counts.present,
            sick_count=counts.sick,
            permitted_count=counts.permitted,
            absent_count=counts.absent,
            attendance_percentage=percentage(counts.present, counts.total),
        )

    def system_summary(self) -> SystemSummary:
        counts = self._attendance.count_by_status()
        return SystemSummary(
            total_attendance_records=counts.total,
            present_records=counts.present,
            average_attendance_rate=percentage(counts.present, counts.total),
        )

    def list_by_session(self, session_id: int) -> Sequence[AttendanceMark]:
        return self._attendance.list_by_session(int(session_id))

    def list_by_member(self, member_id: int) -> Sequence[AttendanceMark]:
        return self._attendance.list_by_member(int(member_id))

    def list_by_date_range(self, start: date, end: date) -> Sequence[AttendanceMark]:
        if start > end:
            return []
        return self._attendance.list_by_date_range(start=start, end=end)
