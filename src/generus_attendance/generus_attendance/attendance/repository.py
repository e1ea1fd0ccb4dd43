from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceMark, StatusCounts


class AttendanceRepository(Protocol):
    """Read/correct side of the attendance ledger.

    Rows are only ever created together with their session (see KbmRepository).
    """

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceMark]:
        raise NotImplementedError

    def update_status(self, attendance_id: int, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    def list_by_session(self, session_id: int) -> Sequence[AttendanceMark]:
        raise NotImplementedError

    def list_by_member(self, member_id: int) -> Sequence[AttendanceMark]:
        raise NotImplementedError

    def list_by_date_range(self, *, start: date, end: date) -> Sequence[AttendanceMark]:
        raise NotImplementedError

    def count_by_status(
        self,
        *,
        member_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> StatusCounts:
        """Count marks per status; date bounds apply to the parent session date (inclusive)."""

        raise NotImplementedError
