from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..attendance.model import AttendanceEntry
from .model import KbmSession


class KbmRepository(Protocol):
    def create_with_attendance(self, *, fields: Mapping[str, Any], attendance: Sequence[AttendanceEntry]) -> int:
        """Insert the session and all of its marks atomically. Returns session_id."""

        raise NotImplementedError

    def get_by_id(self, session_id: int) -> Optional[KbmSession]:
        raise NotImplementedError

    def update_fields(self, session_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete_with_attendance(self, session_id: int) -> bool:
        """Remove the session and its marks atomically."""

        raise NotImplementedError

    def list_sessions(
        self,
        *,
        teacher_id: Optional[int] = None,
        sambung_group: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[KbmSession]:
        raise NotImplementedError

    def count(
        self,
        *,
        teacher_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> int:
        raise NotImplementedError

    def groups_for_teacher(self, teacher_id: int) -> Sequence[str]:
        raise NotImplementedError

    def teacher_ids_between(self, *, start: date, end: date) -> set[int]:
        raise NotImplementedError

    def recent(self, limit: int) -> Sequence[KbmSession]:
        raise NotImplementedError
