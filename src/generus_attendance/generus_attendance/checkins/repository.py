from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import OnlineCheckIn


class CheckInRepository(Protocol):
    def exists_for_member_on(self, member_id: int, day: date) -> bool:
        raise NotImplementedError

    def create(
        self,
        *,
        member_id: int,
        barcode: str,
        teacher_id: Optional[int],
        sambung_group: str,
        scanned_at: datetime,
    ) -> int:
        """Insert a check-in for ``scanned_at.date()``.

        Raises ``DuplicateCheckInTodayError`` when the member already has a row
        for that day, whatever the application-level pre-check said.
        """

        raise NotImplementedError

    def list_checkins(
        self,
        *,
        sambung_group: Optional[str] = None,
        member_id: Optional[int] = None,
    ) -> Sequence[OnlineCheckIn]:
        raise NotImplementedError

    def count(
        self,
        *,
        member_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> int:
        raise NotImplementedError

    def recent(self, limit: int) -> Sequence[OnlineCheckIn]:
        raise NotImplementedError
